#evaluate.py
import argparse
import json
from pathlib import Path
from typing import Sequence

import pandas as pd

from tabular_knn.training.evaluation import Evaluator, plot_confusion_matrix
from tabular_knn.training.splitter import TrainTestSplit
from utils.path import data_dirs, split_csv_paths, train_config_path


def _load_train_config(model_name: str, root: Path | None) -> dict:
    """Training configuration if ``train.py`` was run, else an empty dict."""
    path = train_config_path(model_name, root)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate k-NN on the saved train/test split")
    parser.add_argument("--model", type=str, default="knn", help="Model name whose train config supplies k and weights")
    parser.add_argument("--k", type=int, default=None, help="Number of neighbours (overrides the train config)")
    parser.add_argument("--train_csv", type=str, default=None, help="Train split CSV (defaults to clean_data/splitted_data)")
    parser.add_argument("--test_csv", type=str, default=None, help="Test split CSV (defaults to clean_data/splitted_data)")
    parser.add_argument("--n_jobs", type=int, default=None, help="Threads used for the distance computation")
    parser.add_argument("--results_file", type=str, default=None, help="Where to export per-row results")
    parser.add_argument("--plot", action="store_true", help="Save a confusion-matrix heatmap next to the results")
    parser.add_argument("--no_progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--root", type=str, default=None, help="Project root holding clean_data/")
    args = parser.parse_args(argv)
    root = Path(args.root) if args.root else None

    try:
        train_config = _load_train_config(args.model, root)
    except Exception as e:
        print(f"[ERROR] Loading training configuration: {e}")
        return 1
    k = args.k or train_config.get("k")
    if not k:
        print("[ERROR] No k given and no training configuration found. Pass --k or run train.py first!")
        return 1

    # Load split
    try:
        default_train, default_test = split_csv_paths(root)
        split = TrainTestSplit.read(args.train_csv or default_train, args.test_csv or default_test)
        weights = train_config.get("weights")
        if weights and len(weights) == split.train.number_of_attributes():
            split.train.set_weights(weights)
        elif weights:
            print("[WARN] Saved weights do not match the split columns; using the split's own weights.")
        print(f"[INFO] Train samples: {split.train.number_of_cases()}, "
              f"Test samples: {split.test.number_of_cases()}")
    except Exception as e:
        print(f"[ERROR] Loading split data: {e}")
        print("Make sure to run data_splitter.py first!")
        return 1

    # Classify test rows
    try:
        evaluator = Evaluator(split, int(k), n_jobs=args.n_jobs,
                              tie_break=train_config.get("tie_break", "first_seen"),
                              progress=not args.no_progress)
        accuracy = evaluator.accuracy()
        matrix = evaluator.confusion_matrix()
    except Exception as e:
        print(f"[ERROR] During evaluation: {e}")
        return 1

    print(f"\n=== Evaluation on {split.test.number_of_cases()} samples (k={evaluator.k}) ===")
    print("Accuracy :", round(accuracy, 4))
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print("\nConfusion matrix (rows = actual, columns = predicted):\n", matrix)

    # Export results
    try:
        art_dir, _, _ = data_dirs(root)
        results_path = Path(args.results_file) if args.results_file else art_dir / f"{args.model}.results.csv"
        saved = evaluator.export_results(results_path)
        print(f"\n[OK] Saved results -> {saved}")
        if args.plot:
            plot_path = plot_confusion_matrix(matrix, saved.with_suffix(".confusion.png"),
                                              title=f"Confusion matrix (k={evaluator.k})")
            print(f"[OK] Saved confusion matrix plot -> {plot_path}")
    except Exception as e:
        print(f"[ERROR] Saving results: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
