# train.py
import argparse
import json
from pathlib import Path
from typing import Sequence

from tabular_knn.data.io import read_csv
from tabular_knn.models.factory import ModelFactory
from tabular_knn.preprocess.strategies import PreprocessingMode, PreprocessorFactory
from utils.path import data_dirs, model_artifact, split_config_path, train_config_path

MODEL_CHOICES = ModelFactory.choices()
MODE_CHOICES = PreprocessorFactory.choices()

def setup_paths(root: Path | None = None):
    art_dir, data_dir, splits_dir = data_dirs(root)
    art_dir.mkdir(parents=True, exist_ok=True)
    return art_dir, splits_dir, data_dir

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fit a weighted k-nearest-neighbours model on a tabular dataset")

    parser.add_argument("--model", type=str, default="knn", choices=MODEL_CHOICES,
                        help=f"Name of the model to train. Choices: {MODEL_CHOICES}")

    parser.add_argument("--k", type=int, default=5,
                        help="Number of neighbours taking part in the vote")

    parser.add_argument("--data_file", type=str, default=None,
                        help="Raw CSV to train on (defaults to the one recorded in split_config.json)")

    parser.add_argument("--mode", type=str, default=None, choices=MODE_CHOICES,
                        help="Preprocessing mode (defaults to the one recorded in split_config.json)")

    parser.add_argument("--weights", type=float, nargs="+", default=None,
                        help="One weight in [0, 1] per attribute, label column included")

    parser.add_argument("--n_jobs", type=int, default=None,
                        help="Threads used for the distance computation")

    parser.add_argument("--tie_break", type=str, default="first_seen",
                        choices=("first_seen", "distance"),
                        help="How tied votes are resolved")

    parser.add_argument("--root", type=str, default=None,
                        help="Project root holding clean_data/ (defaults to the detected root)")
    return parser

def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    root = Path(args.root) if args.root else None

    print(f"[INFO] Starting training with {args.model} model...")
    print("[INFO] Configuration:")
    print(f"   - Model: {args.model}")
    print(f"   - k: {args.k}")
    print(f"   - Tie break: {args.tie_break}")

    # Setup paths relative to the project root
    try:
        art_dir, csv_out_dir, data_dir = setup_paths(root)
        print(f"[INFO] Artifacts dir: {art_dir}")
    except Exception as e:
        print(f"[ERROR] Setting up paths: {e}")
        return 1

    # Load split configuration; command-line values win
    split_config = {}
    config_path = split_config_path(root)
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                split_config = json.load(f)
            print(f"[INFO] Loaded split configuration -> {config_path}")
        except Exception as e:
            print(f"[ERROR] Loading split configuration: {e}")
            return 1
    data_file = args.data_file or split_config.get("data_file")
    mode_name = args.mode or split_config.get("mode", "raw")
    if not data_file:
        print("[ERROR] No data file given and no split_config.json found.")
        print("Pass --data_file or run utils/data_splitter.py first!")
        return 1

    # Load raw data; queries are preprocessed together with it at predict time
    try:
        csv_path = Path(data_file)
        if not csv_path.is_absolute() and not csv_path.exists():
            csv_path = data_dir / data_file
        dataset = read_csv(csv_path)
        if args.weights is not None:
            dataset.set_weights(args.weights)
        mode = PreprocessingMode.parse(mode_name)
        print(f"[INFO] Loaded {dataset.number_of_cases()} rows from {csv_path}")
        print(f"   - Mode: {mode.name.lower()}")
        print(f"   - Weights: {dataset.weights()}")
    except Exception as e:
        print(f"[ERROR] Loading training data: {e}")
        return 1

    # Create model using ModelFactory
    try:
        model = ModelFactory.create(args.model, n_neighbors=args.k,
                                    n_jobs=args.n_jobs, tie_break=args.tie_break)
        print(f"[OK] Created {args.model} model")
    except Exception as e:
        print(f"[ERROR] Failed to create {args.model} model: {e}")
        return 1

    # Train model
    try:
        model.fit(dataset, mode=mode)
        print(f"[OK] Model fitted on {dataset.number_of_cases()} rows, "
              f"classes: {list(model.artifacts.classes)}")
    except Exception as e:
        print(f"[ERROR] During model training: {e}")
        return 1

    # Save trained model and configuration
    try:
        saved_path = model.save(model_artifact(args.model, root))
        print(f"[OK] Saved model -> {saved_path}")

        config_out = train_config_path(args.model, root)
        train_config = {
            "model_name": args.model,
            "k": args.k,
            "n_jobs": args.n_jobs,
            "tie_break": args.tie_break,
            "data_file": str(csv_path),
            "mode": mode.name.lower(),
            "weights": dataset.weights(),
            "classes": list(model.artifacts.classes),
            "train_samples": dataset.number_of_cases(),
        }
        with open(config_out, 'w', encoding='utf-8') as f:
            json.dump(train_config, f, ensure_ascii=False, indent=2)
        print(f"[OK] Saved training config -> {config_out}")
    except Exception as e:
        print(f"[ERROR] Saving artifacts: {e}")
        return 1

    print("[OK] Training completed successfully!")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
