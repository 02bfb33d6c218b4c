# utils/data_splitter.py
import argparse
import json
from pathlib import Path
from typing import Sequence

from tabular_knn.data.io import read_csv
from tabular_knn.preprocess.strategies import PreprocessingMode, PreprocessorFactory, preprocess
from tabular_knn.training.splitter import TrainTestSplit
from utils.path import data_dirs, split_config_path, split_csv_paths

DEFAULT_DATA_FILE = "dataset.csv"
DEFAULT_TRAIN_FRACTION = 0.7
DEFAULT_SEED = 42
MODE_CHOICES = PreprocessorFactory.choices()

def setup_paths(args, root: Path | None = None):
    """Setup file paths based on arguments"""
    art_dir, data_dir, csv_out_dir = data_dirs(root)
    csv_path = Path(args.data_file)
    if not csv_path.is_absolute() and not csv_path.exists():
        csv_path = data_dir / args.data_file
    # Ensure the output directories exist
    art_dir.mkdir(parents=True, exist_ok=True)
    csv_out_dir.mkdir(parents=True, exist_ok=True)
    return csv_path, art_dir, csv_out_dir

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Preprocess a tabular CSV and split it into train/test partitions")

    parser.add_argument("--data_file", type=str, default=DEFAULT_DATA_FILE,
                        help="CSV file, absolute or relative to clean_data/data")

    parser.add_argument("--mode", type=str, default="raw", choices=MODE_CHOICES,
                        help="Preprocessing applied to the numeric columns before splitting")

    parser.add_argument("--train_fraction", type=float, default=DEFAULT_TRAIN_FRACTION,
                        help="Fraction of rows used for training, in (0, 1]")

    parser.add_argument("--random", action="store_true",
                        help="Draw the train rows at random instead of taking the first ones")

    parser.add_argument("--seed", type=int, default=DEFAULT_SEED,
                        help="Random seed for reproducibility (with --random)")

    parser.add_argument("--root", type=str, default=None,
                        help="Project root holding clean_data/ (defaults to the detected root)")
    return parser

def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    root = Path(args.root) if args.root else None

    print("[INFO] Starting data preparation and splitting...")
    print("[INFO] Configuration:")
    print(f"   - Data file: {args.data_file}")
    print(f"   - Mode: {args.mode}")
    print(f"   - Train fraction: {args.train_fraction}")
    print(f"   - Strategy: {'random (seed ' + str(args.seed) + ')' if args.random else 'sequential'}")

    # Setup paths
    try:
        csv_path, art_dir, csv_out_dir = setup_paths(args, root)
        print(f"[INFO] Data path: {csv_path}")
        print(f"[INFO] Artifacts dir: {art_dir}")
        print(f"[INFO] Output dir: {csv_out_dir}")
    except Exception as e:
        print(f"[ERROR] Setting up paths: {e}")
        return 1

    # Load data
    try:
        dataset = read_csv(csv_path)
        print(f"[INFO] Loaded {dataset.number_of_cases()} rows, {dataset.number_of_attributes()} attributes")
    except Exception as e:
        print(f"[ERROR] Loading data: {e}")
        return 1

    # Preprocess + split
    try:
        mode = PreprocessingMode.parse(args.mode)
        prepared = preprocess(dataset, mode)
        if args.random:
            split = TrainTestSplit.random(prepared, args.train_fraction, args.seed)
        else:
            split = TrainTestSplit.sequential(prepared, args.train_fraction)
        print(f"[INFO] Classes: {split.classes}")
        print(f"[INFO] Train samples: {split.train.number_of_cases()}, "
              f"Test samples: {split.test.number_of_cases()}")
    except Exception as e:
        print(f"[ERROR] Splitting data: {e}")
        return 1

    # Save split data
    try:
        train_path, test_path = split.write(*split_csv_paths(root))
        print(f"[OK] Saved training split -> {train_path}")
        print(f"[OK] Saved test split -> {test_path}")

        config_path = split_config_path(root)
        config = {
            "data_file": str(csv_path),
            "mode": mode.name.lower(),
            "train_fraction": args.train_fraction,
            "random": args.random,
            "seed": args.seed if args.random else None,
            "classes": split.classes,
            "attributes": dataset.attribute_names(),
            "train_samples": split.train.number_of_cases(),
            "test_samples": split.test.number_of_cases(),
            "total_samples": dataset.number_of_cases(),
        }
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(config, f, ensure_ascii=False, indent=2)
        print(f"[OK] Saved split config -> {config_path}")
    except Exception as e:
        print(f"[ERROR] Saving split data: {e}")
        return 1

    print("[OK] Data preparation and splitting completed successfully!")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
