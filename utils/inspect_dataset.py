#inspect_dataset.py
import argparse
from pathlib import Path
from typing import Sequence

import pandas as pd

from tabular_knn.data.io import read_csv
from tabular_knn.models.base import BaseModel


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Describe a dataset CSV or the training set inside a model artifact")
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--csv_path", type=str, help="Dataset CSV to describe")
    src.add_argument("--model_file", type=str, help="Joblib model artifact to describe")
    args = parser.parse_args(argv)

    try:
        if args.csv_path:
            dataset = read_csv(args.csv_path)
            print(f"[INFO] {Path(args.csv_path).name}")
        else:
            model = BaseModel.load(args.model_file)
            if model.artifacts is None:
                print("No training set stored in artifact.")
                return 1
            dataset = model.artifacts.training
            print(f"[INFO] {type(model).__name__}, mode: {model.artifacts.mode.name.lower()}")
            print("Artifact classes:", list(model.artifacts.classes))
    except Exception as e:
        print(f"[ERROR] Loading dataset: {e}")
        return 1

    print("Rows:", dataset.number_of_cases(), "Attributes:", dataset.number_of_attributes())
    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(dataset.describe())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
