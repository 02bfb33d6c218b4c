# scripts/predict.py
import argparse
from pathlib import Path
from typing import Sequence

from tabular_knn.data.instance import Instance
from tabular_knn.models.base import BaseModel
from utils.path import model_artifact


def _parse_queries(raw: Sequence[str]) -> list[Instance]:
    """Each entry is one comma-separated record of feature values."""
    return [Instance.parse(text, has_label=False) for text in raw if text.strip()]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Classify new records with a trained model")
    parser.add_argument("--values", type=str, nargs="+", required=True,
                        help='Feature values of one record per argument, e.g. "1.5,1.5"')
    parser.add_argument("--model", type=str, default="knn", help="Name of the trained model")
    parser.add_argument("--model_file", type=str, default=None,
                        help="Path to the joblib artifact (defaults to clean_data/artifacts/<model>.joblib)")
    parser.add_argument("--root", type=str, default=None, help="Project root holding clean_data/")
    args = parser.parse_args(argv)

    model_path = Path(args.model_file) if args.model_file else model_artifact(
        args.model, Path(args.root) if args.root else None)
    print("[INFO] loading:", model_path.resolve())
    try:
        model = BaseModel.load(model_path)
    except Exception as e:
        print(f"[ERROR] Loading model: {e}")
        return 1

    try:
        queries = _parse_queries(args.values)
        labels = model.predict(queries)
    except Exception as e:
        print(f"[ERROR] During prediction: {e}")
        return 1

    for query, label in zip(queries, labels):
        print("\n---")
        print("Values:", ", ".join(str(v) for v in query))
        print("Predicted class:", label)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
