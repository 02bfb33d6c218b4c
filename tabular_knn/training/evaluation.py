# tabular_knn/training/evaluation.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from sklearn.metrics import accuracy_score, confusion_matrix
from tqdm import tqdm

from ..errors import EmptyDatasetError
from ..models.classifiers.knn import KNNClassifier
from .splitter import TrainTestSplit


class Evaluator:
    """Classify every test row of a split against its train rows.

    The split is expected to be preprocessed already; rows are compared as
    they are stored. Predictions are computed once and cached.
    """

    def __init__(self, split: TrainTestSplit, k: int, *, n_jobs: Optional[int] = None,
                 tie_break: str = "first_seen", progress: bool = True) -> None:
        self.split = split
        self.classifier = KNNClassifier(k, n_jobs=n_jobs, tie_break=tie_break)
        self.progress = progress
        self._predictions: Optional[List[str]] = None

    @property
    def k(self) -> int:
        return self.classifier.k

    def actual(self) -> List[str]:
        return self.split.test.labels()

    def predictions(self) -> List[str]:
        if self._predictions is None:
            test = self.split.test
            out: List[str] = []
            for row in tqdm(test.rows(), total=test.number_of_cases(),
                            desc="Classifying", disable=not self.progress):
                out.append(self.classifier.classify(self.split.train, row.without_label()))
            self._predictions = out
        return self._predictions

    def _require_test_rows(self) -> None:
        if self.split.test.number_of_cases() == 0:
            raise EmptyDatasetError("test set has no rows")

    def accuracy(self) -> float:
        self._require_test_rows()
        return float(accuracy_score(self.actual(), self.predictions()))

    def confusion_matrix(self) -> pd.DataFrame:
        """Counts indexed by class; rows are actual labels, columns predicted."""
        self._require_test_rows()
        classes = list(self.split.classes)
        matrix = confusion_matrix(self.actual(), self.predictions(), labels=classes)
        return pd.DataFrame(
            matrix,
            index=pd.Index(classes, name="actual"),
            columns=pd.Index(classes, name="predicted"),
        )

    def results_frame(self) -> pd.DataFrame:
        actual = self.actual()
        predicted = self.predictions()
        return pd.DataFrame({
            "index": range(len(actual)),
            "actual": actual,
            "predicted": predicted,
            "correct": [a == p for a, p in zip(actual, predicted)],
        })

    def export_results(self, path: str | Path) -> Path:
        """Per-row results as CSV, followed by a global accuracy line."""
        self._require_test_rows()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame = self.results_frame()
        with open(path, "w", encoding="utf-8", newline="") as f:
            frame.to_csv(f, index=False)
            f.write(f"global_accuracy,{self.accuracy() * 100:.2f}%\n")
        return path

    def report(self) -> Dict[str, Any]:
        return {
            "k": self.k,
            "accuracy": self.accuracy(),
            "train_samples": self.split.train.number_of_cases(),
            "test_samples": self.split.test.number_of_cases(),
            "classes": list(self.split.classes),
        }


def plot_confusion_matrix(matrix: pd.DataFrame, out_path: str | Path | None = None,
                          title: str = "Confusion matrix") -> Path | None:
    """Heatmap of a confusion matrix; saved to ``out_path`` or shown."""
    import matplotlib.pyplot as plt
    import seaborn as sns

    fig, ax = plt.subplots(figsize=(1.2 * len(matrix.columns) + 3, 1.0 * len(matrix.index) + 2))
    sns.heatmap(matrix, annot=True, fmt="d", cmap="Blues", cbar=False, ax=ax,
                linewidths=1.0, vmin=0)
    ax.tick_params(axis="x", labelrotation=45)
    ax.tick_params(axis="y", labelrotation=0)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    ax.set_title(title)
    fig.tight_layout()
    if out_path is None:
        plt.show()
        plt.close(fig)
        return None
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
    return out_path
