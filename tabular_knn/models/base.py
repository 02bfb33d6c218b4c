from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List
from abc import ABC, abstractmethod
import joblib

from ..data.dataset import Dataset
from ..data.instance import Instance
from ..preprocess.strategies import PreprocessingMode, prepare_query
from .classifiers.knn import KNNClassifier


@dataclass
class FitArtifacts:
    training: Dataset                      # raw, untransformed rows
    mode: PreprocessingMode = PreprocessingMode.RAW
    classes: tuple[str, ...] = ()


class BaseModel(ABC):
    """Template for models: fit/predict/save/load over tabular datasets."""
    def __init__(self):
        self.artifacts: FitArtifacts | None = None

    @abstractmethod
    def _build_estimator(self) -> KNNClassifier:
        """Return the core classifier."""

    def fit(self, dataset: Dataset, mode: PreprocessingMode | int | str = PreprocessingMode.RAW) -> "BaseModel":
        # Keep the raw rows; each query is preprocessed together with them
        mode = PreprocessingMode.parse(mode)
        self.artifacts = FitArtifacts(
            training=dataset.copy(),
            mode=mode,
            classes=tuple(dataset.distinct_labels()),
        )
        return self

    def predict(self, queries: Iterable[Instance]) -> List[str]:
        if not self.artifacts:
            raise RuntimeError("Model not fitted.")
        estimator = self._build_estimator()
        out: List[str] = []
        for query in queries:
            training, prepared = prepare_query(self.artifacts.training, query, self.artifacts.mode)
            out.append(estimator.classify(training, prepared))
        return out

    def predict_one(self, query: Instance) -> str:
        return self.predict([query])[0]

    def save(self, path: str | Path) -> Path:
        if not self.artifacts:
            raise RuntimeError("Nothing to save. Fit the model first.")
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self, path, compress=3)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "BaseModel":
        """Load a previously saved model."""
        obj = joblib.load(path)
        if not isinstance(obj, cls):
            raise TypeError(f"{path} holds a {type(obj).__name__}, expected {cls.__name__}")
        return obj
