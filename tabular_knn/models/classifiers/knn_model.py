# tabular_knn/models/classifiers/knn_model.py
from ..base import BaseModel
from .knn import KNNClassifier


class KNNModel(BaseModel):
    def __init__(self, n_neighbors: int = 5, n_jobs: int | None = None,
                 tie_break: str = "first_seen"):
        super().__init__()
        self.n_neighbors = n_neighbors
        self.n_jobs = n_jobs
        self.tie_break = tie_break
        # fail on a bad k here rather than at the first prediction
        self._build_estimator()

    def _build_estimator(self) -> KNNClassifier:
        return KNNClassifier(self.n_neighbors, n_jobs=self.n_jobs, tie_break=self.tie_break)
