# tabular_knn/models/classifiers/knn.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed

from ...data.dataset import Dataset
from ...data.instance import Instance
from ...data.vector import NumericVector
from ...errors import DimensionMismatch, EmptyTrainingSetError, LabelledQueryError

TIE_BREAKS = ("first_seen", "distance")


def weighted_distance(a: NumericVector, b: NumericVector, weights: Sequence[float]) -> float:
    """``sqrt(sum(((a_i - b_i) * w_i) ** 2))``.

    Both vectors must already be label free and of equal length, with one
    weight per component.
    """
    if len(a) != len(b):
        raise DimensionMismatch(f"feature vectors differ in length: {len(a)} vs {len(b)}")
    if len(weights) != len(a):
        raise DimensionMismatch(f"expected {len(a)} weights, got {len(weights)}")
    diff = (a.to_numpy() - b.to_numpy()) * np.asarray(weights, dtype=float)
    return float(np.sqrt(np.sum(diff * diff)))


def euclidean_distance(a: NumericVector, b: NumericVector) -> float:
    return weighted_distance(a, b, [1.0] * len(a))


class KNNClassifier:
    """Weighted k-nearest-neighbours over a :class:`Dataset`.

    Parameters
    ----------
    k : int
        Number of neighbours, at least 1. When the training set holds fewer
        rows than ``k`` every row takes part in the vote.
    n_jobs : int or None, default=None
        Worker threads for the distance computation. ``None`` or ``1`` runs
        sequentially; other values are handed to ``joblib.Parallel``.
    tie_break : {"first_seen", "distance"}, default="first_seen"
        How equal vote counts are resolved. ``"first_seen"`` returns the
        label met first among the neighbours; ``"distance"`` prefers the
        label whose neighbours have the smallest summed distance.
    """

    def __init__(self, k: int, *, n_jobs: Optional[int] = None, tie_break: str = "first_seen") -> None:
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise ValueError(f"k must be a positive integer, got {k!r}")
        if tie_break not in TIE_BREAKS:
            raise ValueError(f"Unknown tie_break '{tie_break}'. Try one of: {', '.join(TIE_BREAKS)}")
        self.k = k
        self.n_jobs = n_jobs
        self.tie_break = tie_break

    # ------------------------------------------------------------------
    # Distances

    def distances(self, training: Dataset, query: Instance) -> NumericVector:
        """Distance from ``query`` to every training row, in row order.

        ``query`` holds one value per training feature column and no label;
        its numeric features are read at the training set's quantitative
        column positions.
        """
        n = training.number_of_cases()
        if n == 0:
            raise EmptyTrainingSetError("training set has no rows")
        if query.has_label:
            raise LabelledQueryError(
                "query still carries a class label; build it with has_label=False "
                "or call without_label() first"
            )
        weights = training.feature_weights()
        q = training.query_feature_vector(query)
        rows = [training.feature_vector_at(i) for i in range(n)]
        if self.n_jobs in (None, 1):
            out = [weighted_distance(row, q, weights) for row in rows]
        else:
            out = Parallel(n_jobs=self.n_jobs, prefer="threads")(
                delayed(weighted_distance)(row, q, weights) for row in rows
            )
        return NumericVector(out)

    # ------------------------------------------------------------------
    # Selection

    @staticmethod
    def select_neighbours(distances: NumericVector, k: int) -> List[int]:
        """Row indices of the ``k`` smallest distances, without a full sort.

        The first ``k`` rows seed the candidate slots. A later row replaces
        the current worst candidate only when strictly closer; with several
        equally worst candidates the one in the lowest slot goes first.
        """
        n = len(distances)
        if k >= n:
            return list(range(n))
        slots = list(range(k))
        slot_distances = NumericVector(distances.get(i) for i in slots)
        worst = slot_distances.argmax()
        for i in range(k, n):
            d = distances.get(i)
            if d < slot_distances.get(worst):
                slots[worst] = i
                slot_distances.set(worst, d)
                worst = slot_distances.argmax()
        return slots

    def majority_class(self, labels: Sequence[str], distances: Optional[Sequence[float]] = None) -> str:
        """Most frequent label; ties go to the label seen first.

        With ``tie_break="distance"`` and ``distances`` given, tied labels are
        ranked by the sum of their neighbours' distances instead.
        """
        if not labels:
            raise EmptyTrainingSetError("no neighbours to vote")
        counts: Dict[str, int] = {}
        for label in labels:
            counts[label] = counts.get(label, 0) + 1
        best = max(counts.values())
        tied = [label for label, count in counts.items() if count == best]
        if len(tied) == 1 or self.tie_break == "first_seen" or distances is None:
            return tied[0]
        totals = {label: 0.0 for label in tied}
        for label, d in zip(labels, distances):
            if label in totals:
                totals[label] += d
        # min keeps the first-seen label among equal totals
        return min(tied, key=lambda label: totals[label])

    # ------------------------------------------------------------------
    # Public API

    def kneighbors(self, training: Dataset, query: Instance) -> Tuple[List[int], List[float]]:
        dist = self.distances(training, query)
        idx = self.select_neighbours(dist, self.k)
        return idx, [dist.get(i) for i in idx]

    def classify(self, training: Dataset, query: Instance) -> str:
        idx, dist = self.kneighbors(training, query)
        labels = training.labels()
        return self.majority_class([labels[i] for i in idx], dist)

    def classify_many(self, training: Dataset, queries: Sequence[Instance]) -> List[str]:
        return [self.classify(training, q) for q in queries]

    def __repr__(self) -> str:
        return f"KNNClassifier(k={self.k}, n_jobs={self.n_jobs}, tie_break={self.tie_break!r})"
