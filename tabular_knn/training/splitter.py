# tabular_knn/training/splitter.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import numpy as np

from ..data.dataset import Dataset
from ..data.io import read_csv, write_csv


def _train_size(n_cases: int, train_fraction: float) -> int:
    if not 0.0 < train_fraction <= 1.0:
        raise ValueError(f"train_fraction must lie in (0, 1], got {train_fraction}")
    # round first so 10 * 0.7 does not become 8 rows
    return min(n_cases, math.ceil(round(n_cases * train_fraction, 9)))


@dataclass
class TrainTestSplit:
    """Two disjoint datasets sharing the schema and class vocabulary of their source."""

    train: Dataset
    test: Dataset
    classes: List[str] = field(default_factory=list)

    @classmethod
    def sequential(cls, dataset: Dataset, train_fraction: float) -> "TrainTestSplit":
        """The first rows go to train, the remainder to test."""
        n = dataset.number_of_cases()
        cut = _train_size(n, train_fraction)
        train, test = dataset.empty_schema_copy(), dataset.empty_schema_copy()
        for i in range(n):
            (train if i < cut else test).add_row(dataset.row_at(i))
        return cls(train, test, dataset.distinct_labels())

    @classmethod
    def random(cls, dataset: Dataset, train_fraction: float, seed: int) -> "TrainTestSplit":
        """Seeded random split; train keeps draw order, test keeps source order."""
        n = dataset.number_of_cases()
        cut = _train_size(n, train_fraction)
        rng = np.random.default_rng(seed)
        picked = [int(i) for i in rng.permutation(n)[:cut]]
        chosen = set(picked)
        train, test = dataset.empty_schema_copy(), dataset.empty_schema_copy()
        for i in picked:
            train.add_row(dataset.row_at(i))
        for i in range(n):
            if i not in chosen:
                test.add_row(dataset.row_at(i))
        return cls(train, test, dataset.distinct_labels())

    @classmethod
    def from_datasets(cls, train: Dataset, test: Dataset) -> "TrainTestSplit":
        """Pair two existing datasets; classes are train's then test's new ones."""
        classes = list(dict.fromkeys([*train.distinct_labels(), *test.distinct_labels()]))
        return cls(train, test, classes)

    @classmethod
    def read(cls, train_path: str | Path, test_path: str | Path) -> "TrainTestSplit":
        return cls.from_datasets(read_csv(train_path), read_csv(test_path))

    def write(self, train_path: str | Path, test_path: str | Path) -> tuple[Path, Path]:
        return write_csv(self.train, train_path), write_csv(self.test, test_path)
