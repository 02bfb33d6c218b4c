# tabular_knn/data/vector.py
from __future__ import annotations

from typing import Iterable, Iterator, List

import numpy as np

from ..errors import DimensionMismatch, EmptyVectorError


class NumericVector:
    """Resizable, ordered sequence of floats.

    Arithmetic between two vectors requires equal lengths; a mismatch raises
    ``DimensionMismatch`` instead of broadcasting. Each owner (attribute,
    instance) keeps its own vector, ``copy()`` before sharing.
    """

    def __init__(self, values: Iterable[float] | None = None) -> None:
        self._values: List[float] = [float(v) for v in values] if values is not None else []

    @classmethod
    def zeros(cls, size: int) -> "NumericVector":
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        return cls([0.0] * size)

    # ------------------------------------------------------------------
    # Sequence protocol

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __getitem__(self, index: int) -> float:
        return self.get(index)

    def __setitem__(self, index: int, value: float) -> None:
        self.set(index, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NumericVector):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"NumericVector({self._values})"

    def __str__(self) -> str:
        return str(self._values)

    def size(self) -> int:
        return len(self._values)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._values):
            raise IndexError(f"index {index} out of range [0, {len(self._values)})")

    def _check_same_size(self, other: "NumericVector") -> None:
        if len(self) != len(other):
            raise DimensionMismatch(
                f"vectors must have the same size, got {len(self)} and {len(other)}"
            )

    # ------------------------------------------------------------------
    # Element access / mutation

    def get(self, index: int) -> float:
        self._check_index(index)
        return self._values[index]

    def set(self, index: int, value: float) -> None:
        self._check_index(index)
        self._values[index] = float(value)

    def append(self, value: float) -> None:
        self._values.append(float(value))

    def remove(self, index: int) -> None:
        self._check_index(index)
        del self._values[index]

    def clear(self) -> None:
        self._values.clear()

    def concat(self, other: "NumericVector") -> None:
        self._values.extend(other._values)

    def contains(self, value: float) -> bool:
        return float(value) in self._values

    def copy(self) -> "NumericVector":
        return NumericVector(self._values)

    def tolist(self) -> List[float]:
        return list(self._values)

    def to_numpy(self) -> np.ndarray:
        return np.asarray(self._values, dtype=float)

    # ------------------------------------------------------------------
    # Arithmetic

    def add(self, other: "NumericVector") -> None:
        """In-place elementwise sum."""
        self._check_same_size(other)
        self._values = [a + b for a, b in zip(self._values, other._values)]

    def sum(self, other: "NumericVector | float") -> "NumericVector":
        """Return ``self + other`` as a new vector; ``other`` may be a scalar."""
        if isinstance(other, NumericVector):
            self._check_same_size(other)
            return NumericVector(a + b for a, b in zip(self._values, other._values))
        return NumericVector(a + float(other) for a in self._values)

    def multiply(self, scalar: float) -> None:
        self._values = [v * scalar for v in self._values]

    def dot(self, other: "NumericVector") -> float:
        self._check_same_size(other)
        return float(np.dot(self.to_numpy(), other.to_numpy()))

    def norm(self) -> float:
        return float(np.sqrt(sum(v * v for v in self._values)))

    # ------------------------------------------------------------------
    # Statistics

    def min(self) -> float:
        if not self._values:
            raise EmptyVectorError("min() of an empty vector")
        return min(self._values)

    def max(self) -> float:
        if not self._values:
            raise EmptyVectorError("max() of an empty vector")
        return max(self._values)

    def argmax(self) -> int:
        """Index of the first maximum."""
        if not self._values:
            raise EmptyVectorError("argmax() of an empty vector")
        return int(np.argmax(self.to_numpy()))

    def average(self) -> float:
        if not self._values:
            raise EmptyVectorError("average() of an empty vector")
        return float(np.mean(self.to_numpy()))

    def normalize(self) -> None:
        """Min-max scale in place to [0, 1].

        A constant vector (max == min) becomes all NaN. An empty vector is
        left as is.
        """
        if not self._values:
            return
        arr = self.to_numpy()
        lo, hi = arr.min(), arr.max()
        with np.errstate(divide="ignore", invalid="ignore"):
            scaled = (arr - lo) / (hi - lo)
        self._values = scaled.tolist()
