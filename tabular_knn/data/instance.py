# tabular_knn/data/instance.py
from __future__ import annotations

import math
import numbers
from typing import Any, Iterable, Iterator, List

from ..errors import MissingLabelError
from .vector import NumericVector


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def parse_value(token: str) -> float | str:
    """Turn a raw token into a float when it parses, else keep the stripped text."""
    token = token.strip()
    try:
        return float(token)
    except ValueError:
        return token


class Instance:
    """One row of data: feature values followed by an optional class label.

    The values are copied on construction, so an instance never aliases the
    storage of the dataset it was read from. ``has_label`` defaults to True,
    so the last value is read as the label; build classification queries
    with ``has_label=False``.
    """

    def __init__(self, values: Iterable[Any] = (), *, has_label: bool = True) -> None:
        self._values: List[Any] = list(values)
        self.has_label = has_label and len(self._values) > 0

    @classmethod
    def parse(cls, text: str, *, has_label: bool = True) -> "Instance":
        """Build an instance from a comma separated line."""
        tokens = text.split(",")
        values: List[Any] = [parse_value(t) for t in tokens]
        if has_label and values:
            # the label is always kept as text, even if it looks numeric
            values[-1] = tokens[-1].strip()
        return cls(values, has_label=has_label)

    # ------------------------------------------------------------------

    @property
    def values(self) -> List[Any]:
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __getitem__(self, index: int) -> Any:
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instance):
            return NotImplemented
        return self._values == other._values and self.has_label == other.has_label

    def __repr__(self) -> str:
        return f"Instance({self._values!r}, has_label={self.has_label})"

    def __str__(self) -> str:
        return str(self._values)

    def copy(self) -> "Instance":
        return Instance(self._values, has_label=self.has_label)

    # ------------------------------------------------------------------
    # Label handling

    @property
    def label(self) -> str:
        if not self.has_label:
            raise MissingLabelError("instance has no class label")
        return str(self._values[-1])

    def drop_label(self) -> None:
        """Remove the trailing label in place."""
        if not self.has_label:
            raise MissingLabelError("instance has no class label to drop")
        self._values.pop()
        self.has_label = False

    def without_label(self) -> "Instance":
        clone = self.copy()
        if clone.has_label:
            clone.drop_label()
        return clone

    def with_label(self, label: str) -> "Instance":
        return Instance([*self.feature_values(), label], has_label=True)

    def feature_values(self) -> List[Any]:
        return self._values[:-1] if self.has_label else list(self._values)

    def feature_vector(self) -> NumericVector:
        """Numeric feature values only; the label and text values are skipped."""
        return NumericVector(v for v in self.feature_values() if _is_number(v))

    # ------------------------------------------------------------------
    # Self transforms

    def _replace_numeric(self, transformed: NumericVector) -> None:
        it = iter(transformed)
        n_features = len(self._values) - 1 if self.has_label else len(self._values)
        for i in range(n_features):
            if _is_number(self._values[i]):
                self._values[i] = next(it)

    def normalize(self) -> None:
        """Min-max scale the numeric features of this row; the label is kept."""
        vec = self.feature_vector()
        vec.normalize()
        self._replace_numeric(vec)

    def standardize(self) -> None:
        """z-score the numeric features of this row (sample stddev).

        No-op with fewer than two numeric values or zero spread.
        """
        vec = self.feature_vector()
        n = len(vec)
        if n <= 1:
            return
        mean = vec.average()
        std = math.sqrt(sum((v - mean) ** 2 for v in vec) / (n - 1))
        if std == 0:
            return
        self._replace_numeric(NumericVector((v - mean) / std for v in vec))
