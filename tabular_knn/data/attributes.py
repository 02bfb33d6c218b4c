# tabular_knn/data/attributes.py
from __future__ import annotations

import math
import numbers
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from ..errors import InvalidValueError
from .vector import NumericVector


class Attribute(ABC):
    """A named column of values with a weight used by the distance.

    Concrete columns are either :class:`QuantitativeAttribute` or
    :class:`CategoricalAttribute`; callers dispatch on them with ``match``.
    """

    def __init__(self, name: str = "", weight: float = 1.0) -> None:
        self.name = name
        self.weight = float(weight)

    # ------------------------------------------------------------------
    # Capability interface

    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def add(self, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, index: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def value_at(self, index: int) -> Any:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def copy(self) -> "Attribute":
        raise NotImplementedError

    @abstractmethod
    def empty_copy(self) -> "Attribute":
        """Same name, type and weight, no values."""
        raise NotImplementedError

    @property
    @abstractmethod
    def values(self) -> Any:
        raise NotImplementedError

    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self.size()

    def describe_weight(self) -> str:
        return f"{self.name}: {self.weight}"

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size():
            raise IndexError(
                f"index {index} out of range for attribute '{self.name}' with {self.size()} values"
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, weight={self.weight}, size={self.size()})"


class QuantitativeAttribute(Attribute):
    """Numeric column backed by a :class:`NumericVector`."""

    def __init__(
        self,
        name: str = "",
        values: Optional[Iterable[float] | NumericVector] = None,
        weight: float = 1.0,
    ) -> None:
        super().__init__(name, weight)
        if isinstance(values, NumericVector):
            self._values = values
        else:
            self._values = NumericVector()
            for v in values or ():
                self.add(v)

    @property
    def values(self) -> NumericVector:
        return self._values

    @values.setter
    def values(self, new: NumericVector) -> None:
        self._values = new

    def size(self) -> int:
        return len(self._values)

    def add(self, value: Any) -> None:
        # bool is an int subclass, but True is not a measurement
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidValueError(
                f"quantitative attribute '{self.name}' expects a number, got {value!r}"
            )
        self._values.append(float(value))

    def delete(self, index: int) -> None:
        self._check_index(index)
        self._values.remove(index)

    def value_at(self, index: int) -> float:
        self._check_index(index)
        return self._values.get(index)

    def clear(self) -> None:
        self._values.clear()

    def copy(self) -> "QuantitativeAttribute":
        return QuantitativeAttribute(self.name, self._values.copy(), weight=self.weight)

    def empty_copy(self) -> "QuantitativeAttribute":
        return QuantitativeAttribute(self.name, weight=self.weight)

    # ------------------------------------------------------------------
    # Statistics

    def min(self) -> float:
        return self._values.min()

    def max(self) -> float:
        return self._values.max()

    def mean(self) -> float:
        return self._values.average()

    def standard_deviation(self) -> float:
        """Sample standard deviation (divides by ``n - 1``); 0.0 when n <= 1."""
        n = self.size()
        if n <= 1:
            return 0.0
        mean = self.mean()
        squares = sum((v - mean) ** 2 for v in self._values)
        return math.sqrt(squares / (n - 1))

    def standardize(self) -> None:
        """z-score in place. Left untouched when n <= 1 or the stddev is 0."""
        if self.size() <= 1:
            return
        std = self.standard_deviation()
        if std == 0:
            return
        mean = self.mean()
        for i, v in enumerate(self._values):
            self._values.set(i, (v - mean) / std)

    def normalize(self) -> None:
        """Min-max scale in place; a constant column turns into NaN."""
        self._values.normalize()

    def __str__(self) -> str:
        return str(self._values)


class CategoricalAttribute(Attribute):
    """String column with class/frequency helpers."""

    def __init__(
        self,
        name: str = "",
        values: Optional[Iterable[Any]] = None,
        weight: float = 1.0,
    ) -> None:
        super().__init__(name, weight)
        self._values: List[str] = [str(v) for v in values] if values is not None else []

    @property
    def values(self) -> List[str]:
        return self._values

    @values.setter
    def values(self, new: Iterable[Any]) -> None:
        self._values = [str(v) for v in new]

    def size(self) -> int:
        return len(self._values)

    def add(self, value: Any) -> None:
        self._values.append(str(value))

    def delete(self, index: int) -> None:
        self._check_index(index)
        del self._values[index]

    def value_at(self, index: int) -> str:
        self._check_index(index)
        return self._values[index]

    def clear(self) -> None:
        self._values.clear()

    def copy(self) -> "CategoricalAttribute":
        return CategoricalAttribute(self.name, list(self._values), weight=self.weight)

    def empty_copy(self) -> "CategoricalAttribute":
        return CategoricalAttribute(self.name, weight=self.weight)

    def distinct_classes(self) -> List[str]:
        """Distinct values in first-seen order."""
        return list(dict.fromkeys(self._values))

    def n_classes(self) -> int:
        return len(self.distinct_classes())

    def class_frequencies(self) -> List[float]:
        """Relative frequency of each distinct class, same order as ``distinct_classes``."""
        total = len(self._values)
        if total == 0:
            return []
        counts = dict.fromkeys(self._values, 0)
        for v in self._values:
            counts[v] += 1
        return [c / total for c in counts.values()]

    def __str__(self) -> str:
        return str(self._values)
