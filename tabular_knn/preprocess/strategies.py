# tabular_knn/preprocess/strategies.py
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, List, Tuple, Type

from ..data.attributes import Attribute, QuantitativeAttribute
from ..data.dataset import Dataset
from ..data.instance import Instance

__all__ = [
    "PreprocessingMode",
    "Preprocessor",
    "RawPassthrough",
    "Normalization",
    "Standardization",
    "PreprocessorFactory",
    "preprocess",
    "prepare_query",
]

# Label given to a query row while it travels through the training columns.
_PLACEHOLDER_LABEL = "__query__"


class PreprocessingMode(IntEnum):
    RAW = 1
    NORMALIZED = 2
    STANDARDIZED = 3

    @classmethod
    def parse(cls, value: "PreprocessingMode | int | str") -> "PreprocessingMode":
        """Accept the enum itself, its integer value or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.isdigit():
                return cls(int(key))
            try:
                return cls[key.upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown preprocessing mode '{value}'. Try one of: {', '.join(m.name.lower() for m in cls)}"
                ) from None
        return cls(value)


class Preprocessor(ABC):
    """Transforms the quantitative columns of a dataset in place.

    Categorical columns are never touched and the full attribute list is
    returned in column order.
    """

    mode: PreprocessingMode

    @abstractmethod
    def _transform(self, attribute: QuantitativeAttribute) -> None:
        raise NotImplementedError

    def apply(self, dataset: Dataset) -> List[Attribute]:
        for attribute in dataset.attributes:
            match attribute:
                case QuantitativeAttribute():
                    self._transform(attribute)
                case _:
                    pass
        return dataset.attributes


class RawPassthrough(Preprocessor):
    mode = PreprocessingMode.RAW

    def _transform(self, attribute: QuantitativeAttribute) -> None:
        return None


class Normalization(Preprocessor):
    """Min-max scaling to [0, 1]. A constant column becomes NaN."""

    mode = PreprocessingMode.NORMALIZED

    def _transform(self, attribute: QuantitativeAttribute) -> None:
        attribute.normalize()


class Standardization(Preprocessor):
    """z-score scaling; single-valued or zero-variance columns are skipped."""

    mode = PreprocessingMode.STANDARDIZED

    def _transform(self, attribute: QuantitativeAttribute) -> None:
        if attribute.size() > 1 and attribute.standard_deviation() > 0:
            attribute.standardize()


_REGISTRY: Dict[PreprocessingMode, Type[Preprocessor]] = {
    PreprocessingMode.RAW: RawPassthrough,
    PreprocessingMode.NORMALIZED: Normalization,
    PreprocessingMode.STANDARDIZED: Standardization,
}


class PreprocessorFactory:
    @staticmethod
    def create(mode: PreprocessingMode | int | str) -> Preprocessor:
        return _REGISTRY[PreprocessingMode.parse(mode)]()

    @staticmethod
    def choices() -> tuple[str, ...]:
        return tuple(m.name.lower() for m in _REGISTRY)


def preprocess(dataset: Dataset, mode: PreprocessingMode | int | str) -> Dataset:
    """Return a preprocessed deep copy; ``dataset`` itself is left unchanged."""
    work = dataset.copy()
    return Dataset(PreprocessorFactory.create(mode).apply(work))


def prepare_query(
    raw_training: Dataset,
    query: Instance,
    mode: PreprocessingMode | int | str,
) -> Tuple[Dataset, Instance]:
    """Transform a training set and a query with the same statistics.

    The query is appended to a copy of the raw training set, the copy is
    preprocessed as a whole, and the query row is taken back out. Returns
    the preprocessed training set and the label-free query.
    """
    mode = PreprocessingMode.parse(mode)
    features = query.without_label()
    if mode is PreprocessingMode.RAW:
        # typed by the training columns, like the other modes
        typed = raw_training.empty_schema_copy()
        typed.add_row(features.with_label(_PLACEHOLDER_LABEL))
        query_row = typed.row_at(0)
        query_row.drop_label()
        return raw_training.copy(), query_row

    work = raw_training.copy()
    work.add_row(features.with_label(_PLACEHOLDER_LABEL))
    processed = Dataset(PreprocessorFactory.create(mode).apply(work))
    last = processed.number_of_cases() - 1
    transformed = processed.row_at(last)
    processed.delete_row(last)
    transformed.drop_label()
    return processed, transformed
