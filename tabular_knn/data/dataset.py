# tabular_knn/data/dataset.py
from __future__ import annotations

import numbers
from typing import Any, Iterable, Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..errors import (
    DimensionMismatch,
    EmptyDatasetError,
    InvalidValueError,
    InvalidWeightError,
    LabelColumnError,
)
from .attributes import Attribute, CategoricalAttribute, QuantitativeAttribute
from .instance import Instance
from .vector import NumericVector


def _parse_weight(raw: Any) -> float:
    try:
        weight = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidWeightError(f"weight {raw!r} is not a number") from exc
    if not 0.0 <= weight <= 1.0:
        raise InvalidWeightError(f"weight must lie in [0, 1], got {raw!r}")
    return weight


class Dataset:
    """Table made of equally long attributes (columns).

    Column order is insertion order and the last column holds the class
    label by convention. Every mutation keeps all columns the same length.
    """

    def __init__(self, attributes: Optional[Iterable[Attribute]] = None) -> None:
        self._attributes: List[Attribute] = list(attributes) if attributes is not None else []

    # ------------------------------------------------------------------
    # Shape

    @property
    def attributes(self) -> List[Attribute]:
        return self._attributes

    def __getitem__(self, index: int) -> Attribute:
        return self._attributes[index]

    def __len__(self) -> int:
        return self.number_of_cases()

    def number_of_cases(self) -> int:
        if not self._attributes:
            return 0
        return self._attributes[0].size()

    def number_of_attributes(self) -> int:
        return len(self._attributes)

    def attribute_names(self) -> List[str]:
        return [a.name for a in self._attributes]

    @property
    def label_attribute(self) -> Attribute:
        if not self._attributes:
            raise EmptyDatasetError("dataset has no attributes")
        return self._attributes[-1]

    def feature_attributes(self) -> List[Attribute]:
        """Every column except the trailing label column."""
        return self._attributes[:-1]

    def _quantitative_features(self) -> List[QuantitativeAttribute]:
        return [a for a in self.feature_attributes() if isinstance(a, QuantitativeAttribute)]

    # ------------------------------------------------------------------
    # Row mutation

    def add_row(self, row: Instance | Sequence[Any]) -> None:
        """Append one row.

        An :class:`Instance` is appended value by value. Any other sequence
        is treated as raw text: cells of quantitative columns are parsed as
        floats. If any column rejects its value, the values already written
        by this call are removed before the error propagates.
        """
        match row:
            case Instance():
                values, parse = row.values, False
            case str():
                values, parse = row.split(","), True
            case _:
                values, parse = list(row), True

        if not values or len(values) != self.number_of_attributes():
            raise DimensionMismatch(
                f"expected {self.number_of_attributes()} values, got {len(values)}"
            )

        written: List[Attribute] = []
        try:
            for attribute, value in zip(self._attributes, values):
                attribute.add(self._coerce(attribute, value) if parse else value)
                written.append(attribute)
        except InvalidValueError:
            for attribute in written:
                attribute.delete(attribute.size() - 1)
            raise

    @staticmethod
    def _coerce(attribute: Attribute, value: Any) -> Any:
        match attribute:
            case QuantitativeAttribute() if isinstance(value, str):
                try:
                    return float(value.strip())
                except ValueError as exc:
                    raise InvalidValueError(
                        f"non-numeric value for quantitative attribute '{attribute.name}': {value!r}"
                    ) from exc
            case CategoricalAttribute():
                return str(value).strip()
            case _:
                return value

    def delete_row(self, index: int) -> None:
        if not self._attributes:
            raise EmptyDatasetError("cannot delete from a dataset without attributes")
        if not 0 <= index < self.number_of_cases():
            raise IndexError(
                f"row {index} out of range [0, {self.number_of_cases()})"
            )
        for attribute in self._attributes:
            attribute.delete(index)

    # ------------------------------------------------------------------
    # Weights

    def weights(self) -> List[float]:
        return [a.weight for a in self._attributes]

    def feature_weights(self) -> List[float]:
        """Weights of the numeric feature columns, the distance weight vector."""
        return [a.weight for a in self._quantitative_features()]

    def set_weights(self, weights: Sequence[Any]) -> None:
        """Assign one weight per attribute; either all of them apply or none."""
        if len(weights) != self.number_of_attributes():
            raise InvalidWeightError(
                f"expected {self.number_of_attributes()} weights, got {len(weights)}"
            )
        parsed = [_parse_weight(w) for w in weights]
        for attribute, weight in zip(self._attributes, parsed):
            attribute.weight = weight

    def set_weight(self, index: int, value: Any) -> None:
        if not 0 <= index < self.number_of_attributes():
            raise IndexError(
                f"attribute {index} out of range [0, {self.number_of_attributes()})"
            )
        self._attributes[index].weight = _parse_weight(value)

    def set_uniform_weight(self, value: Any) -> None:
        weight = _parse_weight(value)
        for attribute in self._attributes:
            attribute.weight = weight

    # ------------------------------------------------------------------
    # Rows

    def row_at(self, index: int) -> Instance:
        if not self._attributes:
            raise EmptyDatasetError("dataset has no attributes")
        if not 0 <= index < self.number_of_cases():
            raise IndexError(
                f"row {index} out of range, the dataset holds {self.number_of_cases()} rows"
            )
        return Instance([a.value_at(index) for a in self._attributes])

    def rows(self) -> Iterator[Instance]:
        for i in range(self.number_of_cases()):
            yield self.row_at(i)

    def feature_vector_at(self, index: int) -> NumericVector:
        """Numeric features of row ``index`` with the label stripped."""
        return NumericVector(a.value_at(index) for a in self._quantitative_features())

    def query_feature_vector(self, query: Instance) -> NumericVector:
        """Numeric features of a label-free ``query``, read at the positions of
        this dataset's quantitative feature columns.

        The query must hold one value per feature column; a value sitting in a
        quantitative position has to be a number.
        """
        features = self.feature_attributes()
        values = query.feature_values()
        if len(values) != len(features):
            raise DimensionMismatch(
                f"query has {len(values)} features, dataset has {len(features)}"
            )
        out = NumericVector()
        for attribute, value in zip(features, values):
            match attribute:
                case QuantitativeAttribute():
                    if isinstance(value, bool) or not isinstance(value, numbers.Real):
                        raise InvalidValueError(
                            f"query value {value!r} for quantitative attribute '{attribute.name}' is not a number"
                        )
                    out.append(value)
                case _:
                    pass
        return out

    def feature_matrix(self) -> np.ndarray:
        """Numeric feature columns as an ``(n_cases, n_features)`` array."""
        columns = [a.values.to_numpy() for a in self._quantitative_features()]
        if not columns:
            return np.empty((self.number_of_cases(), 0))
        return np.column_stack(columns)

    def labels(self) -> List[str]:
        return [str(self.label_attribute.value_at(i)) for i in range(self.number_of_cases())]

    def distinct_labels(self) -> List[str]:
        match self.label_attribute:
            case CategoricalAttribute() as label:
                return label.distinct_classes()
            case other:
                raise LabelColumnError(
                    f"label column '{other.name}' must be categorical, got {type(other).__name__}"
                )

    # ------------------------------------------------------------------
    # Copies

    def empty_schema_copy(self) -> "Dataset":
        return Dataset(a.empty_copy() for a in self._attributes)

    def copy(self) -> "Dataset":
        return Dataset(a.copy() for a in self._attributes)

    # ------------------------------------------------------------------
    # pandas interop

    def to_frame(self) -> pd.DataFrame:
        data = {}
        for attribute in self._attributes:
            match attribute:
                case QuantitativeAttribute():
                    data[attribute.name] = pd.Series(attribute.values.tolist(), dtype=float)
                case CategoricalAttribute():
                    data[attribute.name] = pd.Series(attribute.values, dtype=object)
        return pd.DataFrame(data, columns=self.attribute_names())

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "Dataset":
        """Numeric (non-boolean) columns become quantitative, the rest categorical."""
        attributes: List[Attribute] = []
        for name in df.columns:
            col = df[name]
            if pd.api.types.is_numeric_dtype(col) and not pd.api.types.is_bool_dtype(col):
                attributes.append(QuantitativeAttribute(str(name), col.astype(float).tolist()))
            else:
                attributes.append(CategoricalAttribute(str(name), col.astype(str).tolist()))
        return cls(attributes)

    def describe(self) -> pd.DataFrame:
        """Per-attribute summary: type, weight and the statistics that apply."""
        records = []
        for attribute in self._attributes:
            rec = {"attribute": attribute.name, "weight": attribute.weight, "size": attribute.size()}
            match attribute:
                case QuantitativeAttribute() if attribute.size() > 0:
                    rec.update(
                        type="quantitative",
                        min=attribute.min(),
                        max=attribute.max(),
                        mean=attribute.mean(),
                        std=attribute.standard_deviation(),
                    )
                case QuantitativeAttribute():
                    rec.update(type="quantitative")
                case CategoricalAttribute():
                    rec.update(
                        type="categorical",
                        classes=attribute.n_classes(),
                        frequencies=dict(
                            zip(attribute.distinct_classes(), attribute.class_frequencies())
                        ),
                    )
            records.append(rec)
        columns = ["attribute", "type", "weight", "size", "min", "max", "mean", "std", "classes", "frequencies"]
        return pd.DataFrame.from_records(records, columns=columns).set_index("attribute")

    # ------------------------------------------------------------------

    def __str__(self) -> str:
        lines = [",".join(self.attribute_names())]
        for row in self.rows():
            lines.append(",".join(str(v) for v in row))
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return (
            f"Dataset(attributes={self.attribute_names()}, "
            f"cases={self.number_of_cases()})"
        )
