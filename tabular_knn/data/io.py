# tabular_knn/data/io.py
"""CSV persistence for :class:`Dataset`.

First row holds the attribute names. A column is quantitative when its
first data cell parses as a float, categorical otherwise; the decision is
taken once, at load time.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd

from ..errors import EmptyDatasetError
from .attributes import Attribute, CategoricalAttribute, QuantitativeAttribute
from .dataset import Dataset


def _looks_numeric(cell: str) -> bool:
    try:
        float(cell)
    except ValueError:
        return False
    return True


def read_csv(path: str | Path) -> Dataset:
    path = Path(path)
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as exc:
        raise EmptyDatasetError(f"{path} is empty") from exc
    if df.empty:
        raise EmptyDatasetError(f"{path} has a header but no data rows")

    first = df.iloc[0]
    attributes: List[Attribute] = []
    for name in df.columns:
        if _looks_numeric(first[name].strip()):
            attributes.append(QuantitativeAttribute(str(name).strip()))
        else:
            attributes.append(CategoricalAttribute(str(name).strip()))

    dataset = Dataset(attributes)
    for row in df.itertuples(index=False, name=None):
        dataset.add_row(list(row))
    return dataset


def write_csv(dataset: Dataset, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    dataset.to_frame().to_csv(path, index=False, na_rep="nan")
    return path
