"""
Shared fixtures for the tabular_knn test suite.

Running the tests:
    pytest tests/
"""

import pytest

from tabular_knn.data.attributes import CategoricalAttribute, QuantitativeAttribute
from tabular_knn.data.dataset import Dataset


def make_dataset(rows, names=("x", "y", "class")):
    """Numeric feature columns followed by a categorical label column."""
    attributes = [QuantitativeAttribute(n) for n in names[:-1]]
    attributes.append(CategoricalAttribute(names[-1]))
    dataset = Dataset(attributes)
    for row in rows:
        dataset.add_row(list(row))
    return dataset


@pytest.fixture
def scenario_dataset():
    """Two close A points and a far B point."""
    return make_dataset([(1, 1, "A"), (2, 2, "A"), (8, 8, "B")])


@pytest.fixture
def mixed_dataset():
    """Numeric, categorical and numeric features plus a label."""
    dataset = Dataset([
        QuantitativeAttribute("age"),
        CategoricalAttribute("colour"),
        QuantitativeAttribute("height"),
        CategoricalAttribute("class"),
    ])
    dataset.add_row([20, "red", 150, "short"])
    dataset.add_row([30, "blue", 170, "tall"])
    dataset.add_row([40, "red", 190, "tall"])
    return dataset


@pytest.fixture
def labelled_dataset():
    """Ten rows, two well separated classes, alternating order."""
    rows = []
    for i in range(5):
        rows.append((float(i), float(i), "low"))
        rows.append((float(i) + 100.0, float(i) + 100.0, "high"))
    return make_dataset(rows)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(
        "x,y,class\n"
        "1,1,A\n"
        "2,2,A\n"
        "8,8,B\n",
        encoding="utf-8",
    )
    return path
