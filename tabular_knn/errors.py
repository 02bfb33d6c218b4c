# tabular_knn/errors.py
"""Exceptions raised by the toolkit.

Each error also derives from the closest built-in exception, so callers
that only know about ``ValueError``/``TypeError`` keep working.
"""


class TabularKNNError(Exception):
    """Base class for every error raised by tabular_knn."""


class DimensionMismatch(TabularKNNError, ValueError):
    """Two operands (vectors, rows, weight lists) have different lengths."""


class EmptyVectorError(TabularKNNError, ValueError):
    """A statistic was requested from a vector with no elements."""


class InvalidValueError(TabularKNNError, ValueError):
    """A value does not fit the type of the column it is written to."""


class InvalidWeightError(TabularKNNError, ValueError):
    """A weight does not parse or lies outside [0, 1]."""


class EmptyDatasetError(TabularKNNError, ValueError):
    """The operation needs at least one attribute or one row."""


class EmptyTrainingSetError(EmptyDatasetError):
    """Classification was requested against a training set with no rows."""


class MissingLabelError(TabularKNNError, ValueError):
    """The instance carries no class label."""


class LabelColumnError(TabularKNNError, TypeError):
    """The last column of a dataset is not categorical."""


class LabelledQueryError(TabularKNNError, ValueError):
    """A query handed to the classifier still carries its class label."""
