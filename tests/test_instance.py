"""Tests for Instance rows."""

import pytest

from tabular_knn.data.instance import Instance, parse_value
from tabular_knn.errors import MissingLabelError


class TestParsing:
    def test_parse_value(self):
        assert parse_value(" 1.5 ") == 1.5
        assert parse_value(" red ") == "red"

    def test_parse_keeps_label_as_text(self):
        inst = Instance.parse("1, 2.5, red, 3")
        assert inst.values == [1.0, 2.5, "red", "3"]
        assert inst.label == "3"

    def test_parse_unlabelled(self):
        inst = Instance.parse("1.5,1.5", has_label=False)
        assert inst.values == [1.5, 1.5]
        assert not inst.has_label


class TestLabel:
    def test_label_and_features(self):
        inst = Instance([1, 2, "A"])
        assert inst.label == "A"
        assert inst.feature_values() == [1, 2]

    def test_missing_label(self):
        inst = Instance([1, 2], has_label=False)
        with pytest.raises(MissingLabelError):
            _ = inst.label
        with pytest.raises(MissingLabelError):
            inst.drop_label()

    def test_empty_instance_has_no_label(self):
        assert not Instance().has_label

    def test_drop_label_in_place(self):
        inst = Instance([1, 2, "A"])
        inst.drop_label()
        assert inst.values == [1, 2]
        assert not inst.has_label

    def test_without_and_with_label(self):
        inst = Instance([1, 2, "A"])
        bare = inst.without_label()
        assert bare.values == [1, 2]
        assert inst.values == [1, 2, "A"]
        relabelled = bare.with_label("B")
        assert relabelled.label == "B"
        assert relabelled.values == [1, 2, "B"]

    def test_values_are_copied(self):
        source = [1, 2, "A"]
        inst = Instance(source)
        source[0] = 99
        assert inst[0] == 1


class TestFeatureVector:
    def test_numeric_only_label_excluded(self):
        inst = Instance([1, "red", 3, "A"])
        assert inst.feature_vector().tolist() == [1.0, 3.0]

    def test_unlabelled_keeps_last_value(self):
        inst = Instance([1, 2], has_label=False)
        assert inst.feature_vector().tolist() == [1.0, 2.0]

    def test_bool_is_not_numeric(self):
        assert Instance([True, 2.0], has_label=False).feature_vector().tolist() == [2.0]


class TestSelfTransforms:
    def test_normalize_keeps_label(self):
        inst = Instance([2, "red", 4, 6, "A"])
        inst.normalize()
        assert inst.values == [0.0, "red", 0.5, 1.0, "A"]

    def test_standardize_keeps_label(self):
        inst = Instance([1, 2, 3, "A"])
        inst.standardize()
        assert inst.values[:3] == pytest.approx([-1.0, 0.0, 1.0])
        assert inst.label == "A"

    def test_standardize_noop_for_constant(self):
        inst = Instance([2, 2, "A"])
        inst.standardize()
        assert inst.values == [2, 2, "A"]
