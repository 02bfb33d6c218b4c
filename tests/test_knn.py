"""Tests for the weighted k-NN classifier."""

import math
import random

import pytest

from conftest import make_dataset
from tabular_knn.data.instance import Instance
from tabular_knn.data.vector import NumericVector
from tabular_knn.errors import (
    DimensionMismatch,
    EmptyTrainingSetError,
    InvalidValueError,
    LabelledQueryError,
)
from tabular_knn.models.classifiers.knn import (
    KNNClassifier,
    euclidean_distance,
    weighted_distance,
)


def query(*values):
    return Instance(values, has_label=False)


class TestDistance:
    def test_weighted_example(self):
        d = weighted_distance(NumericVector([1, 2]), NumericVector([4, 6]), [0.5, 1.0])
        assert d == pytest.approx(math.sqrt(1.5 ** 2 + 4 ** 2))
        assert d == pytest.approx(4.272, abs=1e-3)

    def test_unit_weights_is_euclidean(self):
        a, b = NumericVector([1, 2, 3]), NumericVector([4, 6, 3])
        assert weighted_distance(a, b, [1.0, 1.0, 1.0]) == euclidean_distance(a, b) == 5.0

    def test_symmetric_non_negative_identity(self):
        rng = random.Random(0)
        for _ in range(20):
            a = NumericVector(rng.uniform(-10, 10) for _ in range(4))
            b = NumericVector(rng.uniform(-10, 10) for _ in range(4))
            w = [rng.random() for _ in range(4)]
            assert weighted_distance(a, b, w) == pytest.approx(weighted_distance(b, a, w))
            assert weighted_distance(a, b, w) >= 0
            assert weighted_distance(a, a, w) == 0.0

    def test_zero_weight_ignores_component(self):
        assert weighted_distance(NumericVector([0, 0]), NumericVector([3, 100]), [1, 0]) == 3.0

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            weighted_distance(NumericVector([1]), NumericVector([1, 2]), [1])
        with pytest.raises(DimensionMismatch):
            weighted_distance(NumericVector([1, 2]), NumericVector([1, 2]), [1])


class TestConstructor:
    @pytest.mark.parametrize("k", [0, -1, 2.0, True, "3"])
    def test_invalid_k(self, k):
        with pytest.raises(ValueError, match="k must be a positive integer"):
            KNNClassifier(k)

    def test_invalid_tie_break(self):
        with pytest.raises(ValueError, match="Unknown tie_break"):
            KNNClassifier(3, tie_break="random")

    def test_repr(self):
        assert repr(KNNClassifier(2)) == "KNNClassifier(k=2, n_jobs=None, tie_break='first_seen')"


class TestDistances:
    def test_row_order(self, scenario_dataset):
        dist = KNNClassifier(1).distances(scenario_dataset, query(1, 1))
        assert dist.tolist() == pytest.approx([0.0, math.sqrt(2), math.sqrt(98)])

    def test_uses_attribute_weights(self, scenario_dataset):
        scenario_dataset.set_weights([0.5, 1.0, 1.0])
        dist = KNNClassifier(1).distances(scenario_dataset, query(4, 6))
        assert dist.get(0) == pytest.approx(weighted_distance(
            NumericVector([1, 1]), NumericVector([4, 6]), [0.5, 1.0]))

    def test_skips_categorical_features(self, mixed_dataset):
        dist = KNNClassifier(1).distances(mixed_dataset, query(30, "green", 170))
        assert dist.get(1) == 0.0

    def test_parallel_matches_sequential(self, labelled_dataset):
        q = query(3.3, 2.7)
        sequential = KNNClassifier(3).distances(labelled_dataset, q)
        threaded = KNNClassifier(3, n_jobs=2).distances(labelled_dataset, q)
        assert threaded.tolist() == sequential.tolist()

    def test_empty_training_set(self, scenario_dataset):
        with pytest.raises(EmptyTrainingSetError):
            KNNClassifier(1).distances(scenario_dataset.empty_schema_copy(), query(1, 1))

    def test_query_dimension_mismatch(self, scenario_dataset):
        with pytest.raises(DimensionMismatch):
            KNNClassifier(1).distances(scenario_dataset, query(1, 1, 1))

    def test_query_read_by_column_position(self, mixed_dataset):
        """Text in a numeric column fails instead of shifting onto other columns."""
        with pytest.raises(InvalidValueError, match="age"):
            KNNClassifier(1).classify(mixed_dataset, query("red", 30, 170))

    def test_query_missing_categorical_feature(self, mixed_dataset):
        with pytest.raises(DimensionMismatch, match="query has 2 features"):
            KNNClassifier(1).distances(mixed_dataset, query(30, 170))

    def test_labelled_query_rejected(self, scenario_dataset):
        with pytest.raises(LabelledQueryError, match="has_label=False"):
            KNNClassifier(1).classify(scenario_dataset, Instance([1.5, 1.5]))


class TestSelectNeighbours:
    def test_k_smallest_multiset(self):
        rng = random.Random(42)
        for _ in range(50):
            n = rng.randint(1, 30)
            k = rng.randint(1, n)
            dist = NumericVector(rng.choice([0.5, 1.0, 2.0, rng.random() * 10]) for _ in range(n))
            picked = KNNClassifier.select_neighbours(dist, k)
            assert len(picked) == k
            assert len(set(picked)) == k
            assert sorted(dist.get(i) for i in picked) == sorted(dist.tolist())[:k]

    def test_k_at_least_n_uses_all_rows(self):
        assert KNNClassifier.select_neighbours(NumericVector([3, 1]), 5) == [0, 1]

    def test_row_k_is_considered(self):
        """The row right after the seeded slots can still enter the selection."""
        picked = KNNClassifier.select_neighbours(NumericVector([5, 6, 1]), 2)
        assert sorted(picked) == [0, 2]

    def test_equal_distance_keeps_earlier_row(self):
        picked = KNNClassifier.select_neighbours(NumericVector([1, 2, 2]), 2)
        assert picked == [0, 1]

    def test_lowest_slot_evicted_among_equal_worst(self):
        picked = KNNClassifier.select_neighbours(NumericVector([3, 3, 1]), 2)
        assert picked == [2, 1]


class TestMajorityClass:
    def test_majority(self):
        assert KNNClassifier(3).majority_class(["A", "A", "B"]) == "A"
        assert KNNClassifier(3).majority_class(["B", "A", "A"]) == "A"

    def test_tie_goes_to_first_seen(self):
        assert KNNClassifier(2).majority_class(["A", "B"]) == "A"
        assert KNNClassifier(2).majority_class(["B", "A"]) == "B"

    def test_tie_by_distance(self):
        clf = KNNClassifier(2, tie_break="distance")
        assert clf.majority_class(["A", "B"], [2.0, 1.0]) == "B"
        assert clf.majority_class(["A", "B"], [1.0, 1.0]) == "A"
        assert clf.majority_class(["A", "A", "B"], [9.0, 9.0, 0.1]) == "A"

    def test_empty(self):
        with pytest.raises(EmptyTrainingSetError):
            KNNClassifier(1).majority_class([])


class TestClassify:
    def test_k2_near_a(self, scenario_dataset):
        assert KNNClassifier(2).classify(scenario_dataset, query(1.5, 1.5)) == "A"

    def test_k1_near_b(self, scenario_dataset):
        assert KNNClassifier(1).classify(scenario_dataset, query(7, 7)) == "B"

    def test_k_larger_than_training_set(self, scenario_dataset):
        assert KNNClassifier(10).classify(scenario_dataset, query(7, 7)) == "A"

    def test_kneighbors(self, scenario_dataset):
        idx, dist = KNNClassifier(2).kneighbors(scenario_dataset, query(1.5, 1.5))
        assert sorted(idx) == [0, 1]
        assert dist == pytest.approx([math.sqrt(0.5), math.sqrt(0.5)])

    def test_classify_many(self, labelled_dataset):
        clf = KNNClassifier(3)
        assert clf.classify_many(labelled_dataset, [query(1, 1), query(101, 99)]) == ["low", "high"]

    def test_weights_change_the_answer(self):
        dataset = make_dataset([(0, 10, "A"), (10, 0, "B")])
        q = query(1, 1)
        # equal distances: the earlier row stays selected
        assert KNNClassifier(1).classify(dataset, q) == "A"
        dataset.set_weights([1.0, 0.0, 1.0])
        assert KNNClassifier(1).classify(dataset, q) == "A"
        dataset.set_weights([0.0, 1.0, 1.0])
        assert KNNClassifier(1).classify(dataset, q) == "B"
