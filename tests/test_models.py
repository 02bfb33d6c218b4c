"""Tests for the model layer: fit/predict/save/load and the factory."""

import pytest

from tabular_knn.data.instance import Instance
from tabular_knn.models.base import BaseModel
from tabular_knn.models.classifiers.knn import KNNClassifier
from tabular_knn.models.classifiers.knn_model import KNNModel
from tabular_knn.models.factory import ModelFactory
from tabular_knn.preprocess.strategies import PreprocessingMode


def query(*values):
    return Instance(values, has_label=False)


class TestKNNModel:
    def test_bad_k_fails_at_construction(self):
        with pytest.raises(ValueError, match="k must be a positive integer"):
            KNNModel(n_neighbors=0)

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError, match="Model not fitted"):
            KNNModel().predict([query(1, 1)])

    def test_save_before_fit(self, tmp_path):
        with pytest.raises(RuntimeError):
            KNNModel().save(tmp_path / "m.joblib")

    def test_fit_keeps_raw_copy(self, scenario_dataset):
        model = KNNModel(n_neighbors=2).fit(scenario_dataset, mode="normalized")
        scenario_dataset.add_row([0, 0, "C"])
        assert model.artifacts.training.number_of_cases() == 3
        assert model.artifacts.mode is PreprocessingMode.NORMALIZED
        assert model.artifacts.classes == ("A", "B")

    @pytest.mark.parametrize("mode", list(PreprocessingMode))
    def test_scenario_every_mode(self, scenario_dataset, mode):
        model = KNNModel(n_neighbors=2).fit(scenario_dataset, mode=mode)
        assert model.predict([query(1.5, 1.5)]) == ["A"]
        model = KNNModel(n_neighbors=1).fit(scenario_dataset, mode=mode)
        assert model.predict_one(query(7, 7)) == "B"

    def test_estimator(self):
        estimator = KNNModel(n_neighbors=4, n_jobs=2, tie_break="distance")._build_estimator()
        assert isinstance(estimator, KNNClassifier)
        assert (estimator.k, estimator.n_jobs, estimator.tie_break) == (4, 2, "distance")

    def test_save_and_load(self, scenario_dataset, tmp_path):
        model = KNNModel(n_neighbors=1).fit(scenario_dataset, mode=PreprocessingMode.STANDARDIZED)
        path = model.save(tmp_path / "artifacts" / "knn.joblib")
        assert path.exists()
        loaded = KNNModel.load(path)
        assert isinstance(loaded, KNNModel)
        assert loaded.n_neighbors == 1
        assert loaded.artifacts.mode is PreprocessingMode.STANDARDIZED
        assert loaded.predict_one(query(7, 7)) == "B"
        assert isinstance(BaseModel.load(path), KNNModel)

    def test_load_wrong_type(self, tmp_path):
        import joblib
        path = tmp_path / "other.joblib"
        joblib.dump({"not": "a model"}, path)
        with pytest.raises(TypeError):
            KNNModel.load(path)


class TestModelFactory:
    def test_choices(self):
        assert ModelFactory.choices() == ("knn",)

    def test_create(self):
        model = ModelFactory.create("KNN", n_neighbors=3)
        assert isinstance(model, KNNModel)
        assert model.n_neighbors == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown model"):
            ModelFactory.create("svm")

    def test_unknown_parameter(self):
        with pytest.raises(TypeError, match="n_neighbours"):
            ModelFactory.create("knn", n_neighbours=3)
