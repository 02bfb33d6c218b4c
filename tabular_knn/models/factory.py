# =============================================
# tabular_knn/models/factory.py
# =============================================
from typing import Dict, Type
from .classifiers.knn_model import KNNModel
from .base import BaseModel

_REGISTRY: Dict[str, Type[BaseModel]] = {
    "knn": KNNModel,
}

class ModelFactory:
    @staticmethod
    def create(name: str, **kwargs) -> BaseModel:
        key = (name or "").lower()
        if key not in _REGISTRY:
            raise ValueError(f"Unknown model '{name}'. Try one of: {', '.join(sorted(_REGISTRY))}")
        return _REGISTRY[key](**kwargs)

    @staticmethod
    def choices() -> tuple[str, ...]:
        return tuple(sorted(_REGISTRY.keys()))
