"""Model registry: name-keyed model definitions and the Model() shortcut."""

from dospanes.registry.registry import Model, ModelRegistry, coerce_model_name, get_registry

__all__ = [
    "Model",
    "ModelRegistry",
    "coerce_model_name",
    "get_registry",
]
