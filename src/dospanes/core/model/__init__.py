"""Model functionality: descriptions, definitions, and generated instance classes."""

from dospanes.core.model.definition import ModelDefinition
from dospanes.core.model.instance import ModelInstance, build_instance_class
from dospanes.core.model.models import (
    ModelDescription,
    SchemaMismatchWarning,
    normalize_description,
)

__all__ = [
    # Models
    "ModelDescription",
    "SchemaMismatchWarning",
    "normalize_description",
    # Instances
    "ModelInstance",
    "build_instance_class",
    # Definitions
    "ModelDefinition",
]
