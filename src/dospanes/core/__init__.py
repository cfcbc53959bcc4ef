"""Core functionalities: attribute resolution and model building.

Architecture Note:
    core/ holds the schema-to-class machinery: descriptors, generated instance
    classes, and per-model definitions. Registries and sync wiring live in
    registry/ and sync/.
"""

from dospanes.core.attribute import (
    Attribute,
    AttributeDescriptor,
    resolve_attribute,
    resolve_attributes,
)
from dospanes.core.model import (
    ModelDefinition,
    ModelDescription,
    ModelInstance,
    SchemaMismatchWarning,
    build_instance_class,
    normalize_description,
)

__all__ = [
    # Attribute
    "Attribute",
    "AttributeDescriptor",
    "resolve_attribute",
    "resolve_attributes",
    # Model
    "ModelDefinition",
    "ModelDescription",
    "ModelInstance",
    "SchemaMismatchWarning",
    "build_instance_class",
    "normalize_description",
]
