"""Attribute functionality: descriptors, catalog, and schema resolution."""

from dospanes.core.attribute.core import Attribute, resolve_attribute, resolve_attributes
from dospanes.core.attribute.models import AttributeDescriptor

__all__ = [
    # Models
    "AttributeDescriptor",
    # Core
    "Attribute",
    "resolve_attribute",
    "resolve_attributes",
]
