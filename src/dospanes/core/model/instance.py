"""Model instances: the tracked-object base class and per-model class generation.

Every model gets one generated subclass of ModelInstance carrying one property
per schema attribute. Stored attributes read and write a hidden mapping and mark
the instance dirty on write; computed attributes call their getter with the
instance on every read.

Usage:
    cls = build_instance_class("User", resolve_attributes({...}))
    user = cls({"first_name": "Tyrion", "last_name": "Lannister"})
    user.full_name      # computed on read
    user.first_name = "Cersei"
    user.is_dirty()     # True
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from dospanes.core.attribute.models import AttributeDescriptor

if TYPE_CHECKING:
    from dospanes.core.model.definition import ModelDefinition

logger = logging.getLogger(__name__)


class ModelInstance:
    """Base class of all generated model classes.

    Holds the stored attribute values, the dirty flag, and a write revision used
    to keep writes that land while a save is in flight from being marked clean.
    """

    __slots__ = ("_attributes", "_dirty", "_revision")

    __definition__: ModelDefinition

    def __init__(self, attributes: dict[str, Any]) -> None:
        self._attributes = attributes
        self._dirty = False
        self._revision = 0

    @property
    def definition(self) -> ModelDefinition:
        """Return the ModelDefinition owning this instance."""
        return type(self).__definition__

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Return a read-only live view of the stored attribute values."""
        return MappingProxyType(self._attributes)

    @classmethod
    def attribute_names(cls) -> tuple[str, ...]:
        """Return the schema's attribute names, stored and computed."""
        return tuple(cls.__definition__.attributes)

    def is_dirty(self) -> bool:
        """Check whether a stored attribute changed since construction or last save."""
        return self._dirty

    async def save(self) -> dict[str, Any]:
        """Persist the stored attributes and reset the dirty flag.

        The snapshot is handed to the model's transport, if one is configured.
        Writes made while the transport is awaited keep the instance dirty.

        Returns:
            Snapshot of the stored attributes that was persisted.

        Raises:
            Exception: Whatever the transport raises; the instance stays dirty.
        """
        definition = self.definition
        revision = self._revision
        snapshot = dict(self._attributes)

        if definition.transport is not None:
            await definition.transport.persist(definition.name, snapshot, definition.resource_path)

        if self._revision == revision:
            self._dirty = False
        logger.debug("Saved %s instance (dirty=%s)", definition.name, self._dirty)
        return snapshot

    def as_dict(self, include_computed: bool = True) -> dict[str, Any]:
        """Read every attribute into a plain dict.

        Args:
            include_computed: Whether computed attributes are evaluated and included.

        Returns:
            Attribute name → current value.
        """
        result: dict[str, Any] = {}
        for name, descriptor in self.definition.attributes.items():
            if descriptor.is_stored:
                result[name] = self._attributes[name]
            elif include_computed:
                result[name] = getattr(self, name)
        return result

    def _write(self, name: str, value: Any) -> None:
        self._attributes[name] = value
        self._revision += 1
        self._dirty = True

    def _load(self, values: Mapping[str, Any]) -> None:
        """Overwrite stored values without marking the instance dirty."""
        self._attributes.update(values)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._attributes.items())
        return f"<{self.definition.name}({fields}) dirty={self._dirty}>"


RESERVED_NAMES = frozenset(dir(ModelInstance)) | {"__definition__"}


def _stored_property(name: str) -> property:
    def fget(self: ModelInstance) -> Any:
        return self._attributes[name]

    def fset(self: ModelInstance, value: Any) -> None:
        self._write(name, value)

    return property(fget, fset, doc=f"Stored attribute {name!r}.")


def _computed_property(name: str, getter: Callable[[Any], Any]) -> property:
    def fget(self: ModelInstance) -> Any:
        return getter(self)

    return property(fget, doc=f"Computed attribute {name!r}.")


def validate_attribute_name(name: str) -> None:
    """Ensure an attribute name can be installed as a property.

    Raises:
        ValueError: If name is not an identifier, is a keyword, or shadows a ModelInstance member.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        raise ValueError(f"Attribute name {name!r} is not a valid Python identifier")
    if name in RESERVED_NAMES:
        raise ValueError(f"Attribute name {name!r} collides with a ModelInstance member")


def build_instance_class(
    model_name: str, attributes: Mapping[str, AttributeDescriptor]
) -> type[ModelInstance]:
    """Generate the instance class for a model.

    Args:
        model_name: Model name, used as the class name.
        attributes: Resolved attribute descriptors.

    Returns:
        ModelInstance subclass with one property per attribute.

    Raises:
        ValueError: If an attribute name cannot be installed.
    """
    namespace: dict[str, Any] = {"__slots__": (), "__module__": __name__}
    for name, descriptor in attributes.items():
        validate_attribute_name(name)
        if descriptor.getter is not None:
            namespace[name] = _computed_property(name, descriptor.getter)
        else:
            namespace[name] = _stored_property(name)

    return type(model_name, (ModelInstance,), namespace)
