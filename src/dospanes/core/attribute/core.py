"""Attribute catalog and schema resolution.

Usage:
    attributes = {
        "first_name": Attribute.text,
        "last_name": Attribute.text,
        "coins": Attribute.number,
        "full_name": Attribute.computed(lambda self: f"{self.first_name} {self.last_name}"),
    }
    resolved = resolve_attributes(attributes)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from dospanes.core.attribute.models import AttributeDescriptor

_MISSING = object()


class Attribute:
    """Catalog of attribute descriptors for model schemas.

    `text`, `number` and `boolean` are ready-made stored descriptors.
    `stored(default)` and `computed(getter)` build custom ones.
    """

    text = AttributeDescriptor(default="", kind="text")
    number = AttributeDescriptor(default=0, kind="number")
    boolean = AttributeDescriptor(default=False, kind="boolean")

    @staticmethod
    def stored(default: Any = None, kind: str = "any") -> AttributeDescriptor:
        """Create a stored attribute with a custom default.

        Args:
            default: Default value, deep-copied into every new instance.
            kind: Informational label.

        Returns:
            Stored AttributeDescriptor.
        """
        return AttributeDescriptor(default=default, kind=kind)

    @staticmethod
    def computed(getter: Callable[[Any], Any]) -> AttributeDescriptor:
        """Create a computed attribute. Usable as a decorator.

        The getter receives the owning instance, so it can read any other
        attribute of the model:

        >>> full_name = Attribute.computed(lambda self: self.first + " " + self.last)

        Args:
            getter: Callable of instance → value.

        Returns:
            Computed AttributeDescriptor.

        Raises:
            TypeError: If getter is not callable.
        """
        if not callable(getter):
            raise TypeError(f"Computed attribute getter must be callable, got {type(getter)}")
        return AttributeDescriptor(getter=getter, kind="computed")


def _lookup(entry: Any, key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(key, _MISSING)
    return getattr(entry, key, _MISSING)


def resolve_attribute(entry: Any) -> AttributeDescriptor:
    """Classify one schema entry as a stored or computed descriptor.

    Accepted forms:
    - AttributeDescriptor: passthrough
    - Mapping or object exposing `getter`: computed
    - Mapping or object exposing `default` / `defaultValue`: stored

    Anything else, bare callables and type objects included, resolves to a
    stored attribute with a None default.

    Args:
        entry: Raw schema entry.

    Returns:
        Resolved AttributeDescriptor.
    """
    if isinstance(entry, AttributeDescriptor):
        return entry

    getter = _lookup(entry, "getter")
    if getter is not _MISSING and callable(getter):
        return AttributeDescriptor(getter=getter, kind="computed")

    for key in ("default", "defaultValue"):
        default = _lookup(entry, key)
        if default is not _MISSING:
            kind = _lookup(entry, "kind")
            return AttributeDescriptor(default=default, kind=kind if isinstance(kind, str) else "any")

    return AttributeDescriptor(default=None)


def resolve_attributes(attributes: Mapping[str, Any] | None) -> Mapping[str, AttributeDescriptor]:
    """Resolve a schema's attribute mapping without mutating it.

    Args:
        attributes: Attribute name → raw schema entry. None means no attributes.

    Returns:
        Read-only mapping of attribute name → AttributeDescriptor.
    """
    resolved = {str(name): resolve_attribute(entry) for name, entry in (attributes or {}).items()}
    return MappingProxyType(resolved)
