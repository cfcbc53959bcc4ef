"""Attribute models: the descriptor every schema entry resolves to."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class AttributeDescriptor:
    """One schema attribute, either stored or computed.

    Stored attributes have backing storage and a default value. Computed
    attributes have a getter evaluated against the owning instance on every
    read and no storage of their own.

    Attributes:
        default: Value used when build() receives no override (stored only).
        getter: Callable receiving the instance (computed only).
        kind: Informational label of the catalog entry that produced it.
    """

    default: Any = None
    getter: Callable[[Any], Any] | None = None
    kind: str = "any"

    @property
    def is_computed(self) -> bool:
        """Check if this attribute derives its value from other attributes.

        Returns:
            True if a getter is present, False for stored attributes.
        """
        return self.getter is not None

    @property
    def is_stored(self) -> bool:
        """Check if this attribute has independent read/write storage."""
        return self.getter is None
