"""Persistence transport protocol for swappable save backends.

The transport is what instance.save() hands stored attributes to, enabling:
- Local in-memory (InMemoryTransport, for tests and prototyping)
- HTTP / database transports (implemented by callers)

Usage:
    transport = InMemoryTransport()
    User = Model("User", ModelDescription(attributes={...}, transport=transport))
    await User.build().save()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistenceTransport(Protocol):
    """Abstract transport interface. Implementations handle actual persistence."""

    async def persist(
        self,
        model_name: str,
        attributes: Mapping[str, Any],
        resource_path: str | None,
    ) -> None:
        """Persist one instance's stored attributes.

        Args:
            model_name: Name of the instance's model.
            attributes: Snapshot of the stored attribute values.
            resource_path: The model's resource_path, None if not declared.

        Raises:
            Exception: Any failure; save() propagates it and keeps the instance dirty.
        """
        ...
