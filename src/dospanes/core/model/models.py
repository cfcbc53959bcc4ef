"""Model description: the schema input accepted by Model() and ModelRegistry.define().

Usage:
    description = ModelDescription(
        attributes={"name": Attribute.text},
        resource_path="/users",
    )

    # Mapping shorthand (camelCase keys accepted)
    description = {"attributes": {"name": Attribute.text}, "resourcePath": "/users"}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dospanes.storage.protocol import PersistenceTransport
    from dospanes.sync.protocol import SyncSource, SyncTarget


class SchemaMismatchWarning(UserWarning):
    """Emitted when a model is re-declared with a schema different from the registered one."""


@dataclass
class ModelDescription:
    """Declarative schema of a model.

    Attributes:
        attributes: Attribute name → descriptor (or any entry the resolver accepts).
        resource_path: Opaque location handed to the persistence transport on save.
        identity: Stored attribute used to match sync items to instances.
            None falls back to the configured identity_attribute.
        sync_sources: Sources whose updates flow into the registry's models.
        sync_targets: Targets notified of the registry's updates.
        transport: Persistence transport used by instance.save().
    """

    attributes: Mapping[str, Any] = field(default_factory=dict)
    resource_path: str | None = None
    identity: str | None = None
    sync_sources: list[SyncSource] = field(default_factory=list)
    sync_targets: list[SyncTarget] = field(default_factory=list)
    transport: PersistenceTransport | None = None


_KEY_ALIASES = {
    "resourcePath": "resource_path",
    "syncSources": "sync_sources",
    "syncTargets": "sync_targets",
}


def normalize_description(raw: ModelDescription | Mapping[str, Any] | None) -> ModelDescription:
    """Convert any accepted schema input to a ModelDescription.

    Supports:
    - None: empty schema
    - ModelDescription: direct passthrough
    - Mapping: keys of ModelDescription, camelCase aliases accepted, unknown keys ignored

    Args:
        raw: Schema input.

    Returns:
        Normalized ModelDescription.

    Raises:
        TypeError: If raw is neither None, a ModelDescription nor a Mapping.
    """
    if raw is None:
        return ModelDescription()

    if isinstance(raw, ModelDescription):
        return raw

    if isinstance(raw, Mapping):
        values: dict[str, Any] = {}
        for key, value in raw.items():
            key = _KEY_ALIASES.get(key, key)
            if key in ModelDescription.__dataclass_fields__ and value is not None:
                values[key] = value
        for key in ("sync_sources", "sync_targets"):
            if key in values:
                values[key] = list(values[key])
        return ModelDescription(**values)

    raise TypeError(f"Invalid model description type: {type(raw)}")
