"""Model definitions: one per registered model name.

A ModelDefinition owns its generated instance class and its store. It is
normally created by ModelRegistry.define() (or the Model() shortcut), never
directly.

Usage:
    User = Model("User", ModelDescription(attributes={...}))
    user = User.build({"first_name": "Tyrion"})
    User.store[-1] is user  # True
"""

from __future__ import annotations

import copy as cp
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from dospanes.core.attribute.models import AttributeDescriptor
from dospanes.core.model.instance import ModelInstance, build_instance_class
from dospanes.storage.store import ModelStore

if TYPE_CHECKING:
    from dospanes.storage.protocol import PersistenceTransport
    from dospanes.sync.coordinator import SyncCoordinator
    from dospanes.sync.models import Subscription
    from dospanes.sync.protocol import SyncSource, SyncTarget

logger = logging.getLogger(__name__)


class ModelDefinition:
    """A registered model: schema, instance class, store, and sync wiring.

    Args:
        name: Registry key and generated class name.
        attributes: Resolved attribute descriptors (read-only mapping).
        resource_path: Location handed to the transport on save.
        identity: Stored attribute matching sync items to instances.
        sync_sources: Sources this model receives updates from.
        sync_targets: Targets this model pushes updates to.
        transport: Persistence transport used by instance.save().
        coordinator: Coordinator that add_sync_source/add_sync_target register with.
    """

    def __init__(
        self,
        name: str,
        attributes: Mapping[str, AttributeDescriptor],
        *,
        resource_path: str | None = None,
        identity: str = "id",
        sync_sources: Iterable[SyncSource] = (),
        sync_targets: Iterable[SyncTarget] = (),
        transport: PersistenceTransport | None = None,
        coordinator: SyncCoordinator | None = None,
    ):
        self._name = name
        self._attributes = attributes
        self._resource_path = resource_path
        self._identity = identity
        self._sync_sources: list[SyncSource] = list(sync_sources)
        self._sync_targets: list[SyncTarget] = list(sync_targets)
        self._transport = transport
        self._coordinator = coordinator
        self._store = ModelStore()

        self._instance_class = build_instance_class(name, attributes)
        self._instance_class.__definition__ = self

    @property
    def name(self) -> str:
        """Model name."""
        return self._name

    @property
    def attributes(self) -> Mapping[str, AttributeDescriptor]:
        """Read-only mapping of attribute name → descriptor."""
        return self._attributes

    @property
    def instance_class(self) -> type[ModelInstance]:
        """Generated class every instance of this model belongs to."""
        return self._instance_class

    @property
    def store(self) -> ModelStore:
        """Every instance ever built, in creation order."""
        return self._store

    @property
    def resource_path(self) -> str | None:
        return self._resource_path

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def transport(self) -> PersistenceTransport | None:
        return self._transport

    @property
    def sync_sources(self) -> tuple[SyncSource, ...]:
        return tuple(self._sync_sources)

    @property
    def sync_targets(self) -> tuple[SyncTarget, ...]:
        return tuple(self._sync_targets)

    def stored_names(self) -> tuple[str, ...]:
        """Names of the stored (non-computed) attributes."""
        return tuple(name for name, d in self._attributes.items() if d.is_stored)

    def default_for(self, name: str) -> Any:
        """Get a fresh copy of a stored attribute's default.

        Args:
            name: Stored attribute name.

        Returns:
            Deep copy of the default, so instances never share mutable defaults.
        """
        return cp.deepcopy(self._attributes[name].default)

    def build(self, attributes: Any = None, /, **overrides: Any) -> ModelInstance:
        """Create an instance and append it to the store.

        Input that is not a mapping is treated as empty. For every stored
        attribute, the input value is used if present, otherwise the default.
        Computed attributes and unknown keys are never stored.

        Args:
            attributes: Attribute name → value.
            **overrides: Values layered over attributes.

        Returns:
            The new, clean instance.
        """
        if not isinstance(attributes, Mapping):
            attributes = {}
        if overrides:
            attributes = {**attributes, **overrides}

        values: dict[str, Any] = {}
        for name in self.stored_names():
            if name in attributes:
                values[name] = attributes[name]
            else:
                values[name] = self.default_for(name)

        instance = self._instance_class(values)
        self._store._append(instance)
        logger.debug("Built %s instance #%d", self._name, len(self._store))
        return instance

    def schema_matches(self, attributes: Mapping[str, AttributeDescriptor]) -> bool:
        """Check whether resolved attributes equal this model's schema.

        Computed getters compare by identity, so a re-declared lambda never matches.
        """
        return dict(self._attributes) == dict(attributes)

    def add_sync_source(self, source: SyncSource) -> None:
        """Record a source on this model and route its updates into the coordinator.

        Raises:
            RuntimeError: If the definition is not attached to a coordinator.
        """
        self._require_coordinator().add_sync_source(source)
        if source not in self._sync_sources:
            self._sync_sources.append(source)

    def add_sync_target(self, target: SyncTarget) -> Subscription:
        """Record a target on this model and register it for update notifications.

        Returns:
            Subscription that unregisters the target's handler.

        Raises:
            RuntimeError: If the definition is not attached to a coordinator.
        """
        subscription = self._require_coordinator().add_sync_target(target)
        if target not in self._sync_targets:
            self._sync_targets.append(target)
        return subscription

    def _require_coordinator(self) -> SyncCoordinator:
        if self._coordinator is None:
            raise RuntimeError(f"Model {self._name!r} is not attached to a sync coordinator")
        return self._coordinator

    def __repr__(self) -> str:
        return f"ModelDefinition({self._name!r}, attributes={list(self._attributes)})"
