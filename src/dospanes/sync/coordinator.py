"""Sync coordinator: update handler registry and batch merging.

Usage:
    registry = ModelRegistry()
    coordinator = registry.sync

    # Targets receive every notification
    subscription = coordinator.add_sync_target(target)
    await coordinator.notify_sync_targets({"User": {"items": [...]}})

    # Sources push batches into the registry's stores
    coordinator.add_sync_source(source)   # source.on_update(coordinator.sync)
    await coordinator.sync({"User": {"items": [{"id": 1, "name": "Arya"}]}})

    subscription.cancel()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any

from dospanes.sync.models import (
    Subscription,
    SyncBatch,
    SyncErrorHandling,
    SyncMergeError,
    UpdateHandler,
)

if TYPE_CHECKING:
    from dospanes.config.settings import DosPanesSettings
    from dospanes.core.model.definition import ModelDefinition
    from dospanes.registry.registry import ModelRegistry
    from dospanes.sync.protocol import SyncSource, SyncTarget

logger = logging.getLogger(__name__)


async def _resolved(value: Any) -> Any:
    return value


def _ensure_awaitable(value: Any) -> Awaitable[Any]:
    if inspect.isawaitable(value):
        return value
    return _resolved(value)


class SyncCoordinator:
    """Handler registry and merge step shared by all models of one registry.

    Handlers are invoked in registration order on every notification and
    awaited together; the notification fails if any handler fails. Not
    thread-safe: all calls are expected on the event loop's thread.

    Args:
        registry: Registry whose models sync() merges into.
        settings: Merge policy and error handling. Loaded from the environment if None.
    """

    def __init__(self, registry: ModelRegistry, settings: DosPanesSettings | None = None):
        self._registry = registry
        if settings is None:
            # Late import to avoid circular dependency
            from dospanes.config.settings import DosPanesSettings

            settings = DosPanesSettings()
        self._settings = settings
        self._handlers: list[UpdateHandler] = []
        self._sources: list[SyncSource] = []

    @property
    def settings(self) -> DosPanesSettings:
        return self._settings

    @property
    def handlers(self) -> tuple[UpdateHandler, ...]:
        """Registered update handlers in registration order."""
        return tuple(self._handlers)

    @property
    def sources(self) -> tuple[SyncSource, ...]:
        """Registered sync sources in registration order."""
        return tuple(self._sources)

    # Registration

    def on_update(self, *handlers: UpdateHandler) -> Subscription:
        """Append handlers to the notification list.

        Duplicates are allowed; each registration is invoked.

        Args:
            *handlers: Callables accepting a sync batch.

        Returns:
            Subscription removing these handlers when cancelled.
        """
        self._handlers.extend(handlers)
        return Subscription(coordinator=self, handlers=tuple(handlers))

    def add_sync_source(self, source: SyncSource) -> None:
        """Route a source's updates into this coordinator's sync().

        Registering the same source twice has no effect.

        Args:
            source: Object exposing on_update(handler).
        """
        if any(existing is source for existing in self._sources):
            return
        self._sources.append(source)
        source.on_update(self.sync)
        logger.debug("Added sync source %r", source)

    def add_sync_target(self, target: SyncTarget) -> Subscription:
        """Register target.sync for update notifications.

        A target whose handler is already registered is not added again; the
        returned subscription is then empty and cancelling it is a no-op.

        Args:
            target: Object exposing sync(batch).

        Returns:
            Subscription removing the target's handler when cancelled.
        """
        handler = target.sync
        if handler in self._handlers:
            return Subscription(coordinator=self, handlers=())
        logger.debug("Added sync target %r", target)
        return self.on_update(handler)

    def remove_sync_target(self, target: SyncTarget) -> None:
        """Unregister a target's handler. No-op if it was never registered.

        Args:
            target: Object exposing sync(batch).
        """
        handler = target.sync
        if handler in self._handlers:
            self._handlers.remove(handler)

    def clear_sync_targets(self) -> None:
        """Unregister every handler."""
        self._handlers.clear()

    def reset(self) -> None:
        """Unregister every handler and forget every source."""
        self._handlers.clear()
        self._sources.clear()

    def _remove_handlers(self, handlers: Iterable[UpdateHandler]) -> None:
        for handler in handlers:
            if handler in self._handlers:
                self._handlers.remove(handler)

    # Propagation

    async def notify_sync_targets(self, batch: SyncBatch | None = None) -> list[Any]:
        """Invoke every handler with the batch and wait for all of them.

        Handlers are called in registration order against a snapshot of the
        handler list; completion order is unspecified.

        Args:
            batch: Batch passed to every handler. Defaults to an empty mapping.

        Returns:
            Handler results in registration order.

        Raises:
            Exception: The first failure raised by any handler.
        """
        data: SyncBatch = {} if batch is None else batch
        handlers = list(self._handlers)
        logger.debug("Notifying %d sync handlers", len(handlers))

        pending: list[Awaitable[Any]] = []
        try:
            for handler in handlers:
                pending.append(_ensure_awaitable(handler(data)))
        except Exception:
            for awaitable in pending:
                if inspect.iscoroutine(awaitable):
                    awaitable.close()
            raise

        return list(await asyncio.gather(*pending))

    async def sync(self, batch: SyncBatch) -> dict[str, Any]:
        """Merge a batch of per-model changes into the registered stores.

        Each item is matched to an instance by the model's identity attribute
        and merged with the configured MergePolicy. Unknown models, items
        without an identity value, and unmatched items are skipped. Merged
        instances are not marked dirty, and no instance is ever created.

        Args:
            batch: Model name → {"items": [attribute mapping, ...]}.

        Returns:
            Shallow copy of the batch; an empty dict if batch is not a mapping.

        Raises:
            SyncMergeError: If an item fails to merge and handling is RAISE.
        """
        if not isinstance(batch, Mapping):
            logger.warning("Ignoring sync batch of type %s", type(batch).__name__)
            return {}

        merge = self._settings.merge_policy.get_strategy()
        merged = 0

        for model_name, change_set in batch.items():
            definition = self._registry.get(model_name)
            if definition is None:
                logger.warning("Sync batch references unknown model %r, skipping", model_name)
                continue

            for item in self._items_of(model_name, change_set):
                try:
                    if self._merge_item(definition, item, merge):
                        merged += 1
                except Exception as e:
                    if self._settings.on_item_error is SyncErrorHandling.SKIP:
                        logger.warning("Skipping %s sync item %r: %s", model_name, item, e)
                        continue
                    raise SyncMergeError(model_name, item, e) from e

        logger.debug("Sync merged %d items across %d models", merged, len(batch))
        return dict(batch)

    def _items_of(self, model_name: str, change_set: Any) -> Iterable[Any]:
        if not isinstance(change_set, Mapping):
            error = TypeError(f"Change set must be a mapping, got {type(change_set).__name__}")
            if self._settings.on_item_error is SyncErrorHandling.SKIP:
                logger.warning("Skipping %s change set: %s", model_name, error)
                return ()
            raise SyncMergeError(model_name, change_set, error)
        return change_set.get("items") or ()

    def _merge_item(
        self,
        definition: ModelDefinition,
        item: Any,
        merge: Callable[[ModelDefinition, Mapping[str, Any]], dict[str, Any]],
    ) -> bool:
        """Apply one item to its matching instance.

        Returns:
            True if an instance was updated, False if the item was skipped.

        Raises:
            TypeError: If item is not a mapping.
        """
        if not isinstance(item, Mapping):
            raise TypeError(f"Sync item must be a mapping, got {type(item).__name__}")

        identity = definition.identity
        if identity not in item:
            logger.info("%s sync item has no %r value, skipping", definition.name, identity)
            return False

        instance = definition.store.find(identity, item[identity])
        if instance is None:
            logger.info(
                "No %s instance with %s=%r, skipping", definition.name, identity, item[identity]
            )
            return False

        instance._load(merge(definition, item))
        return True
