"""Sync models: batch shapes, merge policy, error handling, and subscriptions."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, TypedDict

if TYPE_CHECKING:
    from dospanes.core.model.definition import ModelDefinition
    from dospanes.sync.coordinator import SyncCoordinator


class ChangeSet(TypedDict):
    """Per-model section of a sync batch."""

    items: Sequence[Mapping[str, Any]]


SyncBatch = Mapping[str, ChangeSet]
"""Model name → change set. Each item is a mapping of attribute name → value."""

UpdateHandler = Callable[[SyncBatch], Any]
"""Signature: (batch) -> awaitable or plain value."""


class MergePolicy(Enum):
    """How a matched sync item is folded into a stored instance."""

    PATCH = "patch"
    """Overwrite only the stored attributes present in the item. Default."""

    REPLACE = "replace"
    """Overwrite every stored attribute; those missing from the item reset to defaults."""

    def get_strategy(self) -> Callable[[ModelDefinition, Mapping[str, Any]], dict[str, Any]]:
        """Get the pure function computing the stored values to apply.

        Returns:
            Function of (definition, item) → stored attribute changes.
        """
        # Late import to avoid circular dependency
        from dospanes.sync import merge

        strategies = {
            MergePolicy.PATCH: merge.merge_patch,
            MergePolicy.REPLACE: merge.merge_replace,
        }
        return strategies[self]


class SyncErrorHandling(Enum):
    """What sync() does when one item cannot be merged."""

    RAISE = "raise"  # Fail the whole sync with SyncMergeError
    SKIP = "skip"  # Log and continue with the next item


class SyncMergeError(Exception):
    """Raised when a sync item cannot be merged and handling is RAISE."""

    def __init__(self, model_name: str, item: Any, cause: BaseException):
        super().__init__(f"Failed to merge {model_name} sync item {item!r}: {cause}")
        self.model_name = model_name
        self.item = item


@dataclass(eq=False)
class Subscription:
    """Handle for handlers registered on a SyncCoordinator.

    cancel() removes exactly the handlers this subscription registered; it is
    idempotent and also runs when leaving a `with` block.
    """

    coordinator: SyncCoordinator
    handlers: tuple[UpdateHandler, ...]
    _active: bool = field(default=True, repr=False)

    @property
    def active(self) -> bool:
        """Whether cancel() has not been called yet."""
        return self._active

    def cancel(self) -> None:
        """Unregister this subscription's handlers."""
        if self._active:
            self.coordinator._remove_handlers(self.handlers)
            self._active = False

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()
