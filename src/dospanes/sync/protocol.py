"""Protocols for sync collaborators.

A source pushes its updates into the models by calling the handler it was
given through on_update(). A target receives the models' updates through
sync().
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dospanes.sync.models import SyncBatch, UpdateHandler


@runtime_checkable
class SyncSource(Protocol):
    """Collaborator whose updates are pulled into registered model stores."""

    def on_update(self, handler: UpdateHandler) -> Any:
        """Register the callback to invoke with each batch of updates.

        Args:
            handler: Coroutine function accepting a sync batch.
        """
        ...


@runtime_checkable
class SyncTarget(Protocol):
    """Collaborator that receives the models' updates."""

    def sync(self, batch: SyncBatch) -> Awaitable[Any] | Any:
        """Receive a sync batch.

        Args:
            batch: Model name → change set.

        Returns:
            Awaitable completion signal (or a plain value for synchronous targets).
        """
        ...
