"""Sync: publish/subscribe propagation of change batches between models and collaborators."""

from dospanes.sync.models import (
    ChangeSet,
    MergePolicy,
    Subscription,
    SyncBatch,
    SyncErrorHandling,
    SyncMergeError,
    UpdateHandler,
)
from dospanes.sync.protocol import SyncSource, SyncTarget
from dospanes.sync.coordinator import SyncCoordinator

__all__ = [
    # Protocols
    "SyncSource",
    "SyncTarget",
    # Types
    "ChangeSet",
    "SyncBatch",
    "UpdateHandler",
    "MergePolicy",
    "SyncErrorHandling",
    "SyncMergeError",
    "Subscription",
    # Coordinator
    "SyncCoordinator",
]
