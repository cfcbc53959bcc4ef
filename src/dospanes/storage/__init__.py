"""Storage: model stores and persistence transports."""

from dospanes.storage.memory import InMemoryTransport, PersistedRecord
from dospanes.storage.protocol import PersistenceTransport
from dospanes.storage.store import ModelStore

__all__ = [
    "ModelStore",
    "PersistenceTransport",
    "InMemoryTransport",
    "PersistedRecord",
]
