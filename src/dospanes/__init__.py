"""DosPanes: schema-driven tracked models with publish/subscribe synchronization.

Usage:
    from dospanes import Attribute, Model

    User = Model("User", {
        "attributes": {
            "id": Attribute.number,
            "first_name": Attribute.text,
            "last_name": Attribute.text,
            "full_name": Attribute.computed(lambda self: f"{self.first_name} {self.last_name}"),
        },
    })

    user = User.build({"first_name": "Tyrion", "last_name": "Lannister"})
    user.full_name        # "Tyrion Lannister"
    user.first_name = "Cersei"
    user.is_dirty()       # True
    await user.save()
    user.is_dirty()       # False
"""

__version__ = "0.1.0"

# Core primitives
from dospanes.core import (
    Attribute,
    AttributeDescriptor,
    ModelDefinition,
    ModelDescription,
    ModelInstance,
    SchemaMismatchWarning,
)

# Configuration
from dospanes.config import DosPanesSettings

# Registry
from dospanes.registry import (
    Model,
    ModelRegistry,
    get_registry,
)

# Storage
from dospanes.storage import (
    InMemoryTransport,
    ModelStore,
    PersistenceTransport,
)

# Sync
from dospanes.sync import (
    MergePolicy,
    Subscription,
    SyncBatch,
    SyncCoordinator,
    SyncErrorHandling,
    SyncMergeError,
    SyncSource,
    SyncTarget,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Attribute",
    "AttributeDescriptor",
    "ModelDefinition",
    "ModelDescription",
    "ModelInstance",
    "SchemaMismatchWarning",
    # Config
    "DosPanesSettings",
    # Registry
    "Model",
    "ModelRegistry",
    "get_registry",
    # Storage
    "ModelStore",
    "PersistenceTransport",
    "InMemoryTransport",
    # Sync
    "SyncCoordinator",
    "SyncSource",
    "SyncTarget",
    "SyncBatch",
    "MergePolicy",
    "SyncErrorHandling",
    "SyncMergeError",
    "Subscription",
]
