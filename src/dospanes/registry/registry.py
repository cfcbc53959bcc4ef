"""Model registry, Model() shortcut, and the module-level default registry.

Usage:
    User = Model("User", {
        "attributes": {
            "first_name": Attribute.text,
            "last_name": Attribute.text,
            "full_name": Attribute.computed(lambda self: f"{self.first_name} {self.last_name}"),
        },
    })
    Model("User") is User  # True: definitions are singletons per name

    # Explicitly owned registry (tests, multiple applications in one process)
    registry = ModelRegistry()
    Post = registry.define("Post", {"attributes": {"title": Attribute.text}})
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

from dospanes.config.settings import DosPanesSettings
from dospanes.core.attribute import resolve_attributes
from dospanes.core.model import ModelDefinition, SchemaMismatchWarning, normalize_description
from dospanes.sync.coordinator import SyncCoordinator

if TYPE_CHECKING:
    from dospanes.core.model import ModelDescription
    from dospanes.storage.protocol import PersistenceTransport
    from dospanes.sync.protocol import SyncSource, SyncTarget

logger = logging.getLogger(__name__)


def coerce_model_name(name: Any) -> str:
    """Convert a model name to its registry key.

    Args:
        name: Any value with a working str() (strings, numbers, ...).

    Returns:
        String key.

    Raises:
        TypeError: If name is None or cannot be converted to a string.
    """
    if name is None:
        raise TypeError("Model name should be a string or be convertible with str()")
    try:
        return str(name)
    except Exception as e:
        raise TypeError("Model name should be a string or be convertible with str()") from e


class ModelRegistry:
    """Registry mapping model names to their definitions.

    Definitions are singletons per name: the first define() builds the model,
    later calls return it unchanged. The registry owns the SyncCoordinator its
    models exchange updates through.

    Args:
        settings: Registry and sync configuration. Loaded from the environment if None.
        default_sync_sources: Sources prepended to every new model's sources.
        default_sync_targets: Targets prepended to every new model's targets.
        default_transport: Transport for models that declare none.
    """

    def __init__(
        self,
        settings: DosPanesSettings | None = None,
        *,
        default_sync_sources: Iterable[SyncSource] = (),
        default_sync_targets: Iterable[SyncTarget] = (),
        default_transport: PersistenceTransport | None = None,
    ) -> None:
        self._settings = settings or DosPanesSettings()
        self._definitions: dict[str, ModelDefinition] = {}
        self._sync = SyncCoordinator(self, settings=self._settings)
        self.default_sync_sources: list[SyncSource] = list(default_sync_sources)
        self.default_sync_targets: list[SyncTarget] = list(default_sync_targets)
        self.default_transport = default_transport

    @property
    def settings(self) -> DosPanesSettings:
        return self._settings

    @property
    def sync(self) -> SyncCoordinator:
        """Coordinator shared by every model of this registry."""
        return self._sync

    def define(
        self,
        name: Any,
        description: ModelDescription | Mapping[str, Any] | None = None,
    ) -> ModelDefinition:
        """Define a model, or return the existing definition with that name.

        Args:
            name: Model name; converted with str().
            description: Schema of the model. Ignored if the name is registered.

        Returns:
            The model's definition.

        Raises:
            TypeError: If name cannot be converted to a string, or description
                has an invalid type.
            ValueError: If an attribute name cannot be installed on instances.
        """
        model_name = coerce_model_name(name)

        existing = self._definitions.get(model_name)
        if existing is not None:
            if description is not None and self._settings.warn_on_schema_mismatch:
                self._check_schema(existing, description)
            return existing

        schema = normalize_description(description)
        definition = ModelDefinition(
            model_name,
            resolve_attributes(schema.attributes),
            resource_path=schema.resource_path,
            identity=schema.identity or self._settings.identity_attribute,
            sync_sources=[*self.default_sync_sources, *schema.sync_sources],
            sync_targets=[*self.default_sync_targets, *schema.sync_targets],
            transport=schema.transport or self.default_transport,
            coordinator=self._sync,
        )

        if definition.identity not in definition.stored_names():
            logger.warning(
                "Model %r has no stored identity attribute %r; sync cannot match its items",
                model_name,
                definition.identity,
            )

        for source in definition.sync_sources:
            self._sync.add_sync_source(source)
        for target in definition.sync_targets:
            self._sync.add_sync_target(target)

        self._definitions[model_name] = definition
        logger.debug("Defined model %r with attributes %s", model_name, list(definition.attributes))
        return definition

    __call__ = define

    def _check_schema(
        self,
        existing: ModelDefinition,
        description: ModelDescription | Mapping[str, Any],
    ) -> None:
        try:
            schema = normalize_description(description)
            matches = existing.schema_matches(resolve_attributes(schema.attributes))
        except TypeError:
            matches = False
        if not matches:
            warnings.warn(
                f"Model {existing.name!r} is already defined with a different schema. "
                f"The new schema is ignored.",
                SchemaMismatchWarning,
                stacklevel=3,
            )

    def get(self, name: Any) -> ModelDefinition | None:
        """Get a definition by name.

        Args:
            name: Model name; converted with str().

        Returns:
            The definition, or None if no model has that name.
        """
        if name is None:
            return None
        return self._definitions.get(str(name))

    def unregister(self, name: Any) -> bool:
        """Forget a model definition. Existing instances are unaffected.

        Returns:
            True if the model was registered, False otherwise.
        """
        return self._definitions.pop(coerce_model_name(name), None) is not None

    def clear(self) -> None:
        """Forget every definition and every sync handler and source."""
        self._definitions.clear()
        self._sync.reset()

    def __contains__(self, name: object) -> bool:
        return name is not None and str(name) in self._definitions

    def __iter__(self) -> Iterator[ModelDefinition]:
        return iter(list(self._definitions.values()))

    def __len__(self) -> int:
        return len(self._definitions)


# Module-level registry instance
_registry: ModelRegistry | None = None


def get_registry() -> ModelRegistry:
    """Access the default model registry, creating it on first use.

    Returns:
        The process-local default ModelRegistry.
    """
    global _registry
    if _registry is None:
        _registry = ModelRegistry()
    return _registry


def Model(  # noqa: N802
    name: Any,
    description: ModelDescription | Mapping[str, Any] | None = None,
) -> ModelDefinition:
    """Define a model on the default registry, or return the existing one.

    Equivalent to get_registry().define(name, description).
    """
    return get_registry().define(name, description)
