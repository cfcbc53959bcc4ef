"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dospanes import (
    Attribute,
    DosPanesSettings,
    ModelDefinition,
    ModelDescription,
    ModelRegistry,
)


def full_name(user):
    return f"{user.first_name} {user.last_name}"


@pytest.fixture
def settings() -> DosPanesSettings:
    """Settings independent of the environment."""
    return DosPanesSettings(
        identity_attribute="id",
        merge_policy="patch",
        on_item_error="raise",
        warn_on_schema_mismatch=True,
    )


@pytest.fixture
def registry(settings: DosPanesSettings) -> ModelRegistry:
    """Fresh ModelRegistry instance."""
    return ModelRegistry(settings=settings)


@pytest.fixture
def user_description() -> ModelDescription:
    return ModelDescription(
        attributes={
            "id": Attribute.number,
            "first_name": Attribute.text,
            "last_name": Attribute.text,
            "full_name": Attribute.computed(full_name),
        },
        resource_path="/users",
    )


@pytest.fixture
def user_model(registry: ModelRegistry, user_description: ModelDescription) -> ModelDefinition:
    return registry.define("User", user_description)


class RecordingTarget:
    """Sync target recording every batch it receives."""

    def __init__(self, name: str = "target", log: list | None = None):
        self.name = name
        self.batches: list = []
        self.log = log if log is not None else []

    async def sync(self, batch):
        self.log.append(self.name)
        self.batches.append(batch)
        return self.name


class RecordingSource:
    """Sync source storing the handler it is given and pushing batches on demand."""

    def __init__(self):
        self.handlers: list = []

    def on_update(self, handler):
        self.handlers.append(handler)

    async def push(self, batch):
        return [await handler(batch) for handler in self.handlers]


@pytest.fixture
def target_cls():
    return RecordingTarget


@pytest.fixture
def source_cls():
    return RecordingSource
