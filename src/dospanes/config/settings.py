"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
registry and sync coordinator.

Usage:
    from dospanes.config import DosPanesSettings

    # Load from environment variables (DOSPANES_*)
    settings = DosPanesSettings()

    # Or override with explicit values
    settings = DosPanesSettings(merge_policy="replace", on_item_error="skip")
    registry = ModelRegistry(settings=settings)
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from dospanes.sync.models import MergePolicy, SyncErrorHandling


class DosPanesSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for model registries and sync coordinators.

    Attributes:
        identity_attribute: Stored attribute matching sync items to instances,
            for models that declare no identity of their own.
        merge_policy: How matched sync items are merged (patch, replace).
        on_item_error: What sync() does with items that fail to merge (raise, skip).
        warn_on_schema_mismatch: Warn when a model is re-declared with a different schema.

    Environment Variables:
        DOSPANES_IDENTITY_ATTRIBUTE
        DOSPANES_MERGE_POLICY
        DOSPANES_ON_ITEM_ERROR
        DOSPANES_WARN_ON_SCHEMA_MISMATCH
    """

    model_config = SettingsConfigDict(
        env_prefix="DOSPANES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    identity_attribute: str = "id"
    merge_policy: MergePolicy = MergePolicy.PATCH
    on_item_error: SyncErrorHandling = SyncErrorHandling.RAISE
    warn_on_schema_mismatch: bool = True
