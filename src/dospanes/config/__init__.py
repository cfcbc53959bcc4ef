"""Configuration module using Pydantic Settings.

Usage:
    from dospanes.config import DosPanesSettings

    settings = DosPanesSettings(identity_attribute="uuid")
"""

from dospanes.config.settings import DosPanesSettings

__all__ = [
    "DosPanesSettings",
]
