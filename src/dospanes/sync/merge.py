"""Pure functions for sync merge policies.

Each function computes the stored attribute values a sync item applies to a
matched instance. Computed and unknown keys in the item are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dospanes.core.model.definition import ModelDefinition


def merge_patch(definition: ModelDefinition, item: Mapping[str, Any]) -> dict[str, Any]:
    """Take the stored attributes present in the item.

    Args:
        definition: Model the item belongs to.
        item: Attribute name → value.

    Returns:
        Changes for the stored attributes named in item only.
    """
    return {name: item[name] for name in definition.stored_names() if name in item}


def merge_replace(definition: ModelDefinition, item: Mapping[str, Any]) -> dict[str, Any]:
    """Take every stored attribute, resetting those missing from the item.

    Args:
        definition: Model the item belongs to.
        item: Attribute name → value.

    Returns:
        Changes for every stored attribute.
    """
    return {
        name: item[name] if name in item else definition.default_for(name)
        for name in definition.stored_names()
    }
