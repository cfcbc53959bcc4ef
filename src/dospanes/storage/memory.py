"""In-memory persistence transport.

Records every persisted snapshot, suitable for single-process use and testing.

Usage:
    transport = InMemoryTransport()
    User = Model("User", ModelDescription(attributes={...}, transport=transport))
    await User.build(name="Arya").save()
    transport.saved("User")  # [{"name": "Arya"}]
"""

from __future__ import annotations

import copy as cp
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PersistedRecord:
    """One persisted snapshot."""

    model_name: str
    attributes: dict[str, Any]
    resource_path: str | None


class InMemoryTransport:
    """Transport keeping deep copies of persisted snapshots in a list.

    Args:
        fail_with: Optional exception raised by every persist() call, for
            exercising save failure paths.
    """

    def __init__(self, fail_with: BaseException | None = None):
        self._records: list[PersistedRecord] = []
        self._fail_with = fail_with

    async def persist(
        self,
        model_name: str,
        attributes: Mapping[str, Any],
        resource_path: str | None,
    ) -> None:
        """Record a deep copy of the snapshot.

        Raises:
            BaseException: The configured fail_with exception, if any.
        """
        if self._fail_with is not None:
            raise self._fail_with
        self._records.append(
            PersistedRecord(
                model_name=model_name,
                attributes=cp.deepcopy(dict(attributes)),
                resource_path=resource_path,
            )
        )

    @property
    def records(self) -> list[PersistedRecord]:
        """All persisted records in persist order."""
        return list(self._records)

    def saved(self, model_name: str) -> list[dict[str, Any]]:
        """Get persisted snapshots of one model, in persist order.

        Args:
            model_name: Model to filter by.

        Returns:
            List of attribute snapshots.
        """
        return [r.attributes for r in self._records if r.model_name == model_name]

    def clear(self) -> None:
        """Drop all recorded snapshots."""
        self._records.clear()
