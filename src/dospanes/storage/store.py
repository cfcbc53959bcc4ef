"""Model store: append-only ordered sequence of a model's instances.

Only ModelDefinition.build() appends; everything else sees a read-only sequence.

Usage:
    store = ModelStore()
    store._append(instance)         # internal, called by build()
    len(store), store[0], list(store)
    store.find("id", 42)            # first instance whose stored id == 42
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, overload

if TYPE_CHECKING:
    from dospanes.core.model.instance import ModelInstance


class ModelStore(Sequence["ModelInstance"]):
    """Simple in-memory list of instances in creation order.

    Not indexed - find() is an O(n) scan.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ModelInstance] = []

    def _append(self, instance: ModelInstance) -> None:
        """Append a newly built instance."""
        self._items.append(instance)

    def find(self, attribute: str, value: Any) -> ModelInstance | None:
        """Find the first instance whose stored attribute equals value.

        Args:
            attribute: Stored attribute name.
            value: Value to match.

        Returns:
            Matching instance, or None if no instance matches.
        """
        for instance in self._items:
            if instance.attributes.get(attribute) == value:
                return instance
        return None

    def dirty(self) -> Iterator[ModelInstance]:
        """Iterate instances with unsaved changes, in creation order."""
        return (instance for instance in self._items if instance.is_dirty())

    @overload
    def __getitem__(self, index: int) -> ModelInstance: ...

    @overload
    def __getitem__(self, index: slice) -> list[ModelInstance]: ...

    def __getitem__(self, index: int | slice) -> ModelInstance | list[ModelInstance]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ModelInstance]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"ModelStore({len(self._items)} instances)"
