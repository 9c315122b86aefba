from __future__ import annotations

from typing import Callable, Iterable, TypeVar

from caseintake.repository.base import Repository

T = TypeVar("T")


class InMemoryRepository(Repository[T]):
    """Repository backed by a plain list; entities must expose an ``id`` attribute."""

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = []
        for item in items:
            self.add(item)

    def __len__(self) -> int:
        return len(self._items)

    def list(self) -> list[T]:
        return list(self._items)

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        return [item for item in self._items if predicate(item)]

    def get_by_id(self, entity_id: str) -> T | None:
        for item in self._items:
            if getattr(item, "id") == entity_id:
                return item
        return None

    def add(self, item: T, *, first: bool = False) -> T:
        """Store ``item``; ``first`` puts it at the front, as newly uploaded evidence is shown."""

        if self.get_by_id(getattr(item, "id")) is not None:
            raise ValueError(f"Duplicate id: {getattr(item, 'id')}")
        if first:
            self._items.insert(0, item)
        else:
            self._items.append(item)
        return item

    def replace(self, item: T) -> T:
        entity_id = getattr(item, "id")
        for idx, existing in enumerate(self._items):
            if getattr(existing, "id") == entity_id:
                self._items[idx] = item
                return item
        raise KeyError(entity_id)
