from __future__ import annotations

from typing import Callable, Iterable, Protocol, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    """Interface for looking up case-intake entities by id or predicate."""

    def list(self) -> Iterable[T]:
        """Return every entity in storage order."""

    def filter(self, predicate: Callable[[T], bool]) -> Iterable[T]:
        """Return entities matching ``predicate`` in storage order."""

    def get_by_id(self, entity_id: str) -> T | None:
        """Return a single entity when available."""
