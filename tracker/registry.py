"""Copy-on-write ordered collection keyed by entity id.

A ``Registry`` never changes after construction. ``add``, ``replace``,
``update`` and ``remove`` return a new registry, so any observer holding
the previous one keeps a consistent snapshot. Iteration follows
insertion order and ids are unique.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Generic, Iterable, Iterator, Protocol, TypeVar


class _HasId(Protocol):
    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=_HasId)


class Registry(Generic[T]):
    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T] = ()) -> None:
        entries: dict[str, T] = {}
        for item in items:
            if item.id in entries:
                raise ValueError(f"Duplicate id: {item.id}")
            entries[item.id] = item
        self._items = entries

    @classmethod
    def _wrap(cls, entries: dict[str, T]) -> Registry[T]:
        reg = cls.__new__(cls)
        reg._items = entries
        return reg

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return list(self._items.items()) == list(other._items.items())

    def __repr__(self) -> str:
        return f"Registry({list(self._items.values())!r})"

    def get(self, item_id: str) -> T | None:
        return self._items.get(item_id)

    def ids(self) -> list[str]:
        return list(self._items)

    def add(self, item: T) -> Registry[T]:
        """Append *item*. Raises ValueError if its id is already present."""
        if item.id in self._items:
            raise ValueError(f"Duplicate id: {item.id}")
        entries = dict(self._items)
        entries[item.id] = item
        return self._wrap(entries)

    def replace(self, item: T) -> Registry[T]:
        """Swap in *item* at the position of the entity with the same id."""
        if item.id not in self._items:
            return self
        entries = dict(self._items)
        entries[item.id] = item
        return self._wrap(entries)

    def update(self, item_id: str, fn: Callable[[T], T]) -> Registry[T]:
        current = self._items.get(item_id)
        if current is None:
            return self
        return self.replace(fn(current))

    def remove(self, item_id: str) -> Registry[T]:
        if item_id not in self._items:
            return self
        return self._wrap({k: v for k, v in self._items.items() if k != item_id})


def next_id(existing: Registry, now: datetime) -> str:
    """Millisecond timestamp id, bumped past any id already taken."""
    candidate = int(now.timestamp() * 1000)
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)
