"""Caching utilities."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from typing import Callable, Hashable

T = TypeVar("T")


class LockedCache(Generic[T]):
    """A thread-safe, populate-once cache of immutable objects."""

    _table: dict[Hashable, T]

    def __init__(self) -> None:
        """Initialise the cache."""
        self._table = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable, factory: Callable[[], T]) -> T:
        """Get an object from the cache, creating it if necessary.

        Args:
            key: The key to look up.
            factory: A callable that creates the object if it is not found.

        Returns:
            The object associated with the key.

        Note:
            The lookup outside the lock is a fast path only. Population happens with the lock
            held and re-checks the table, so ``factory`` is called at most once per key.
        """
        obj = self._table.get(key)
        if obj is not None:
            return obj
        with self._lock:
            obj = self._table.get(key)
            if obj is None:
                obj = factory()
                self._table[key] = obj
            return obj

    def __contains__(self, key: Hashable) -> bool:
        """Check if a key has been populated."""
        return key in self._table

    def __len__(self) -> int:
        """Get the number of cached objects."""
        return len(self._table)
