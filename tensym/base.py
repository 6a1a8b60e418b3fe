"""Base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from typing import Any, Iterable

    from tensym.types import SerialisedField


class Serialisable(ABC):
    """Base class for serialisable objects."""

    _hash: Optional[int]

    @abstractmethod
    def as_json(self) -> Any:
        """Return a JSON representation of the object.

        Returns:
            Object in JSON format.
        """
        pass

    @classmethod
    @abstractmethod
    def from_json(cls, data: Any) -> Serialisable:
        """Return an object loaded from a JSON representation.

        Returns:
            Object loaded from JSON representation.
        """
        pass

    def __hash__(self) -> int:
        """Return the hash of the object.

        Returns:
            The integer hash of the object.

        Note:
            Subclasses of `Serialisable` implement the `_hashable_fields` method to define the
            fields in the hashable representation. The hash is computed lazily and stored in the
            `_hash` attribute, so mutable subclasses must reset `_hash` when they change.
        """
        if self._hash is None:
            self._hash = hash(self._hashable())
        return self._hash

    def _hashable(self) -> tuple[SerialisedField, ...]:
        """Return a hashable representation."""
        return tuple(self._hashable_fields())

    @abstractmethod
    def _hashable_fields(self) -> Iterable[SerialisedField]:
        """Yield fields of the hashable representation."""
        pass

    def __eq__(self, other: Any) -> bool:
        """Check if two objects are equal."""
        if self is other:
            return True
        if not isinstance(other, Serialisable):
            return False
        if self._hash is not None and other._hash is not None:
            if self._hash != other._hash:
                return False
        return self._hashable() == other._hashable()

    def __lt__(self, other: Serialisable) -> bool:
        """Check if an object precedes another."""
        if self is other:
            return False
        for a, b in zip(self._hashable_fields(), other._hashable_fields()):
            if a != b:
                return bool(a < b)
        return False
