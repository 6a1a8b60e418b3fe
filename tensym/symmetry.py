"""Signed permutation symmetry."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from tensym.base import Serialisable
from tensym.errors import DimensionMismatchError
from tensym.permutations import (
    compose,
    identity,
    inverse,
    is_identity,
    permute,
    validate,
)
from tensym.printing import format_cycles, format_symmetry

if TYPE_CHECKING:
    from typing import Any, Iterable, Sequence

    from tensym.permutations import Permutation
    from tensym.types import SerialisedField, _SymmetryJSON


class Symmetry(Serialisable):
    """Class for a signed permutation.

    Args:
        permutation: Permutation in one-line notation.
        sign: Whether applying the permutation negates the object.
    """

    __slots__ = ("_permutation", "_sign", "_hash")

    _permutation: Permutation
    _sign: bool

    def __init__(self, permutation: Iterable[int], sign: bool = False):
        """Initialise the symmetry."""
        self._permutation = validate(permutation)
        self._sign = bool(sign)
        self._hash = None

    @classmethod
    def _trusted(cls, permutation: Permutation, sign: bool) -> Symmetry:
        """Build a symmetry from a permutation that is known to be valid."""
        obj = cls.__new__(cls)
        obj._permutation = permutation
        obj._sign = sign
        obj._hash = None
        return obj

    @classmethod
    def identity(cls, dimension: int) -> Symmetry:
        """Get the identity symmetry.

        Args:
            dimension: Number of points.

        Returns:
            Identity permutation with positive sign.
        """
        return cls._trusted(identity(dimension), False)

    @property
    def permutation(self) -> Permutation:
        """Get the permutation."""
        return self._permutation

    @property
    def sign(self) -> bool:
        """Get the sign, ``True`` for negation."""
        return self._sign

    @property
    def dimension(self) -> int:
        """Get the dimension."""
        return len(self._permutation)

    def is_identity(self) -> bool:
        """Return whether the permutation is the identity, regardless of the sign."""
        return is_identity(self._permutation)

    def inverse(self) -> Symmetry:
        """Get the inverse permutation, with the same sign."""
        return Symmetry._trusted(inverse(self._permutation), self._sign)

    def permute(self, sequence: Sequence[Any]) -> tuple[Any, ...]:
        """Move element ``i`` of a sequence to position ``permutation[i]``.

        Args:
            sequence: Sequence to permute.

        Returns:
            Permuted sequence.
        """
        return permute(self._permutation, sequence)

    def as_matrix(self) -> np.ndarray:
        """Get the signed permutation matrix.

        Returns:
            Matrix ``M`` with ``M[permutation[i], i] = ±1``, such that the matrix of
            ``a * b`` is ``b.as_matrix() @ a.as_matrix()``.
        """
        dimension = self.dimension
        matrix = np.zeros((dimension, dimension), dtype=int)
        rows = np.array(self._permutation, dtype=int)
        matrix[rows, np.arange(dimension)] = -1 if self._sign else 1
        return matrix

    def _hashable_fields(self) -> Iterable[SerialisedField]:
        """Yield fields of the hashable representation."""
        yield self.__class__.__name__
        yield self.dimension
        yield from self._permutation
        yield self._sign

    def as_json(self) -> _SymmetryJSON:
        """Return a JSON representation of the object.

        Returns:
            Object in JSON format.
        """
        return {
            "_type": self.__class__.__name__,
            "_module": self.__class__.__module__,
            "permutation": self._permutation,
            "sign": self._sign,
        }

    @classmethod
    def from_json(cls, data: _SymmetryJSON) -> Symmetry:
        """Return an object loaded from a JSON representation.

        Returns:
            Object loaded from JSON representation.
        """
        return cls(data["permutation"], data["sign"])

    def __repr__(self) -> str:
        """Return a string representation.

        Returns:
            String representation.
        """
        return f"{self.__class__.__name__}({self._permutation}, {self._sign})"

    def __str__(self) -> str:
        """Return the one-line notation with the sign."""
        return format_symmetry(self._permutation, self._sign)

    def cycle_string(self) -> str:
        """Return the cycle notation with a leading minus for negating symmetries."""
        return ("-" if self._sign else "") + format_cycles(self._permutation)

    def __add__(self, other: Symmetry) -> Symmetry:
        """Direct sum, with ``other`` acting on the points following those of ``self``."""
        offset = self.dimension
        perm = self._permutation + tuple(p + offset for p in other._permutation)
        return Symmetry._trusted(perm, self._sign ^ other._sign)

    def __mul__(self, other: Symmetry) -> Symmetry:
        """Compose symmetries, applying ``self`` first and ``other`` second."""
        if self.dimension != other.dimension:
            raise DimensionMismatchError(
                f"Cannot compose symmetries of dimensions {self.dimension} and {other.dimension}."
            )
        perm = compose(self._permutation, other._permutation)
        return Symmetry._trusted(perm, self._sign ^ other._sign)
