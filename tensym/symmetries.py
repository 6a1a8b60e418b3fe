"""Sets of symmetries generating a group of signed permutations.

A `SymmetrySet` stores a group of signed permutations by a basis of generators. The set keeps
the group consistent: a permutation that can be reached by composing basis elements must always
carry the same sign, no matter which composition is used to reach it.
"""

from __future__ import annotations

import itertools
import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

from tensym import SPAN_WARNING_SIZE
from tensym.base import Serialisable
from tensym.errors import DimensionMismatchError, InconsistentGeneratorsError
from tensym.orbits import orbits
from tensym.permutations import validate
from tensym.sims import StabilizerChain
from tensym.symmetry import Symmetry

if TYPE_CHECKING:
    from typing import Iterable, Iterator, Optional

    from tensym.permutations import Permutation
    from tensym.types import SerialisedField, _SymmetrySetJSON

logger = logging.getLogger(__name__)


class SymmetryKind(Enum):
    """Enum for the variants of a symmetry set."""

    EMPTY = "empty"
    """Only the identity, for dimension 0 or 1. Immutable."""

    FULL = "full"
    """The full symmetric group with positive signs. Immutable."""

    GENERAL = "general"
    """The group generated by a mutable, consistency-checked basis."""


def iter_span(basis: Iterable[Symmetry], dimension: int) -> Iterator[Symmetry]:
    """Iterate over all compositions of a basis of symmetries.

    The span is expanded breadth-first by right-multiplying the elements of the previous layer by
    every basis element. The identity is yielded first.

    Args:
        basis: Basis symmetries.
        dimension: Number of points.

    Yields:
        Every element of the generated group exactly once.

    Raises:
        InconsistentGeneratorsError: If a permutation is reached with both signs.
    """
    basis = tuple(basis)
    unit = Symmetry.identity(dimension)
    seen: dict[Permutation, bool] = {unit.permutation: unit.sign}
    yield unit

    warned = False
    layer = [unit]
    while layer:
        next_layer = []
        for element in layer:
            for generator in basis:
                product = element * generator
                sign = seen.get(product.permutation)
                if sign is None:
                    seen[product.permutation] = product.sign
                    next_layer.append(product)
                    yield product
                elif sign != product.sign:
                    raise InconsistentGeneratorsError(
                        f"{product.permutation} is generated with both signs."
                    )
        if not warned and len(seen) > SPAN_WARNING_SIZE:
            logger.warning(
                "Enumerating more than %d symmetries of dimension %d",
                SPAN_WARNING_SIZE,
                dimension,
            )
            warned = True
        layer = next_layer


class SymmetrySet(Serialisable):
    """Set of symmetries, stored as a basis generating a group.

    Args:
        dimension: Number of points.
        kind: Variant of the set.
        basis: Basis symmetries, excluding the identity which is always included.

    Note:
        Use the functions in `tensym.factory` to construct symmetry sets. The constructor trusts
        the basis to be consistent with the variant.
    """

    __slots__ = ("_dimension", "_kind", "_basis", "_chain", "_hash")

    _dimension: int
    _kind: SymmetryKind
    _basis: list[Symmetry]
    _chain: Optional[StabilizerChain]

    def __init__(
        self,
        dimension: int,
        kind: SymmetryKind = SymmetryKind.GENERAL,
        basis: Iterable[Symmetry] = (),
    ):
        """Initialise the object."""
        if dimension < 0:
            raise ValueError(f"Dimension must be non-negative, got {dimension}.")
        if kind == SymmetryKind.EMPTY and dimension > 1:
            raise ValueError(f"Empty symmetry sets have dimension 0 or 1, got {dimension}.")
        if kind != SymmetryKind.EMPTY and dimension < 2:
            raise ValueError(f"{kind.name} symmetry sets need dimension 2 or more.")
        self._dimension = dimension
        self._kind = kind
        self._basis = [Symmetry.identity(dimension)]
        for symmetry in basis:
            self._check_dimension(symmetry)
            self._basis.append(symmetry)
        self._hash = None
        self._chain = None

    @property
    def dimension(self) -> int:
        """Get the number of points."""
        return self._dimension

    @property
    def kind(self) -> SymmetryKind:
        """Get the variant of the set."""
        return self._kind

    @property
    def basis(self) -> tuple[Symmetry, ...]:
        """Get the basis symmetries, starting with the identity."""
        return tuple(self._basis)

    @property
    def is_mutable(self) -> bool:
        """Get whether symmetries can be added to the set."""
        return self._kind == SymmetryKind.GENERAL

    def is_empty(self) -> bool:
        """Return whether the only element of the group is the identity."""
        if self._kind == SymmetryKind.FULL:
            return False
        return all(symmetry.is_identity() for symmetry in self._basis)

    def _check_dimension(self, symmetry: Symmetry) -> None:
        """Check that a symmetry has the dimension of the set."""
        if symmetry.dimension != self._dimension:
            raise DimensionMismatchError(
                f"Symmetry of dimension {symmetry.dimension} cannot be added to a set of "
                f"dimension {self._dimension}."
            )

    def add(self, symmetry: Symmetry) -> bool:
        """Add a symmetry, if it extends the group.

        Args:
            symmetry: Symmetry to add.

        Returns:
            Whether the group was extended. If ``False``, the symmetry was already a composition
            of the basis symmetries with the same sign.

        Raises:
            DimensionMismatchError: If the symmetry has a different dimension.
            InconsistentGeneratorsError: If the symmetry contradicts the sign of a permutation
                already in the group, or makes the group inconsistent. The set is left
                unchanged.
        """
        self._check_dimension(symmetry)

        if self._kind == SymmetryKind.EMPTY or self._kind == SymmetryKind.FULL:
            # Every permutation is already in the group, with positive sign
            if symmetry.sign:
                raise InconsistentGeneratorsError(
                    f"{symmetry} contradicts the {self._kind.name.lower()} symmetry set."
                )
            return False

        for element in self:
            if element.permutation == symmetry.permutation:
                if element.sign != symmetry.sign:
                    raise InconsistentGeneratorsError(
                        f"{symmetry} contradicts {element}, which is already in the group."
                    )
                return False

        # Validate the extended group on a scratch basis before committing
        candidate = self._basis + [symmetry]
        for _ in iter_span(candidate, self._dimension):
            pass

        self._basis = candidate
        self._hash = None
        self._chain = None
        logger.debug("Added %s to basis of dimension %d", symmetry, self._dimension)
        return True

    def add_unsafe(self, symmetry: Symmetry) -> bool:
        """Add a symmetry without checking the consistency of the group.

        Args:
            symmetry: Symmetry to add.

        Returns:
            ``True``.

        Raises:
            DimensionMismatchError: If the symmetry has a different dimension.
            TypeError: If the set is immutable.
        """
        if not self.is_mutable:
            raise TypeError(f"Cannot add symmetries to a {self._kind.name.lower()} symmetry set.")
        self._check_dimension(symmetry)
        self._basis.append(symmetry)
        self._hash = None
        self._chain = None
        return True

    def __iter__(self) -> Iterator[Symmetry]:
        """Iterate over every element of the group.

        Yields:
            Each element of the group once. A new, independent iteration starts on every call.
        """
        if self._kind == SymmetryKind.EMPTY:
            yield Symmetry.identity(self._dimension)
        elif self._kind == SymmetryKind.FULL:
            for perm in itertools.permutations(range(self._dimension)):
                yield Symmetry._trusted(perm, False)
        else:
            yield from iter_span(self._basis, self._dimension)

    def clone(self) -> SymmetrySet:
        """Return a copy that can be modified independently.

        Returns:
            Copy of the set. Immutable sets return themselves.
        """
        if not self.is_mutable:
            return self
        return SymmetrySet(self._dimension, self._kind, self._basis[1:])

    def stabilizer_chain(self) -> StabilizerChain:
        """Get a stabilizer chain for the permutations of the group, ignoring signs.

        The chain is built on first use and kept until the basis changes.
        """
        if self._chain is None:
            generators = [symmetry.permutation for symmetry in self._basis]
            self._chain = StabilizerChain.build(generators, self._dimension)
        return self._chain

    def order(self) -> int:
        """Get the number of elements of the group."""
        if self._kind == SymmetryKind.EMPTY:
            return 1
        if self._kind == SymmetryKind.FULL:
            return math.factorial(self._dimension)
        return self.stabilizer_chain().order()

    def contains(self, permutation: Iterable[int]) -> bool:
        """Check if a permutation is an element of the group, ignoring signs.

        Args:
            permutation: Permutation to check.

        Returns:
            Whether the permutation is in the group.
        """
        permutation = validate(permutation, self._dimension)
        if self._kind == SymmetryKind.EMPTY or self._kind == SymmetryKind.FULL:
            return True
        return self.stabilizer_chain().contains(permutation)

    def orbits(self) -> list[tuple[int, ...]]:
        """Partition the points into classes that the group permutes among themselves."""
        generators = [symmetry.permutation for symmetry in self._basis]
        return orbits(generators, self._dimension)

    def _hashable_fields(self) -> Iterable[SerialisedField]:
        """Yield fields of the hashable representation."""
        yield self.__class__.__name__
        yield self._kind.value
        yield self._dimension
        yield len(self._basis)
        for symmetry in self._basis:
            yield from symmetry._hashable_fields()

    def as_json(self) -> _SymmetrySetJSON:
        """Return a JSON representation of the object.

        Returns:
            Object in JSON format.
        """
        return {
            "_type": self.__class__.__name__,
            "_module": self.__class__.__module__,
            "kind": self._kind.value,
            "dimension": self._dimension,
            "basis": tuple(symmetry.as_json() for symmetry in self._basis[1:]),
        }

    @classmethod
    def from_json(cls, data: _SymmetrySetJSON) -> SymmetrySet:
        """Return an object loaded from a JSON representation.

        Returns:
            Object loaded from JSON representation.
        """
        basis = [Symmetry.from_json(symmetry) for symmetry in data["basis"]]
        return cls(data["dimension"], SymmetryKind(data["kind"]), basis)

    def __repr__(self) -> str:
        """Return a string representation.

        Returns:
            String representation.
        """
        basis = ", ".join(map(str, self._basis))
        return f"{self.__class__.__name__}({self._kind.name}, {self._dimension}, [{basis}])"
