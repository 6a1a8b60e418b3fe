"""Stabilizer chains using the Schreier–Sims algorithm.

A stabilizer chain, or base and strong generating set, is a sequence of levels. Level ``i``
holds a base point ``b_i``, generators ``S_i`` of the pointwise stabilizer of
``b_0, ..., b_{i-1}``, and the orbit of ``b_i`` under ``S_i`` encoded by a Schreier vector.
Membership of a permutation is then tested by stripping it through the levels, and the order of
the group is the product of the orbit sizes.
"""

from __future__ import annotations

import itertools
import logging
import math
from typing import TYPE_CHECKING, NamedTuple

from tensym.misc import Stopwatch
from tensym.orbits import UNREACHED, orbit_and_schreier_vector, transversal
from tensym.permutations import (
    compose,
    first_moved_point,
    identity,
    inverse,
    is_identity,
    validate,
)
from tensym.printing import format_cycles

if TYPE_CHECKING:
    from typing import Iterable, Iterator, Optional

    from tensym.permutations import Permutation

logger = logging.getLogger(__name__)


class StripResult(NamedTuple):
    """Result of stripping a permutation through a stabilizer chain.

    Attributes:
        remainder: What is left of the permutation after removing the transversal elements.
        level: Index of the level at which stripping stopped. Equal to the length of the chain
            if every level was passed.
    """

    remainder: Permutation
    level: int


class StabilizerLevel:
    """A single level of a stabilizer chain.

    Args:
        base_point: Base point of the level.
        generators: Generators of the level. The list is owned by the level.
        dimension: Number of points.
    """

    __slots__ = ("_base_point", "_generators", "_dimension", "_orbit", "_vector", "_transversals")

    def __init__(self, base_point: int, generators: list[Permutation], dimension: int):
        """Initialise the level."""
        self._base_point = base_point
        self._generators = generators
        self._dimension = dimension
        self._recompute()

    def _recompute(self) -> None:
        """Recompute the orbit and Schreier vector after the generators changed."""
        self._orbit, self._vector = orbit_and_schreier_vector(
            self._generators, self._base_point, self._dimension
        )
        self._transversals: dict[int, Permutation] = {}

    @property
    def base_point(self) -> int:
        """Get the base point."""
        return self._base_point

    @property
    def generators(self) -> tuple[Permutation, ...]:
        """Get the generators."""
        return tuple(self._generators)

    @property
    def orbit(self) -> tuple[int, ...]:
        """Get the orbit of the base point, in discovery order."""
        return tuple(self._orbit)

    @property
    def schreier_vector(self) -> tuple[int, ...]:
        """Get the Schreier vector of the orbit."""
        return tuple(self._vector)

    def add_generator(self, generator: Permutation) -> None:
        """Add a generator and recompute the orbit."""
        self._generators.append(generator)
        self._recompute()

    def in_orbit(self, point: int) -> bool:
        """Check if a point is in the orbit of the base point."""
        return self._vector[point] != UNREACHED

    def transversal(self, point: int) -> Permutation:
        """Get the element of the level mapping the base point onto a point of its orbit."""
        element = self._transversals.get(point)
        if element is None:
            element = transversal(self._generators, self._vector, point)
            self._transversals[point] = element
        return element

    def stabilizer_generators(self) -> list[Permutation]:
        """Get the generators that fix the base point."""
        return [g for g in self._generators if g[self._base_point] == self._base_point]

    def __repr__(self) -> str:
        """Return a string representation."""
        generators = ", ".join(format_cycles(g) for g in self._generators)
        return (
            f"{self.__class__.__name__}(base_point={self._base_point}, "
            f"generators=[{generators}], orbit={list(self._orbit)})"
        )


def strip(permutation: Permutation, levels: list[StabilizerLevel]) -> StripResult:
    """Strip a permutation through the levels of a stabilizer chain.

    At each level, the image of the base point is looked up in the orbit, and the inverse of the
    matching transversal element is applied, so that the remainder fixes the base point.

    Args:
        permutation: Permutation to strip.
        levels: Levels of the chain.

    Returns:
        The remainder and the index of the level at which stripping stopped.
    """
    remainder = permutation
    for i, level in enumerate(levels):
        point = remainder[level.base_point]
        if not level.in_orbit(point):
            return StripResult(remainder, i)
        if point != level.base_point:
            remainder = compose(remainder, inverse(level.transversal(point)))
    return StripResult(remainder, len(levels))


def _initial_levels(generators: list[Permutation], dimension: int) -> list[StabilizerLevel]:
    """Choose an initial base such that no generator fixes every base point."""
    first = next((first_moved_point(g) for g in generators), None)
    if first is None:
        return []
    levels = [StabilizerLevel(first, list(generators), dimension)]
    for generator in generators:
        if all(generator[level.base_point] == level.base_point for level in levels):
            point = first_moved_point(generator)
            assert point is not None
            levels.append(StabilizerLevel(point, levels[-1].stabilizer_generators(), dimension))
            logger.debug("Extended initial base with point %d", point)
    return levels


def _check_level(levels: list[StabilizerLevel], i: int, dimension: int) -> Optional[int]:
    """Check that every Schreier generator of a level strips through the chain.

    Returns:
        ``None`` if the level is consistent. Otherwise the chain is extended with the first
        remainder that fails to strip, and the index of the deepest level that changed is
        returned.
    """
    level = levels[i]
    for beta in level.orbit:
        u_beta = level.transversal(beta)
        for x in level.generators:
            image = x[beta]
            lhs = compose(u_beta, x)
            rhs = level.transversal(image)
            if lhs == rhs:
                continue

            remainder, stop = strip(compose(lhs, inverse(rhs)), levels)
            if stop == len(levels):
                if is_identity(remainder):
                    continue
                point = first_moved_point(remainder)
                assert point is not None
                levels.append(StabilizerLevel(point, [], dimension))
                logger.debug("Added base point %d at level %d", point, stop)

            for deeper in levels[i + 1 : stop + 1]:
                deeper.add_generator(remainder)
            return stop

    return None


def _schreier_sims(levels: list[StabilizerLevel], dimension: int) -> None:
    """Complete the levels in place into a verified stabilizer chain."""
    i = len(levels) - 1
    while i >= 0:
        cursor = _check_level(levels, i, dimension)
        if cursor is None:
            i -= 1
        else:
            i = cursor


class StabilizerChain:
    """A verified stabilizer chain of a permutation group.

    Args:
        levels: Levels of the chain.
        dimension: Number of points.

    Note:
        Use `StabilizerChain.build` to construct a chain from generators. The constructor does
        not verify the levels.
    """

    def __init__(self, levels: Iterable[StabilizerLevel], dimension: int):
        """Initialise the chain."""
        self._levels = list(levels)
        self._dimension = dimension

    @classmethod
    def build(
        cls,
        generators: Iterable[Iterable[int]],
        dimension: Optional[int] = None,
    ) -> StabilizerChain:
        """Build a stabilizer chain from generators of a group.

        Args:
            generators: Generators of the group, in one-line notation.
            dimension: Number of points. Inferred from the generators if not given.

        Returns:
            Verified stabilizer chain.

        Raises:
            DimensionMismatchError: If the generators do not share the dimension.
            InvalidPermutationError: If a generator is not a bijection.
        """
        generators = list(generators)
        if dimension is None:
            if not generators:
                raise ValueError("The dimension is required when there are no generators.")
            dimension = len(tuple(generators[0]))
        validated = [validate(g, dimension) for g in generators]

        # Remove identities and duplicates, keeping the order
        unique = list(dict.fromkeys(g for g in validated if not is_identity(g)))

        with Stopwatch(f"Stabilizer chain on {dimension} points", logger=logger):
            levels = _initial_levels(unique, dimension)
            if levels:
                _schreier_sims(levels, dimension)

        chain = cls(levels, dimension)
        logger.debug("Built stabilizer chain with base %s and order %d", chain.base, chain.order())
        return chain

    @property
    def dimension(self) -> int:
        """Get the number of points."""
        return self._dimension

    @property
    def levels(self) -> tuple[StabilizerLevel, ...]:
        """Get the levels."""
        return tuple(self._levels)

    @property
    def base(self) -> tuple[int, ...]:
        """Get the base points."""
        return tuple(level.base_point for level in self._levels)

    @property
    def strong_generators(self) -> tuple[Permutation, ...]:
        """Get the distinct generators of all levels."""
        return tuple(dict.fromkeys(g for level in self._levels for g in level.generators))

    def order(self) -> int:
        """Get the order of the group."""
        return math.prod(len(level.orbit) for level in self._levels)

    def strip(self, permutation: Iterable[int]) -> StripResult:
        """Strip a permutation through the chain.

        Args:
            permutation: Permutation to strip.

        Returns:
            The remainder and the index of the level at which stripping stopped.
        """
        return strip(validate(permutation, self._dimension), self._levels)

    def contains(self, permutation: Iterable[int]) -> bool:
        """Check if a permutation is an element of the group.

        Args:
            permutation: Permutation to check.

        Returns:
            Whether the permutation strips to the identity.
        """
        remainder, level = self.strip(permutation)
        return level == len(self._levels) and is_identity(remainder)

    def __contains__(self, permutation: Iterable[int]) -> bool:
        """Check if a permutation is an element of the group."""
        return self.contains(permutation)

    def elements(self) -> Iterator[Permutation]:
        """Iterate over the elements of the group.

        Yields:
            Every element exactly once, as a product of one transversal element per level.
        """
        if not self._levels:
            yield identity(self._dimension)
            return
        transversals = [
            [level.transversal(point) for point in level.orbit] for level in self._levels
        ]
        for word in itertools.product(*transversals):
            yield compose(*reversed(word))

    def __len__(self) -> int:
        """Get the number of levels."""
        return len(self._levels)

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"{self.__class__.__name__}(base={self.base}, order={self.order()})"
