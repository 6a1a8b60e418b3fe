"""Constructors for common symmetry sets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tensym.permutations import parity, rotation, transposition
from tensym.symmetries import SymmetryKind, SymmetrySet
from tensym.symmetry import Symmetry

if TYPE_CHECKING:
    from typing import Optional

_EMPTY = {
    0: SymmetrySet(0, SymmetryKind.EMPTY),
    1: SymmetrySet(1, SymmetryKind.EMPTY),
}


def _check_dimension(dimension: int) -> None:
    """Check that a dimension is non-negative."""
    if dimension < 0:
        raise ValueError(f"Dimension must be non-negative, got {dimension}.")


def trivial(dimension: int) -> SymmetrySet:
    """Get a symmetry set containing only the identity.

    Args:
        dimension: Number of points.

    Returns:
        Shared immutable set for dimension 0 or 1, otherwise a new general set that symmetries
        can be added to.
    """
    _check_dimension(dimension)
    if dimension <= 1:
        return _EMPTY[dimension]
    return SymmetrySet(dimension, SymmetryKind.GENERAL)


def full_symmetric(dimension: int) -> SymmetrySet:
    """Get the symmetric group, with every permutation preserving the sign.

    Args:
        dimension: Number of points.

    Returns:
        Immutable set generated by the transposition of points 0 and 1 and the rotation of all
        points.
    """
    _check_dimension(dimension)
    if dimension <= 1:
        return trivial(dimension)
    basis = [
        Symmetry(transposition(dimension, 0, 1), False),
        Symmetry(rotation(dimension), False),
    ]
    return SymmetrySet(dimension, SymmetryKind.FULL, basis)


def _block_generators(size: int) -> tuple[Optional[Symmetry], Optional[Symmetry]]:
    """Get the transposition and rotation generating the symmetric group on a block of points."""
    swap = Symmetry(transposition(size, 0, 1), False) if size > 1 else None
    cycle = Symmetry(rotation(size), False) if size > 2 else None
    return swap, cycle


def full_symmetric_block(upper_count: int, lower_count: int) -> SymmetrySet:
    """Get the product of the symmetric groups on two blocks of points.

    The first ``upper_count`` points and the following ``lower_count`` points are each
    symmetric, but no symmetry exchanges points between the blocks.

    Args:
        upper_count: Number of points in the first block.
        lower_count: Number of points in the second block.

    Returns:
        Symmetry set with at most one transposition and one rotation per block. The basis holds
        the transpositions of both blocks before their rotations.
    """
    _check_dimension(upper_count)
    _check_dimension(lower_count)
    dimension = upper_count + lower_count
    if dimension <= 1:
        return trivial(dimension)

    upper = Symmetry.identity(upper_count)
    lower = Symmetry.identity(lower_count)
    symmetries = SymmetrySet(dimension, SymmetryKind.GENERAL)
    for upper_generator, lower_generator in zip(
        _block_generators(upper_count), _block_generators(lower_count)
    ):
        if upper_generator is not None:
            symmetries.add_unsafe(upper_generator + lower)
        if lower_generator is not None:
            symmetries.add_unsafe(upper + lower_generator)

    return symmetries


def antisymmetric(dimension: int) -> SymmetrySet:
    """Get the symmetric group, with odd permutations negating the sign.

    Args:
        dimension: Number of points.

    Returns:
        Symmetry set generated by the transposition of points 0 and 1 and the rotation of all
        points, each signed by its parity.
    """
    _check_dimension(dimension)
    if dimension <= 1:
        return trivial(dimension)
    symmetries = SymmetrySet(dimension, SymmetryKind.GENERAL)
    symmetries.add_unsafe(Symmetry(transposition(dimension, 0, 1), True))
    if dimension > 2:
        cycle = rotation(dimension)
        symmetries.add_unsafe(Symmetry(cycle, bool(parity(cycle))))
    return symmetries


def from_generators(dimension: int, *generators: Symmetry) -> SymmetrySet:
    """Build a symmetry set by adding generators one at a time.

    Args:
        dimension: Number of points.
        generators: Symmetries to add.

    Returns:
        Symmetry set generated by the generators.

    Raises:
        InconsistentGeneratorsError: If the generators are inconsistent.
    """
    symmetries = trivial(dimension)
    for generator in generators:
        symmetries.add(generator)
    return symmetries
