"""Permutation primitives.

Permutations are tuples in one-line notation, where ``permutation[i]`` is the image of ``i``.
The composition ``compose(p, q)`` applies ``p`` first and then ``q``, such that
``compose(p, q)[i] == q[p[i]]``.
"""

from __future__ import annotations

import functools
import operator
from typing import TYPE_CHECKING

from tensym import IDENTITY_CACHE_SIZE
from tensym.errors import DimensionMismatchError, InvalidPermutationError
from tensym.hashing import LockedCache

if TYPE_CHECKING:
    from typing import Any, Iterable, Optional, Sequence

Permutation = tuple[int, ...]

_IDENTITY_CACHE: LockedCache[Permutation] = LockedCache()


def identity(dimension: int) -> Permutation:
    """Get the identity permutation.

    Args:
        dimension: Number of points.

    Returns:
        Identity permutation. Small dimensions are served from a shared cache.
    """
    if dimension < 0:
        raise ValueError(f"Dimension must be non-negative, got {dimension}.")
    if dimension < IDENTITY_CACHE_SIZE:
        return _IDENTITY_CACHE.get(dimension, lambda: tuple(range(dimension)))
    return tuple(range(dimension))


def is_bijection(permutation: Iterable[int]) -> bool:
    """Check if a sequence is a permutation in one-line notation.

    Args:
        permutation: Sequence to check.

    Returns:
        Whether every value in ``range(len(permutation))`` appears exactly once. Values must be
        integers, including integer scalars such as those of a NumPy array.
    """
    permutation = tuple(permutation)
    dimension = len(permutation)
    seen = 0
    for value in permutation:
        try:
            value = operator.index(value)
        except TypeError:
            return False
        if not 0 <= value < dimension:
            return False
        bit = 1 << value
        if seen & bit:
            return False
        seen |= bit
    return True


def validate(permutation: Iterable[int], dimension: Optional[int] = None) -> Permutation:
    """Validate a permutation and convert it to a tuple.

    Args:
        permutation: Sequence to validate.
        dimension: Expected dimension. If ``None``, any dimension is accepted.

    Returns:
        Permutation as a tuple of plain integers.

    Raises:
        DimensionMismatchError: If the dimension is not the expected one.
        InvalidPermutationError: If the sequence is not a bijection.
    """
    values = tuple(permutation)
    if dimension is not None and len(values) != dimension:
        raise DimensionMismatchError(
            f"Expected a permutation of dimension {dimension}, got {len(values)}."
        )
    try:
        permutation = tuple(map(operator.index, values))
    except TypeError as e:
        raise InvalidPermutationError(
            f"{values} is not a permutation in one-line notation."
        ) from e
    if not is_bijection(permutation):
        raise InvalidPermutationError(f"{permutation} is not a permutation in one-line notation.")
    return permutation


def _compose_pair(first: Permutation, second: Permutation) -> Permutation:
    """Compose two permutations, applying ``first`` then ``second``."""
    if len(first) != len(second):
        raise DimensionMismatchError(
            f"Cannot compose permutations of dimensions {len(first)} and {len(second)}."
        )
    return tuple(second[i] for i in first)


def compose(*permutations: Permutation) -> Permutation:
    """Compose permutations from left to right.

    Args:
        permutations: Permutations, in the order they are applied.

    Returns:
        Composed permutation.
    """
    if not permutations:
        raise ValueError("At least one permutation is required.")
    return functools.reduce(_compose_pair, permutations)


def inverse(permutation: Permutation) -> Permutation:
    """Get the inverse of a permutation.

    Args:
        permutation: Permutation to invert.

    Returns:
        Inverse permutation.
    """
    result = [0] * len(permutation)
    for i, image in enumerate(permutation):
        result[image] = i
    return tuple(result)


def is_identity(permutation: Permutation) -> bool:
    """Check if a permutation is the identity."""
    return all(i == image for i, image in enumerate(permutation))


def first_moved_point(permutation: Permutation) -> Optional[int]:
    """Get the smallest point moved by a permutation, or ``None`` for the identity."""
    for i, image in enumerate(permutation):
        if i != image:
            return i
    return None


def support(permutation: Permutation) -> tuple[int, ...]:
    """Get the points moved by a permutation."""
    return tuple(i for i, image in enumerate(permutation) if i != image)


def transposition(dimension: int, i: int, j: int) -> Permutation:
    """Get the permutation swapping two points.

    Args:
        dimension: Number of points.
        i: First point.
        j: Second point.

    Returns:
        Transposition of ``i`` and ``j``.
    """
    if not (0 <= i < dimension and 0 <= j < dimension):
        raise ValueError(f"Points {i} and {j} out of range for dimension {dimension}.")
    result = list(range(dimension))
    result[i], result[j] = j, i
    return tuple(result)


def rotation(dimension: int, start: int = 0, stop: Optional[int] = None) -> Permutation:
    """Get the cyclic rotation of a block of consecutive points.

    The rotation maps ``start`` to ``stop - 1`` and every other point ``k`` of the block to
    ``k - 1``, leaving points outside the block fixed.

    Args:
        dimension: Number of points.
        start: First point of the block.
        stop: End of the block (exclusive). Defaults to ``dimension``.

    Returns:
        Rotation of the block.
    """
    if stop is None:
        stop = dimension
    if not 0 <= start <= stop <= dimension:
        raise ValueError(f"Invalid block [{start}, {stop}) for dimension {dimension}.")
    result = list(range(dimension))
    if stop - start > 1:
        result[start] = stop - 1
        for k in range(start + 1, stop):
            result[k] = k - 1
    return tuple(result)


def permute(permutation: Permutation, sequence: Sequence[Any]) -> tuple[Any, ...]:
    """Apply a permutation to the positions of a sequence.

    Args:
        permutation: Permutation to apply.
        sequence: Sequence to permute.

    Returns:
        Sequence where element ``i`` has moved to position ``permutation[i]``.
    """
    if len(sequence) != len(permutation):
        raise DimensionMismatchError(
            f"Cannot permute a sequence of length {len(sequence)} with a permutation of "
            f"dimension {len(permutation)}."
        )
    result: list[Any] = [None] * len(permutation)
    for i, image in enumerate(permutation):
        result[image] = sequence[i]
    return tuple(result)


def cycles(permutation: Permutation) -> tuple[tuple[int, ...], ...]:
    """Get the disjoint cycle decomposition of a permutation.

    Args:
        permutation: Permutation to decompose.

    Returns:
        Non-trivial cycles, each starting with its smallest point, ordered by that point.
    """
    seen = set()
    result = []
    for start in range(len(permutation)):
        if start in seen or permutation[start] == start:
            continue
        cycle = [start]
        seen.add(start)
        point = permutation[start]
        while point != start:
            cycle.append(point)
            seen.add(point)
            point = permutation[point]
        result.append(tuple(cycle))
    return tuple(result)


def parity(permutation: Permutation) -> int:
    """Get the parity of a permutation, ``0`` for even and ``1`` for odd."""
    return sum(len(cycle) - 1 for cycle in cycles(permutation)) % 2
