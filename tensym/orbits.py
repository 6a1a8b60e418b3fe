"""Orbits, Schreier vectors and point stabilizers.

A Schreier vector ``v`` for the orbit of a seed point under a list of generators is indexed by
point: ``v[seed] == SEED``, ``v[q] == UNREACHED`` for points outside the orbit, and otherwise
``v[q]`` is the index of the generator that first mapped some orbit point onto ``q`` during a
breadth-first expansion from the seed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from tensym.errors import DimensionMismatchError
from tensym.permutations import compose, identity, inverse, is_identity

if TYPE_CHECKING:
    from typing import Optional, Sequence

    from tensym.permutations import Permutation

SEED = -1
UNREACHED = -2


def _dimension(generators: Sequence[Permutation], dimension: Optional[int]) -> int:
    """Infer the dimension of a list of generators."""
    if dimension is None:
        if not generators:
            raise ValueError("The dimension is required when there are no generators.")
        dimension = len(generators[0])
    for generator in generators:
        if len(generator) != dimension:
            raise DimensionMismatchError(
                f"Expected generators of dimension {dimension}, got {len(generator)}."
            )
    return dimension


def orbit_and_schreier_vector(
    generators: Sequence[Permutation],
    point: int,
    dimension: Optional[int] = None,
) -> tuple[list[int], list[int]]:
    """Expand the orbit of a point breadth-first.

    Args:
        generators: Generators of the group.
        point: Seed point.
        dimension: Number of points. Inferred from the generators if not given.

    Returns:
        The orbit in discovery order, and the Schreier vector.
    """
    dimension = _dimension(generators, dimension)
    if not 0 <= point < dimension:
        raise ValueError(f"Point {point} out of range for dimension {dimension}.")
    vector = [UNREACHED] * dimension
    vector[point] = SEED
    orbit = [point]
    for current in orbit:
        for r, generator in enumerate(generators):
            image = generator[current]
            if vector[image] == UNREACHED:
                vector[image] = r
                orbit.append(image)
    return orbit, vector


def schreier_vector(
    generators: Sequence[Permutation],
    point: int,
    dimension: Optional[int] = None,
) -> list[int]:
    """Get the Schreier vector of the orbit of a point.

    Args:
        generators: Generators of the group.
        point: Seed point.
        dimension: Number of points. Inferred from the generators if not given.

    Returns:
        Schreier vector.
    """
    return orbit_and_schreier_vector(generators, point, dimension)[1]


def orbit(
    generators: Sequence[Permutation],
    point: int,
    dimension: Optional[int] = None,
) -> tuple[int, ...]:
    """Get the orbit of a point, in discovery order."""
    return tuple(orbit_and_schreier_vector(generators, point, dimension)[0])


def decompose(
    generators: Sequence[Permutation],
    vector: Sequence[int],
    point: int,
) -> list[int]:
    """Trace a point of the orbit back to the seed.

    Args:
        generators: Generators used to build the Schreier vector.
        vector: Schreier vector.
        point: Point of the orbit.

    Returns:
        Indices of the generators which, applied in order starting from the seed, map the seed
        onto ``point``.
    """
    if vector[point] == UNREACHED:
        raise ValueError(f"Point {point} is not in the orbit.")
    word = []
    while vector[point] != SEED:
        r = vector[point]
        word.append(r)
        point = generators[r].index(point)
    word.reverse()
    return word


def transversal(
    generators: Sequence[Permutation],
    vector: Sequence[int],
    point: int,
) -> Permutation:
    """Get the transversal element mapping the seed onto a point of the orbit.

    Args:
        generators: Generators used to build the Schreier vector.
        vector: Schreier vector.
        point: Point of the orbit.

    Returns:
        Composition of the generators given by `decompose`.
    """
    word = decompose(generators, vector, point)
    return compose(identity(len(vector)), *(generators[r] for r in word))


def orbit_stabilizer(
    generators: Sequence[Permutation],
    point: int,
    dimension: Optional[int] = None,
) -> tuple[list[int], list[Permutation]]:
    """Find generators of the stabilizer of a point using Schreier's lemma.

    For every orbit point ``b`` and generator ``x``, the Schreier generator
    ``u(b) * x * u(x(b))^-1`` fixes the seed, and together they generate its stabilizer.

    Args:
        generators: Generators of the group.
        point: Point to stabilize.
        dimension: Number of points. Inferred from the generators if not given.

    Returns:
        The Schreier vector of the orbit of ``point``, and the distinct non-identity Schreier
        generators in discovery order. The generating set is in general redundant.
    """
    points, vector = orbit_and_schreier_vector(generators, point, dimension)
    transversals = {b: transversal(generators, vector, b) for b in points}
    stabilizer: dict[Permutation, None] = {}
    for b in points:
        for generator in generators:
            image = generator[b]
            schreier = compose(transversals[b], generator, inverse(transversals[image]))
            if not is_identity(schreier):
                stabilizer.setdefault(schreier, None)
    return vector, list(stabilizer)


def orbits(
    generators: Sequence[Permutation],
    dimension: Optional[int] = None,
) -> list[tuple[int, ...]]:
    """Partition the points into orbits.

    Args:
        generators: Generators of the group.
        dimension: Number of points. Inferred from the generators if not given.

    Returns:
        Sorted orbits, ordered by their smallest point.
    """
    dimension = _dimension(generators, dimension)
    graph = nx.Graph()
    graph.add_nodes_from(range(dimension))
    for generator in generators:
        graph.add_edges_from((i, image) for i, image in enumerate(generator) if i != image)
    return sorted(tuple(sorted(component)) for component in nx.connected_components(graph))
