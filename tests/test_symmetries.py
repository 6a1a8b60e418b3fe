import itertools
import logging

import pytest

import tensym.symmetries
from tensym.errors import DimensionMismatchError, InconsistentGeneratorsError
from tensym.factory import full_symmetric, trivial
from tensym.permutations import compose, identity, parity
from tensym.symmetries import SymmetryKind, SymmetrySet, iter_span
from tensym.symmetry import Symmetry


def _elements(symmetries):
    return {s.permutation: s.sign for s in symmetries}


def test_general():
    symmetries = trivial(4)
    assert symmetries.kind == SymmetryKind.GENERAL
    assert symmetries.dimension == 4
    assert symmetries.is_empty()
    assert symmetries.is_mutable
    assert symmetries.basis == (Symmetry.identity(4),)
    assert list(symmetries) == [Symmetry.identity(4)]
    assert symmetries.order() == 1

    assert symmetries.add(Symmetry((1, 0, 2, 3), False))
    assert not symmetries.is_empty()
    assert not symmetries.add(Symmetry((1, 0, 2, 3), False))
    assert not symmetries.add(Symmetry.identity(4))
    assert len(symmetries.basis) == 2
    assert symmetries.order() == 2
    assert _elements(symmetries) == {(0, 1, 2, 3): False, (1, 0, 2, 3): False}

    assert symmetries.add(Symmetry((0, 1, 3, 2), True))
    assert _elements(symmetries) == {
        (0, 1, 2, 3): False,
        (1, 0, 2, 3): False,
        (0, 1, 3, 2): True,
        (1, 0, 3, 2): True,
    }
    assert not symmetries.add(Symmetry((1, 0, 3, 2), True))
    assert symmetries.orbits() == [(0, 1), (2, 3)]


def test_inconsistent_power():
    # The cycle has order 3, so its cube would be a negated identity
    symmetries = trivial(4)
    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry((2, 1, 3, 0), True))
    assert symmetries.is_empty()
    assert len(symmetries.basis) == 1


def test_inconsistent_composition():
    symmetries = trivial(4)
    symmetries.add(Symmetry((2, 1, 3, 0), False))
    before = _elements(symmetries)
    basis = symmetries.basis
    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry((2, 3, 0, 1), True))
    assert symmetries.basis == basis
    assert _elements(symmetries) == before


def test_inconsistent_known_permutation():
    symmetries = trivial(3)
    symmetries.add(Symmetry((1, 0, 2), True))
    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry((1, 0, 2), False))
    assert len(symmetries.basis) == 2
    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry.identity(3) * Symmetry((0, 1, 2), True))


def test_dimension_mismatch():
    symmetries = trivial(3)
    with pytest.raises(DimensionMismatchError):
        symmetries.add(Symmetry((1, 0), False))
    with pytest.raises(DimensionMismatchError):
        symmetries.add_unsafe(Symmetry((1, 0, 2, 3), False))
    assert len(symmetries.basis) == 1


def test_levi_civita():
    symmetries = trivial(3)
    assert symmetries.add(Symmetry((2, 0, 1), False))
    assert symmetries.add(Symmetry((1, 0, 2), True))
    assert _elements(symmetries) == {
        (0, 1, 2): False,
        (2, 0, 1): False,
        (1, 2, 0): False,
        (1, 0, 2): True,
        (0, 2, 1): True,
        (2, 1, 0): True,
    }


def test_cycle_and_transposition():
    symmetries = trivial(4)
    symmetries.add(Symmetry((3, 0, 1, 2), False))
    symmetries.add(Symmetry((1, 0, 2, 3), False))
    assert set(_elements(symmetries)) == set(itertools.permutations(range(4)))
    assert symmetries.order() == 24


def test_closure():
    symmetries = trivial(5)
    symmetries.add(Symmetry((1, 0, 2, 3, 4), True))
    symmetries.add(Symmetry((3, 0, 1, 2, 4), True))
    elements = _elements(symmetries)
    assert len(elements) == 24
    assert elements[identity(5)] is False
    for (g, g_sign), (h, h_sign) in itertools.product(elements.items(), repeat=2):
        product = compose(g, h)
        assert product in elements
        assert elements[product] == (g_sign ^ h_sign)
    for g, g_sign in elements.items():
        assert g_sign == bool(parity(g))


def test_iterator_restartable():
    symmetries = full_symmetric(3)
    first = iter(symmetries)
    second = iter(symmetries)
    next(first)
    next(first)
    assert len(list(second)) == 6
    assert len(list(first)) == 4

    symmetries = trivial(3)
    symmetries.add(Symmetry((1, 2, 0), False))
    assert list(symmetries) == list(symmetries)


def test_add_unsafe():
    symmetries = trivial(3)
    assert symmetries.add_unsafe(Symmetry((1, 0, 2), False))
    assert symmetries.add_unsafe(Symmetry((1, 0, 2), True))
    assert len(symmetries.basis) == 3
    with pytest.raises(InconsistentGeneratorsError):
        list(symmetries)

    with pytest.raises(TypeError):
        full_symmetric(3).add_unsafe(Symmetry((1, 0, 2), False))
    with pytest.raises(TypeError):
        trivial(1).add_unsafe(Symmetry((0,), False))


def test_empty():
    for dimension in (0, 1):
        symmetries = trivial(dimension)
        assert symmetries.kind == SymmetryKind.EMPTY
        assert symmetries.is_empty()
        assert not symmetries.is_mutable
        assert list(symmetries) == [Symmetry.identity(dimension)]
        assert symmetries.clone() is symmetries
        assert symmetries.order() == 1
        assert not symmetries.add(Symmetry.identity(dimension))
        with pytest.raises(InconsistentGeneratorsError):
            symmetries.add(Symmetry(identity(dimension), True))
        assert list(symmetries) == [Symmetry.identity(dimension)]

    with pytest.raises(DimensionMismatchError):
        trivial(1).add(Symmetry((1, 0), False))
    with pytest.raises(ValueError):
        SymmetrySet(2, SymmetryKind.EMPTY)
    with pytest.raises(ValueError):
        SymmetrySet(1, SymmetryKind.GENERAL)


def test_full():
    symmetries = full_symmetric(4)
    assert symmetries.kind == SymmetryKind.FULL
    assert not symmetries.is_empty()
    assert symmetries.clone() is symmetries
    assert not symmetries.add(Symmetry((1, 0, 2, 3), False))
    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry((1, 0, 2, 3), True))
    assert symmetries.contains((3, 2, 1, 0))
    assert symmetries.orbits() == [(0, 1, 2, 3)]


def test_clone():
    symmetries = trivial(4)
    symmetries.add(Symmetry((1, 0, 2, 3), False))
    clone = symmetries.clone()
    assert clone == symmetries
    assert clone is not symmetries
    clone.add(Symmetry((0, 1, 3, 2), False))
    assert len(clone.basis) == 3
    assert len(symmetries.basis) == 2
    assert clone != symmetries


def test_membership():
    symmetries = trivial(4)
    symmetries.add(Symmetry((1, 0, 2, 3), False))
    assert symmetries.contains((1, 0, 2, 3))
    assert symmetries.contains(identity(4))
    assert not symmetries.contains((0, 1, 3, 2))
    with pytest.raises(DimensionMismatchError):
        symmetries.contains((1, 0))

    chain = symmetries.stabilizer_chain()
    assert chain.order() == 2
    assert symmetries.stabilizer_chain() is chain


def test_chain_reset_after_add():
    symmetries = trivial(4)
    symmetries.add(Symmetry((1, 0, 2, 3), False))
    chain = symmetries.stabilizer_chain()
    assert not symmetries.contains((0, 1, 3, 2))

    assert not symmetries.add(Symmetry((1, 0, 2, 3), False))
    assert symmetries.stabilizer_chain() is chain

    symmetries.add(Symmetry((0, 1, 3, 2), False))
    assert symmetries.stabilizer_chain() is not chain
    assert symmetries.contains((0, 1, 3, 2))
    assert symmetries.order() == 4

    symmetries.add_unsafe(Symmetry((1, 2, 0, 3), False))
    assert symmetries.order() == 24

    with pytest.raises(InconsistentGeneratorsError):
        symmetries.add(Symmetry((3, 1, 2, 0), True))
    assert symmetries.order() == 24


def test_json():
    symmetries = trivial(4)
    symmetries.add(Symmetry((1, 0, 2, 3), True))
    symmetries.add(Symmetry((0, 1, 3, 2), False))
    json = symmetries.as_json()
    assert json["kind"] == "general"
    assert json["dimension"] == 4
    assert len(json["basis"]) == 2
    symmetries_from_json = SymmetrySet.from_json(json)
    assert symmetries == symmetries_from_json
    assert hash(symmetries) == hash(symmetries_from_json)
    assert _elements(symmetries) == _elements(symmetries_from_json)

    full = full_symmetric(3)
    full_from_json = SymmetrySet.from_json(full.as_json())
    assert full_from_json.kind == SymmetryKind.FULL
    assert full_from_json == full


def test_hash_after_add():
    symmetries = trivial(3)
    before = hash(symmetries)
    symmetries.add(Symmetry((1, 0, 2), False))
    assert symmetries._hash is None
    assert hash(symmetries) != before


def test_span_warning(monkeypatch, caplog):
    monkeypatch.setattr(tensym.symmetries, "SPAN_WARNING_SIZE", 3)
    basis = [Symmetry((1, 0, 2, 3), False), Symmetry((1, 2, 3, 0), False)]
    with caplog.at_level(logging.WARNING, logger="tensym.symmetries"):
        elements = list(iter_span(basis, 4))
    assert len(elements) == 24
    assert sum("Enumerating more than 3" in r.getMessage() for r in caplog.records) == 1
