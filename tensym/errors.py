"""Exceptions."""

from __future__ import annotations


class InconsistentGeneratorsError(ValueError):
    """Raised when a generator contradicts the sign of a permutation already in the group."""


class DimensionMismatchError(ValueError):
    """Raised when a permutation does not have the expected dimension."""


class InvalidPermutationError(ValueError):
    """Raised when a sequence is not a permutation in one-line notation."""
