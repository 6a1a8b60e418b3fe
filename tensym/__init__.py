"""
*****************************************************
tensym: Permutation symmetries of tensor indices
*****************************************************

The `tensym` package stores groups of signed index permutations compactly as generating sets,
rejects contradictory generators, and builds stabilizer chains with the Schreier–Sims
algorithm for membership and order queries.


Installation
------------

        pip install .

"""  # noqa: D205, D212, D415

from __future__ import annotations

__version__ = "0.0.0"

IDENTITY_CACHE_SIZE = 64
SPAN_WARNING_SIZE = 100000
