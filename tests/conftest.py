"""Configuration file for `pytest`."""

import hashlib
import inspect

import numpy as np
import pytest


class Helper:
    """Helper class for tests."""

    @staticmethod
    def _seed_from_caller(frame):
        """Build a seed from the location of a call."""
        location = ":".join(
            [
                frame.f_code.co_filename.split("/")[-1],
                frame.f_code.co_name,
                str(frame.f_lineno),
            ]
        )
        return int(hashlib.sha256(location.encode()).hexdigest(), 16) % int(1e9)

    @staticmethod
    def random_permutations(count, dimension, seed=None):
        """Generate deterministic permutations that appear random.

        Each call to this function will return different permutations, but they will always be
        the same between runs for a given call (as long as the code is not modified).
        Alternatively, a seed can be provided to generate the same permutations across
        different calls.
        """
        if seed is None:
            seed = Helper._seed_from_caller(inspect.currentframe().f_back)
        rng = np.random.default_rng(seed)
        return [tuple(int(x) for x in rng.permutation(dimension)) for _ in range(count)]


@pytest.fixture
def helper():
    """Fixture for the helper class."""
    return Helper()
