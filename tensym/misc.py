"""Miscellaneous utility functions."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any, Optional


class Stopwatch:
    """A simple stopwatch for timing code execution.

    Args:
        name: Name reported when the stopwatch stops. If ``None``, nothing is reported.
        logger: Logger to report to, at debug level.
    """

    def __init__(self, name: Optional[str] = None, logger: Optional[logging.Logger] = None):
        """Initialise the object."""
        self._name = name
        self._logger = logger or logging.getLogger(__name__)
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> Stopwatch:
        """Start the stopwatch."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        """Stop the stopwatch."""
        self._end = time.perf_counter()
        if self._name is not None:
            self._logger.debug("%s: %.3f s", self._name, self.elapsed)

    @property
    def elapsed(self) -> float:
        """Return the elapsed time in seconds."""
        if self._start is None:
            raise RuntimeError("Stopwatch has not been started")
        start = self._start
        if self._end is None:
            end = time.perf_counter()
        else:
            end = self._end
        return end - start
