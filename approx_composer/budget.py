"""Wall-clock budget for a search run."""

from __future__ import annotations

import time
from typing import Callable


class BudgetGuard:
    """
    Tracks elapsed time since construction and reports when the budget is
    spent.

    Enumeration loops poll `expired()` and simply return when it is True;
    running out of time is a normal way for a search to end, and everything
    found so far is kept. Once expired, the guard stays expired.

    Parameters
    ----------
    max_seconds : float
        Wall-clock budget. Zero expires on the first poll.
    clock : Callable[[], float]
        Monotonic time source, in seconds. Default `time.perf_counter`.
    """

    def __init__(self, max_seconds: float,
                 clock: Callable[[], float] = time.perf_counter):
        self.max_seconds = max_seconds
        self._clock = clock
        self.start = clock()
        self.fired = False

    @property
    def elapsed(self) -> float:
        return self._clock() - self.start

    def expired(self) -> bool:
        if not self.fired and self.elapsed > self.max_seconds:
            self.fired = True
        return self.fired

    def __repr__(self) -> str:
        return (
            f"BudgetGuard(max_seconds={self.max_seconds}, "
            f"elapsed={self.elapsed:.3f}, fired={self.fired})"
        )
