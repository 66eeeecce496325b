"""
Bounded top-K ranking of candidate expressions.

The selector keeps the K candidates closest to the target, at most one per
distinct value. It is a max-heap on error (the worst kept candidate sits on
top, so deciding whether a newcomer gets in is O(1)) plus a set of the
quantized values currently held.

Expression text is only rendered for candidates that actually get in.
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass
from typing import Optional

from approx_composer.expression import ExpressionNode


KEEP_SIDES = ("greater", "less", "both")

# Significant digits in a dedup key; enough to tell any two doubles apart.
KEY_DIGITS = 17


@dataclass(frozen=True)
class CandidateRecord:
    """A retained expression and how far its value is from the target."""
    error: float
    value: float
    expression: str

    def __repr__(self) -> str:
        return (
            f"Candidate(error={self.error:.6g}, value={self.value!r}, "
            f"expression={self.expression})"
        )


@dataclass(frozen=True)
class _HeapEntry:
    record: CandidateRecord

    def __lt__(self, other: _HeapEntry) -> bool:
        # heapq keeps the smallest entry on top; make that the worst one.
        mine = (self.record.error, self.record.expression)
        theirs = (other.record.error, other.record.expression)
        return mine > theirs


def quantize(value: float) -> str:
    """Dedup key: the value at 17 significant digits (0.0 == -0.0)."""
    return f"{value + 0.0:.{KEY_DIGITS - 1}e}"


class TopKSelector:
    """
    Retains at most `keep_top` distinct-valued candidates nearest `target`.

    Parameters
    ----------
    target : float
        The number being approximated.
    keep_top : int
        Maximum number of candidates kept (K).
    keep_side : str
        "greater" keeps only values above target + epsilon, "less" only
        values below target - epsilon, "both" keeps either side.
    epsilon : float
        Tolerance used by the side filter.
    """

    def __init__(self, target: float, keep_top: int,
                 keep_side: str = "both", epsilon: float = 1e-12):
        assert keep_side in KEEP_SIDES, f"unknown keep_side {keep_side!r}"
        self.target = target
        self.keep_top = keep_top
        self.keep_side = keep_side
        self.epsilon = epsilon
        self.considered = 0
        self._heap: list[_HeapEntry] = []
        self._keys: set[str] = set()

    def _on_kept_side(self, value: float) -> bool:
        if self.keep_side == "greater":
            return value > self.target + self.epsilon
        if self.keep_side == "less":
            return value < self.target - self.epsilon
        return True

    def consider(self, node: ExpressionNode) -> bool:
        """
        Offer a candidate. Returns True when it was retained.

        Non-finite values and values on the wrong side of the target are
        ignored without being counted.
        """
        value = node.value
        if not math.isfinite(value) or not self._on_kept_side(value):
            return False
        self.considered += 1

        key = quantize(value)
        if key in self._keys:
            return False
        error = abs(self.target - value)

        if len(self._heap) < self.keep_top:
            record = CandidateRecord(error, value, node.text)
            heapq.heappush(self._heap, _HeapEntry(record))
            self._keys.add(key)
            return True

        if error < self._heap[0].record.error:
            record = CandidateRecord(error, value, node.text)
            evicted = heapq.heapreplace(self._heap, _HeapEntry(record))
            self._keys.discard(quantize(evicted.record.value))
            self._keys.add(key)
            return True
        return False

    @property
    def worst_error(self) -> Optional[float]:
        """Largest error currently retained, or None when empty."""
        return self._heap[0].record.error if self._heap else None

    @property
    def is_full(self) -> bool:
        return len(self._heap) >= self.keep_top

    def results(self) -> list[CandidateRecord]:
        """Retained candidates, best first (ties broken by text)."""
        records = [entry.record for entry in self._heap]
        return sorted(records, key=lambda r: (r.error, r.expression))

    def __len__(self) -> int:
        return len(self._heap)
