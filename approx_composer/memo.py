"""Cost-indexed cache of every expression enumerated at each exact cost."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from approx_composer.expression import ExpressionNode


class MemoTable:
    """
    Mapping cost -> tuple of ExpressionNodes, in the order they were found.

    Levels are stored once, bottom-up and without gaps, so a level only ever
    derives from cheaper ones. Each level also exposes its values as a numpy
    array for vectorized evaluation; the array is built on first use.
    """

    def __init__(self):
        self._levels: dict[int, tuple[ExpressionNode, ...]] = {}
        self._values: dict[int, np.ndarray] = {}

    def store(self, cost: int, nodes: Iterable[ExpressionNode]) -> None:
        if cost in self._levels:
            raise ValueError(f"cost level {cost} is already computed")
        if cost != self.max_cost + 1:
            raise ValueError(
                f"cost level {cost} stored before level {self.max_cost + 1}"
            )
        self._levels[cost] = tuple(nodes)

    def values(self, cost: int) -> np.ndarray:
        """Values of every node at `cost`, as a float array."""
        if cost not in self._values:
            level = self[cost]
            self._values[cost] = np.fromiter(
                (node.value for node in level), dtype=float, count=len(level)
            )
        return self._values[cost]

    @property
    def max_cost(self) -> int:
        """Highest stored cost level (0 when empty)."""
        return len(self._levels)

    def __getitem__(self, cost: int) -> tuple[ExpressionNode, ...]:
        return self._levels[cost]

    def __contains__(self, cost: int) -> bool:
        return cost in self._levels

    def __len__(self) -> int:
        return len(self._levels)

    def total_size(self) -> int:
        """Number of expressions across all levels."""
        return sum(len(level) for level in self._levels.values())

    def __repr__(self) -> str:
        sizes = ", ".join(f"{c}: {len(l)}" for c, l in self._levels.items())
        return f"MemoTable({{{sizes}}})"
