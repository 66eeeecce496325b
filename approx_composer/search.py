"""
Exhaustive enumeration by cost, with a memo table and a top-K ranking.

The search builds expressions bottom-up by cost (atoms plus operators):
1. Cost 1 holds the atoms: integers 1..N and the named constants.
2. Cost c holds every cost c-1 expression under one unary function, plus
   every pair of cheaper expressions (costs a + b = c - 1) under one binary
   operator.
3. Each level is computed exactly once, stored in the memo table and reused
   by every more expensive level.
4. Every new expression is offered to a bounded top-K selector that keeps
   the distinct values closest to the target.
5. The run ends at the cost ceiling or when the wall-clock budget runs out.
   Running out of time is not an error: the best candidates found so far are
   returned.

The number of expressions grows exponentially with cost, so the pruning in
`approx_composer.expansion` (canonical order for commutative operators, no
identity operands, no ln(exp(x))) is what keeps useful ceilings reachable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from approx_composer.budget import BudgetGuard
from approx_composer.config import SearchConfig
from approx_composer.expansion import combine_binary, expand_unary, generate_atoms
from approx_composer.memo import MemoTable
from approx_composer.primitives import Primitive
from approx_composer.selector import TopKSelector


@dataclass
class SearchContext:
    """All mutable state of one run, passed to every enumeration step."""
    config: SearchConfig
    unary_ops: List[Primitive]
    binary_ops: List[Primitive]
    guard: BudgetGuard
    selector: TopKSelector
    memo: MemoTable = field(default_factory=MemoTable)

    @classmethod
    def start(cls, config: SearchConfig,
              guard: Optional[BudgetGuard] = None) -> SearchContext:
        """Fresh state for a run; the clock starts now unless a guard is given."""
        return cls(
            config=config,
            unary_ops=config.unary_primitives(),
            binary_ops=config.binary_primitives(),
            guard=guard or BudgetGuard(config.max_seconds),
            selector=TopKSelector(
                target=config.target,
                keep_top=config.keep_top,
                keep_side=config.keep_side,
                epsilon=config.epsilon,
            ),
        )


@dataclass
class SearchHistory:
    """Records the run level by level for analysis."""
    levels: List[int] = field(default_factory=list)
    elapsed: List[float] = field(default_factory=list)
    considered: List[int] = field(default_factory=list)
    level_sizes: List[int] = field(default_factory=list)
    worst_errors: List[Optional[float]] = field(default_factory=list)
    best_errors: List[Optional[float]] = field(default_factory=list)
    best_expressions: List[Optional[str]] = field(default_factory=list)
    total_considered: int = 0
    max_level: int = 0
    total_elapsed: float = 0.0
    stopped_early: bool = False


class EnumerativeSearch:
    """
    Cost-bounded exhaustive search for expressions close to a target.

    Parameters
    ----------
    config : SearchConfig
        A validated configuration. The search itself does not validate it.
    """

    def __init__(self, config: SearchConfig):
        self.config = config

    def _run_level(self, ctx: SearchContext, cost: int) -> list:
        if cost == 1:
            producers = [generate_atoms(ctx)]
        else:
            producers = [expand_unary(ctx, cost), combine_binary(ctx, cost)]
        nodes = []
        for producer in producers:
            for node in producer:
                ctx.selector.consider(node)
                nodes.append(node)
        return nodes

    def search(
        self,
        callback: Optional[Callable[[int, float, int], None]] = None,
        verbose: bool = False,
        context: Optional[SearchContext] = None,
    ) -> "tuple":
        """
        Run the enumeration.

        Parameters
        ----------
        callback : Callable, optional
            Called after each completed level with
            (level, elapsed_seconds, candidates_considered).
        verbose : bool
            Print one progress line per level.
        context : SearchContext, optional
            State to run in. A fresh context is created by default; pass one
            to inspect the memo table afterwards.

        Returns
        -------
        Tuple of (List[CandidateRecord], SearchHistory)
            Retained candidates, best first, and the run's history.
        """
        ctx = context or SearchContext.start(self.config)
        history = SearchHistory()

        for cost in range(1, self.config.max_cost + 1):
            if ctx.guard.expired():
                break
            nodes = self._run_level(ctx, cost)
            if ctx.guard.fired:
                # Partial level: its candidates stay ranked, but it is not
                # memoized since it is incomplete.
                if verbose:
                    print(f"[level {cost:2d}] time budget spent after "
                          f"{ctx.guard.elapsed:.2f}s, stopping.")
                break
            ctx.memo.store(cost, nodes)

            elapsed = ctx.guard.elapsed
            considered = ctx.selector.considered
            ranked = ctx.selector.results()
            history.levels.append(cost)
            history.elapsed.append(elapsed)
            history.considered.append(considered)
            history.level_sizes.append(len(nodes))
            history.worst_errors.append(ctx.selector.worst_error)
            history.best_errors.append(ranked[0].error if ranked else None)
            history.best_expressions.append(ranked[0].expression if ranked else None)

            if verbose:
                best = ranked[0].expression if ranked else "-"
                print(
                    f"[level {cost:2d}] "
                    f"elapsed={elapsed:.2f}s  "
                    f"new={len(nodes)}  "
                    f"considered={considered}  "
                    f"best={best}"
                )

            if callback:
                callback(cost, elapsed, considered)

        history.total_considered = ctx.selector.considered
        history.max_level = ctx.memo.max_cost
        history.total_elapsed = ctx.guard.elapsed
        history.stopped_early = ctx.guard.fired

        return ctx.selector.results(), history
