"""
Composer — the high-level entry point for approximating a number.

It wraps configuration and the enumerative search behind a single call.

Usage:
    composer = Composer(n_atoms=4, constants={"pi": math.pi}, use_sqrt=True)
    result = composer.approximate(24.0, max_cost=5)
    print(result.summary())
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional

from approx_composer.config import SearchConfig
from approx_composer.search import EnumerativeSearch, SearchHistory
from approx_composer.selector import CandidateRecord


@dataclass
class ApproximationResult:
    """Result of one search run."""
    target: float
    candidates: List[CandidateRecord]  # Best first
    total_considered: int              # Candidates offered to the ranking
    max_level: int                     # Highest fully enumerated cost
    elapsed: float                     # Wall-clock seconds
    stopped_early: bool                # True when the time budget ran out
    history: SearchHistory

    @property
    def best(self) -> Optional[CandidateRecord]:
        return self.candidates[0] if self.candidates else None

    def summary(self) -> str:
        """Human-readable report of the run."""
        lines = [
            "═" * 60,
            "  Approximation Result",
            "═" * 60,
            f"  Target:      {self.target!r}",
            f"  Considered:  {self.total_considered}",
            f"  Max level:   {self.max_level}",
            f"  Elapsed:     {self.elapsed:.2f}s"
            + ("  (time budget reached)" if self.stopped_early else ""),
            "─" * 60,
        ]
        if not self.candidates:
            lines.append("  No candidates found. Try increasing max_seconds "
                         "or max_cost.")
        for rank, c in enumerate(self.candidates, start=1):
            lines.append(
                f"  {rank:3d}. error={c.error:.12g}  value={c.value!r}  "
                f"{c.expression}"
            )
        lines.append("═" * 60)
        return "\n".join(lines)


class Composer:
    """
    High-level API for finding expressions that approximate a number.

    Parameters
    ----------
    n_atoms : int
        Integers 1..n_atoms are available as atoms. Default 0.
    constants : Mapping[str, float], optional
        Named constants, also available as atoms.
    use_sin, use_cos, use_tan, use_exp, use_ln, use_sqrt, use_neg : bool
        Enable unary functions. Default off.
    use_pow : bool
        Enable the power operator. Default off.
    keep_top : int
        How many candidates to return. Default 10.
    keep_side : str
        "greater", "less" or "both". Default "both".
    epsilon : float
        Tolerance for identity pruning and the side filter. Default 1e-12.
    """

    def __init__(
        self,
        n_atoms: int = 0,
        constants: Optional[Mapping[str, float]] = None,
        use_sin: bool = False,
        use_cos: bool = False,
        use_tan: bool = False,
        use_exp: bool = False,
        use_ln: bool = False,
        use_sqrt: bool = False,
        use_neg: bool = False,
        use_pow: bool = False,
        keep_top: int = 10,
        keep_side: str = "both",
        epsilon: float = 1e-12,
    ):
        self.base_config = SearchConfig(
            n_atoms=n_atoms,
            constants=dict(constants or {}),
            use_sin=use_sin,
            use_cos=use_cos,
            use_tan=use_tan,
            use_exp=use_exp,
            use_ln=use_ln,
            use_sqrt=use_sqrt,
            use_neg=use_neg,
            use_pow=use_pow,
            keep_top=keep_top,
            keep_side=keep_side,
            epsilon=epsilon,
        )

    @classmethod
    def from_config(cls, config: SearchConfig) -> Composer:
        """Composer whose search options come from an existing config."""
        composer = cls()
        composer.base_config = dataclasses.replace(config)
        return composer

    def approximate(
        self,
        target: float,
        max_cost: int = 7,
        max_seconds: float = 10.0,
        callback: Optional[Callable[[int, float, int], None]] = None,
        verbose: bool = False,
    ) -> ApproximationResult:
        """
        Search for expressions whose value is close to `target`.

        Parameters
        ----------
        target : float
            The number to approximate.
        max_cost : int
            Largest expression cost (atoms plus operators). Default 7.
        max_seconds : float
            Wall-clock budget. Default 10.
        callback : Callable, optional
            Called after each completed level with
            (level, elapsed_seconds, candidates_considered).
        verbose : bool
            Print progress during the search. Default False.

        Returns
        -------
        ApproximationResult
            Ranked candidates and run statistics.

        Raises
        ------
        ConfigError
            If the resulting configuration is invalid.
        """
        config = dataclasses.replace(
            self.base_config,
            target=target,
            max_cost=max_cost,
            max_seconds=max_seconds,
        ).validate()

        candidates, history = EnumerativeSearch(config).search(
            callback=callback, verbose=verbose,
        )

        return ApproximationResult(
            target=config.target,
            candidates=candidates,
            total_considered=history.total_considered,
            max_level=history.max_level,
            elapsed=history.total_elapsed,
            stopped_early=history.stopped_early,
            history=history,
        )
