"""
Benchmark suite for Approx Composer.

Approximates a set of well-known constants from small integers and a few
functions, measuring:
- Accuracy of the best expression found (absolute error)
- The expression itself
- Search effort (candidates considered, deepest completed cost level)
- Wall-clock time

Targets are grouped by how deep the search has to go before an exact (or
nearly exact) expression shows up.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Dict

from approx_composer import Composer


@dataclass
class BenchmarkProblem:
    """A benchmark problem: find an expression close to `target`."""
    name: str
    true_expression: str  # Human-readable closed form
    target: float
    n_atoms: int = 3
    options: Dict[str, bool] = field(default_factory=dict)
    max_cost: int = 6
    difficulty: str = "easy"  # easy, medium, hard


# ---------------------------------------------------------------------------
# Benchmark problems, ordered by difficulty
# ---------------------------------------------------------------------------

BENCHMARKS = [
    # --- Easy: one function or one operator ---
    BenchmarkProblem(
        "sqrt2", "sqrt(2)", math.sqrt(2),
        options={"use_sqrt": True}, max_cost=3, difficulty="easy",
    ),
    BenchmarkProblem(
        "e", "exp(1)", math.e,
        options={"use_exp": True}, max_cost=3, difficulty="easy",
    ),
    BenchmarkProblem(
        "ln2", "ln(2)", math.log(2),
        options={"use_ln": True}, max_cost=3, difficulty="easy",
    ),

    # --- Medium: a function of a small combination ---
    BenchmarkProblem(
        "golden_ratio", "(1 + sqrt(5)) / 2", (1 + math.sqrt(5)) / 2,
        n_atoms=5, options={"use_sqrt": True}, max_cost=6, difficulty="medium",
    ),
    BenchmarkProblem(
        "cube_root_2", "2 ^ (1 / 3)", 2 ** (1 / 3),
        options={"use_pow": True}, max_cost=5, difficulty="medium",
    ),

    # --- Hard: no exact closed form within reach ---
    BenchmarkProblem(
        "pi", "pi", math.pi,
        n_atoms=4, options={"use_sqrt": True, "use_ln": True, "use_pow": True},
        max_cost=7, difficulty="hard",
    ),
    BenchmarkProblem(
        "euler_gamma", "0.5772156649...", 0.5772156649015329,
        n_atoms=4, options={"use_sqrt": True, "use_ln": True, "use_exp": True},
        max_cost=7, difficulty="hard",
    ),
]


def run_benchmark(problem: BenchmarkProblem,
                  max_seconds: float = 30.0,
                  verbose: bool = False) -> dict:
    """Run a single benchmark problem."""
    composer = Composer(n_atoms=problem.n_atoms, keep_top=5, **problem.options)

    t0 = time.time()
    result = composer.approximate(problem.target, max_cost=problem.max_cost,
                                  max_seconds=max_seconds, verbose=verbose)
    elapsed = time.time() - t0

    best = result.best
    return {
        "name": problem.name,
        "difficulty": problem.difficulty,
        "true_expr": problem.true_expression,
        "found_expr": best.expression if best else None,
        "error": best.error if best else math.inf,
        "considered": result.total_considered,
        "max_level": result.max_level,
        "stopped_early": result.stopped_early,
        "time_sec": elapsed,
    }


def run_all_benchmarks(max_seconds: float = 30.0, verbose: bool = True,
                       tolerance: float = 1e-12):
    """Run all benchmark problems and print a summary table."""
    print("=" * 90)
    print("  Approx Composer — Benchmark Suite")
    print("=" * 90)
    print()

    results = []
    for problem in BENCHMARKS:
        if verbose:
            print(f"  [{problem.difficulty:6s}] {problem.name:15s} = {problem.true_expression}")
        r = run_benchmark(problem, max_seconds=max_seconds, verbose=False)
        results.append(r)
        if verbose:
            status = "✓" if r["error"] <= tolerance else "≈"
            print(f"           {status} error={r['error']:.3e}  "
                  f"level={r['max_level']:2d}  "
                  f"considered={r['considered']:9d}  "
                  f"time={r['time_sec']:.1f}s  "
                  f"→ {r['found_expr']}")
            print()

    # Summary
    exact = sum(1 for r in results if r["error"] <= tolerance)
    total = len(results)
    print("=" * 90)
    print(f"  Exact: {exact}/{total} (error <= {tolerance:g})")

    by_difficulty = {}
    for r in results:
        d = r["difficulty"]
        if d not in by_difficulty:
            by_difficulty[d] = {"exact": 0, "total": 0}
        by_difficulty[d]["total"] += 1
        if r["error"] <= tolerance:
            by_difficulty[d]["exact"] += 1

    for d in ["easy", "medium", "hard"]:
        if d in by_difficulty:
            s = by_difficulty[d]
            print(f"    {d:8s}: {s['exact']}/{s['total']}")

    print("=" * 90)

    return results


if __name__ == "__main__":
    run_all_benchmarks()
