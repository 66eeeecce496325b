"""
Quick start example for Approx Composer.

Demonstrates the core workflow:
1. Pick a target number and the building blocks the search may use
2. Let the Composer enumerate expressions by increasing cost
3. Inspect the ranked candidates
"""

import math

from approx_composer import Composer


def main():
    # --- The classic "make 24" puzzle ---
    # 2 * 3 * 4 uses three atoms and two operators: cost 5.
    print("Approx Composer — Quick Start")
    print("=" * 50)
    print("Target: 24 from the integers 1..4 and + - * /")
    print()

    composer = Composer(n_atoms=4, keep_top=5)
    result = composer.approximate(24.0, max_cost=5, verbose=True)
    print()
    print(result.summary())

    # --- A transcendental target ---
    # No finite expression equals pi exactly here; the search ranks the
    # closest ones it can reach within the budget.
    print()
    print("Target: pi from 1..3, e, sqrt, ln and powers")
    print()

    composer = Composer(
        n_atoms=3,
        constants={"e": math.e},
        use_sqrt=True,
        use_ln=True,
        use_pow=True,
        keep_top=8,
    )
    result = composer.approximate(math.pi, max_cost=7, max_seconds=5.0,
                                  verbose=True)
    print()
    print(result.summary())


if __name__ == "__main__":
    main()
