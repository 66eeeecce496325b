"""Command line: approx-composer TARGET [options]."""

from __future__ import annotations

import argparse
from typing import List, Optional

from approx_composer.composer import Composer
from approx_composer.config import ConfigError, SearchConfig, parse_constants
from approx_composer.primitives import UNARY_PRIMITIVES
from approx_composer.selector import KEEP_SIDES


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="approx-composer",
        description="Find expressions built from small integers, constants "
                    "and operators whose value is close to TARGET.",
    )
    defaults = SearchConfig()
    ap.add_argument("target", type=float, help="number to approximate")
    ap.add_argument("-n", "--atoms", type=int, default=defaults.n_atoms,
                    help="use the integers 1..N as atoms")
    ap.add_argument("--constants", type=str, default="",
                    help='named constants as JSON, e.g. \'{"pi": 3.14159}\'')
    for prim in UNARY_PRIMITIVES:
        ap.add_argument(f"--{prim.name}", action="store_true",
                        help=f"enable the {prim.name} function")
    ap.add_argument("--pow", action="store_true",
                    help="enable the power operator")
    ap.add_argument("--max-cost", type=int, default=defaults.max_cost)
    ap.add_argument("--max-seconds", type=float, default=defaults.max_seconds)
    ap.add_argument("--keep-top", type=int, default=defaults.keep_top)
    ap.add_argument("--keep-side", type=str, default=defaults.keep_side,
                    choices=list(KEEP_SIDES))
    ap.add_argument("--verbose", action="store_true",
                    help="print progress after each cost level")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        config = SearchConfig(
            target=args.target,
            n_atoms=args.atoms,
            constants=parse_constants(args.constants),
            use_pow=args.pow,
            max_cost=args.max_cost,
            max_seconds=args.max_seconds,
            keep_top=args.keep_top,
            keep_side=args.keep_side,
            **{f"use_{p.name}": getattr(args, p.name) for p in UNARY_PRIMITIVES},
        ).validate()
    except ConfigError as exc:
        ap.error(str(exc))

    print(f"Starting enumeration: numbers 1..{config.n_atoms}  "
          f"target={config.target}")
    print(f"max_cost={config.max_cost}  max_seconds={config.max_seconds}  "
          f"keep_top={config.keep_top}  keep_side={config.keep_side}")

    result = Composer.from_config(config).approximate(
        config.target,
        max_cost=config.max_cost,
        max_seconds=config.max_seconds,
        verbose=args.verbose,
    )
    print(result.summary())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
