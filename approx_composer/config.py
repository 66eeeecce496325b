"""
Search configuration.

`SearchConfig` is everything one search run needs. The search core trusts
it completely; callers that build a config from user input (the command
line, the `Composer` facade) call `validate()` first, which is where a
malformed configuration is rejected.
"""

from __future__ import annotations

import json
import math
import numbers
from dataclasses import dataclass, field

from approx_composer.primitives import (
    BINARY_PRIMITIVES,
    UNARY_PRIMITIVES,
    Primitive,
)
from approx_composer.selector import KEEP_SIDES


# Binary operators that are always enabled; "pow" is opt-in.
BASIC_OPERATORS = ("add", "sub", "mul", "div")


class ConfigError(ValueError):
    """Raised for a configuration the search cannot run with."""


@dataclass
class SearchConfig:
    """
    Parameters of one search run.

    Parameters
    ----------
    target : float
        The number to approximate.
    n_atoms : int
        Integer atoms 1..n_atoms are available. Default 0.
    constants : dict
        Named constants (name -> value), also available as atoms.
    use_sin, use_cos, use_tan, use_exp, use_ln, use_sqrt, use_neg : bool
        Enable each unary function. All off by default.
    use_pow : bool
        Enable the power operator. + - * / are always on.
    max_cost : int
        Largest expression cost (atoms plus operators) to enumerate.
    max_seconds : float
        Wall-clock budget.
    keep_top : int
        Number of candidates to keep (K).
    keep_side : str
        "greater", "less" or "both" (relative to target).
    epsilon : float
        Tolerance for identity pruning and the side filter.
    """

    target: float = 0.0
    n_atoms: int = 0
    constants: dict[str, float] = field(default_factory=dict)
    use_sin: bool = False
    use_cos: bool = False
    use_tan: bool = False
    use_exp: bool = False
    use_ln: bool = False
    use_sqrt: bool = False
    use_neg: bool = False
    use_pow: bool = False
    max_cost: int = 7
    max_seconds: float = 10.0
    keep_top: int = 10
    keep_side: str = "both"
    epsilon: float = 1e-12

    def unary_primitives(self) -> list[Primitive]:
        """Enabled unary functions, in registry order."""
        return [p for p in UNARY_PRIMITIVES
                if getattr(self, f"use_{p.name}")]

    def binary_primitives(self) -> list[Primitive]:
        """Enabled binary operators, in registry order."""
        return [p for p in BINARY_PRIMITIVES
                if p.name in BASIC_OPERATORS or (p.name == "pow" and self.use_pow)]

    def validate(self) -> SearchConfig:
        """Raise ConfigError if any field is out of range. Returns self."""
        if not _is_int(self.n_atoms) or self.n_atoms < 0:
            raise ConfigError(f"n_atoms must be a non-negative integer, got {self.n_atoms!r}")
        if not _is_finite_number(self.target):
            raise ConfigError(f"target must be a finite number, got {self.target!r}")
        _check_constants(self.constants)
        if not _is_int(self.max_cost) or self.max_cost < 1:
            raise ConfigError(f"max_cost must be a positive integer, got {self.max_cost!r}")
        if not _is_finite_number(self.max_seconds) or self.max_seconds < 0:
            raise ConfigError(
                f"max_seconds must be a finite, non-negative number, got {self.max_seconds!r}"
            )
        if not _is_int(self.keep_top) or self.keep_top < 1:
            raise ConfigError(f"keep_top must be a positive integer, got {self.keep_top!r}")
        if self.keep_side not in KEEP_SIDES:
            raise ConfigError(
                f"keep_side must be one of {', '.join(KEEP_SIDES)}, got {self.keep_side!r}"
            )
        if not _is_finite_number(self.epsilon) or self.epsilon < 0:
            raise ConfigError(f"epsilon must be a non-negative number, got {self.epsilon!r}")
        return self


def parse_constants(text: str) -> dict[str, float]:
    """
    Parse named constants from a JSON object, e.g. '{"pi": 3.14159}'.

    Empty or blank text means no constants.
    """
    if not text or not text.strip():
        return {}
    try:
        raw = json.loads(text)
    except ValueError as exc:
        # JSONDecodeError, or an integer literal too long to convert
        raise ConfigError(f"constants must be valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("constants must be a JSON object of name -> number")
    _check_constants(raw)
    return {name: float(value) for name, value in raw.items()}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_int(x) -> bool:
    return isinstance(x, numbers.Integral) and not isinstance(x, bool)


def _is_finite_number(x) -> bool:
    if not isinstance(x, numbers.Real) or isinstance(x, bool):
        return False
    try:
        return math.isfinite(float(x))
    except OverflowError:
        # Integers beyond the float range
        return False


def _check_constants(constants) -> None:
    if not isinstance(constants, dict):
        raise ConfigError("constants must be a mapping of name -> number")
    for name, value in constants.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"constant names must be non-empty strings, got {name!r}")
        if not _is_finite_number(value):
            raise ConfigError(f"constant {name!r} must be a finite number, got {value!r}")
