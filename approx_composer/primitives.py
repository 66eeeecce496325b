"""
Primitive mathematical operations — the building blocks every expression is
composed from.

Each primitive has:
- A numpy callable that works elementwise on arrays (and on plain floats)
- An arity (1 = unary like sin, 2 = binary like add)
- A symbol used when rendering expressions
- For binary operators: whether it is commutative, and its identity operand

Every callable is "safe": it never raises and never emits numpy warnings.
Wherever the mathematical result is undefined (ln of a negative number,
division by zero, overflow) the result is `nan`, which the search treats as
an invalid value and drops.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np


# Powers with a larger magnitude are rejected even when still finite.
MAX_MAGNITUDE = 1e300

# How close an exponent must be to an integer for a negative base.
INTEGER_EXPONENT_TOLERANCE = 1e-9


@dataclass(frozen=True, slots=True)
class Primitive:
    """An atomic mathematical operation."""

    name: str
    arity: int  # 1 = unary (sin, ln), 2 = binary (+, *)
    func: Callable
    symbol: str  # For rendering expressions
    commutative: bool = False
    identity: Optional[float] = None  # x op identity == x

    def __call__(self, *args: np.ndarray) -> np.ndarray:
        return self.func(*args)

    def __repr__(self) -> str:
        return f"Primitive({self.name}, arity={self.arity})"


# ---------------------------------------------------------------------------
# Safe numeric operations (invalid results become NaN)
# ---------------------------------------------------------------------------

def _finite(result: np.ndarray) -> np.ndarray:
    """Replace inf and -inf with NaN so there is a single invalid marker."""
    result = np.asarray(result, dtype=float)
    return np.where(np.isfinite(result), result, np.nan)


def _guarded(func: Callable) -> Callable:
    """Wrap a total numpy ufunc so overflow yields NaN silently."""
    def wrapper(*args):
        with np.errstate(all="ignore"):
            return _finite(func(*(np.asarray(a, dtype=float) for a in args)))
    wrapper.__name__ = f"_safe_{func.__name__}"
    return wrapper


def _safe_log(x: np.ndarray) -> np.ndarray:
    """Natural log, NaN for non-positive inputs."""
    x = np.asarray(x, dtype=float)
    with np.errstate(all="ignore"):
        result = np.where(x > 0.0, np.log(x), np.nan)
    return _finite(result)


def _safe_sqrt(x: np.ndarray) -> np.ndarray:
    """Square root, NaN for negative inputs."""
    x = np.asarray(x, dtype=float)
    with np.errstate(all="ignore"):
        result = np.where(x >= 0.0, np.sqrt(x), np.nan)
    return _finite(result)


def _safe_div(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Division, NaN where the divisor is exactly zero."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    with np.errstate(all="ignore"):
        result = np.where(b != 0.0, a / b, np.nan)
    return _finite(result)


def _safe_pow(base: np.ndarray, exponent: np.ndarray) -> np.ndarray:
    """
    Real power.

    A negative base only accepts an exponent within 1e-9 of an integer (the
    rounded exponent is then used); any result beyond 1e300 in magnitude is
    rejected.
    """
    base, exponent = np.broadcast_arrays(
        np.asarray(base, dtype=float), np.asarray(exponent, dtype=float)
    )
    rounded = np.round(exponent)
    negative = base < 0.0
    integral = np.abs(exponent - rounded) <= INTEGER_EXPONENT_TOLERANCE
    with np.errstate(all="ignore"):
        result = np.power(base, np.where(negative, rounded, exponent))
        result = np.where(negative & ~integral, np.nan, result)
        result = np.where(np.abs(result) > MAX_MAGNITUDE, np.nan, result)
    return _finite(result)


# ---------------------------------------------------------------------------
# Primitive registry: the operator vocabulary
# ---------------------------------------------------------------------------

# Unary (arity 1): single-argument functions
_SIN = Primitive("sin", 1, _guarded(np.sin), "sin")
_COS = Primitive("cos", 1, _guarded(np.cos), "cos")
_TAN = Primitive("tan", 1, _guarded(np.tan), "tan")
_EXP = Primitive("exp", 1, _guarded(np.exp), "exp")
_LN = Primitive("ln", 1, _safe_log, "ln")
_SQRT = Primitive("sqrt", 1, _safe_sqrt, "sqrt")
_NEG = Primitive("neg", 1, _guarded(np.negative), "-")


# Binary (arity 2): two-argument operators
_ADD = Primitive("add", 2, _guarded(np.add), "+", commutative=True, identity=0.0)
_SUB = Primitive("sub", 2, _guarded(np.subtract), "-", identity=0.0)
_MUL = Primitive("mul", 2, _guarded(np.multiply), "*", commutative=True,
                 identity=1.0)
_DIV = Primitive("div", 2, _safe_div, "/", identity=1.0)
_POW = Primitive("pow", 2, _safe_pow, "^")

# Organized registry; order here is the enumeration order
PRIMITIVE_REGISTRY: dict[str, Primitive] = {
    # Unary
    "sin": _SIN,
    "cos": _COS,
    "tan": _TAN,
    "exp": _EXP,
    "ln": _LN,
    "sqrt": _SQRT,
    "neg": _NEG,
    # Binary
    "add": _ADD,
    "sub": _SUB,
    "mul": _MUL,
    "div": _DIV,
    "pow": _POW,
}

# Convenience groupings
UNARY_PRIMITIVES = [p for p in PRIMITIVE_REGISTRY.values() if p.arity == 1]
BINARY_PRIMITIVES = [p for p in PRIMITIVE_REGISTRY.values() if p.arity == 2]


# ---------------------------------------------------------------------------
# Evaluation entry points
# ---------------------------------------------------------------------------

def evaluate(primitive: Primitive, *operands) -> np.ndarray:
    """
    Apply a primitive elementwise. Scalars broadcast against arrays.

    Returns a float array where NaN marks an invalid result.
    """
    assert len(operands) == primitive.arity, (
        f"{primitive.name} takes {primitive.arity} operand(s)"
    )
    return primitive(*operands)


def safe_apply(primitive: Primitive, *operands: float) -> Optional[float]:
    """
    Apply a primitive to scalar operands.

    Returns the finite result, or None when the result is invalid. Never
    raises for numeric faults.
    """
    try:
        result = float(evaluate(primitive, *operands))
    except (ArithmeticError, ValueError):
        return None
    return result if math.isfinite(result) else None


def is_identity_operand(primitive: Primitive, operand: float,
                        epsilon: float) -> bool:
    """True when `x op operand` is x itself, within epsilon."""
    if primitive.identity is None:
        return False
    return abs(operand - primitive.identity) <= epsilon
