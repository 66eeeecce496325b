"""
Enumeration steps — how the expressions of one cost level are produced.

- Cost 1: the atoms.
- Cost c > 1: every cost c-1 expression wrapped in one unary function, and
  every pair of expressions whose costs add up to c-1 joined by one binary
  operator.

Each step is a generator over new ExpressionNodes. The caller decides what
to do with them (rank them, store them). The steps poll the budget guard
inside their loops and return early once it has expired; the caller can
tell a level was cut short by looking at `ctx.guard.fired`.

Values are computed with numpy a whole level (or a whole row of operand
pairs) at a time, then walked in enumeration order.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterator

from approx_composer.expression import (
    ExpressionNode,
    canonical_le,
    is_direct_application,
    make_atom,
    make_binary,
    make_unary,
)
from approx_composer.primitives import evaluate, is_identity_operand

if TYPE_CHECKING:
    from approx_composer.search import SearchContext


# f(g(x)) == x: never apply a function directly on top of its inverse.
CANCELLING_PAIRS = {
    "ln": "exp",
    "exp": "ln",
}


def generate_atoms(ctx: SearchContext) -> Iterator[ExpressionNode]:
    """Integer atoms 1..N, then the named constants in mapping order."""
    for n in range(1, ctx.config.n_atoms + 1):
        if ctx.guard.expired():
            return
        yield make_atom(str(n), float(n))
    for name, value in ctx.config.constants.items():
        if ctx.guard.expired():
            return
        yield make_atom(name, float(value))


def expand_unary(ctx: SearchContext, cost: int) -> Iterator[ExpressionNode]:
    """Apply each enabled unary function to each expression one cost cheaper."""
    previous = ctx.memo[cost - 1]
    if not previous or not ctx.unary_ops:
        return
    if ctx.guard.expired():
        return
    values = ctx.memo.values(cost - 1)
    columns = [(op, evaluate(op, values)) for op in ctx.unary_ops]

    for i, child in enumerate(previous):
        if ctx.guard.expired():
            return
        for op, column in columns:
            inverse = CANCELLING_PAIRS.get(op.name)
            if inverse is not None and is_direct_application(child, inverse):
                continue
            value = float(column[i])
            if math.isfinite(value):
                yield make_unary(op, child, value)


def combine_binary(ctx: SearchContext, cost: int) -> Iterator[ExpressionNode]:
    """
    Join every pair of cheaper expressions whose costs sum to cost - 1.

    Commutative operators are only applied in canonical operand order;
    the others are applied in both orders. A pair whose right operand is the
    operator's identity (x + 0, x - 0, x * 1, x / 1) is skipped for that
    operator, and the reversed orientation is never built with an identity
    on the right either.
    """
    ops = ctx.binary_ops
    epsilon = ctx.config.epsilon

    for left_cost in range(1, cost - 1):
        right_cost = cost - 1 - left_cost
        lefts, rights = ctx.memo[left_cost], ctx.memo[right_cost]
        if not lefts or not rights:
            continue
        right_values = ctx.memo.values(right_cost)

        for left in lefts:
            if ctx.guard.expired():
                return
            forward = [evaluate(op, left.value, right_values) for op in ops]
            backward = [None if op.commutative
                        else evaluate(op, right_values, left.value)
                        for op in ops]

            for j, right in enumerate(rights):
                if ctx.guard.expired():
                    return
                for k, op in enumerate(ops):
                    if op.commutative:
                        if (not is_identity_operand(op, right.value, epsilon)
                                and canonical_le(left, right)):
                            value = float(forward[k][j])
                            if math.isfinite(value):
                                yield make_binary(op, left, right, value)
                        continue

                    # An identity right operand rules out the pair for this
                    # operator; the swapped split still builds (identity op X).
                    if is_identity_operand(op, right.value, epsilon):
                        continue
                    value = float(forward[k][j])
                    if math.isfinite(value):
                        yield make_binary(op, left, right, value)
                    if not is_identity_operand(op, left.value, epsilon):
                        value = float(backward[k][j])
                        if math.isfinite(value):
                            yield make_binary(op, right, left, value)
