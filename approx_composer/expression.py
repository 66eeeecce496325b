"""
Expression trees — symbolic representations of enumerated candidates.

An expression is a tree where:
- Leaf nodes are atoms: an integer literal or a named constant.
- Internal nodes are primitive operations applied to their children.

Example: sqrt(2) * pi is represented as:
      mul
     /   \
   sqrt   pi
    |
    2

Every node stores its evaluated value and its cost (atoms plus operators)
at construction time, so the search never re-evaluates a subtree. The
textual form is only rendered when somebody asks for it, and is then cached:
most enumerated expressions are rejected without ever being printed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from approx_composer.primitives import Primitive


@dataclass(slots=True, eq=False)
class ExpressionNode:
    """A single node in an expression tree."""

    value: float
    cost: int
    primitive: Optional[Primitive] = None  # None for atoms
    children: tuple[ExpressionNode, ...] = ()
    label: Optional[str] = None  # Only for atoms
    _text: Optional[str] = field(default=None, repr=False)

    @property
    def is_atom(self) -> bool:
        return self.primitive is None

    @property
    def is_unary(self) -> bool:
        return self.primitive is not None and self.primitive.arity == 1

    @property
    def is_binary(self) -> bool:
        return self.primitive is not None and self.primitive.arity == 2

    @property
    def depth(self) -> int:
        """Maximum depth of the subtree rooted at this node."""
        if self.is_atom:
            return 0
        return 1 + max(child.depth for child in self.children)

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self._render()
        return self._text

    def _render(self) -> str:
        """Infix notation: atoms bare, f(x), -(x) and (a op b)."""
        if self.is_atom:
            return self.label
        if self.is_unary:
            child = self.children[0].text
            if self.primitive.name == "neg":
                return f"-({child})"
            return f"{self.primitive.symbol}({child})"
        left, right = self.children
        return f"({left.text} {self.primitive.symbol} {right.text})"

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Node({self.text} = {self.value!r}, cost={self.cost})"


# ---------------------------------------------------------------------------
# Factory functions for building expressions
# ---------------------------------------------------------------------------

def make_atom(label: str, value: float) -> ExpressionNode:
    """Create a cost-1 leaf (integer literal or named constant)."""
    return ExpressionNode(value=float(value), cost=1, label=label)


def make_unary(op: Primitive, child: ExpressionNode,
               value: float) -> ExpressionNode:
    """Create a unary operation node with an already evaluated value."""
    assert op.arity == 1, f"{op.name} is not unary"
    return ExpressionNode(value=value, cost=child.cost + 1, primitive=op,
                          children=(child,))


def make_binary(op: Primitive, left: ExpressionNode, right: ExpressionNode,
                value: float) -> ExpressionNode:
    """Create a binary operation node with an already evaluated value."""
    assert op.arity == 2, f"{op.name} is not binary"
    return ExpressionNode(value=value, cost=left.cost + right.cost + 1,
                          primitive=op, children=(left, right))


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------

def is_direct_application(node: ExpressionNode, name: str) -> bool:
    """
    True when `node` is a call to the unary function `name`.

    At most one enclosing negation is looked through, so both exp(x) and
    -(exp(x)) are direct applications of exp, while -(-(exp(x))) and any
    binary node are not.
    """
    if node.is_unary and node.primitive.name == "neg":
        node = node.children[0]
    return node.is_unary and node.primitive.name == name


def canonical_le(left: ExpressionNode, right: ExpressionNode) -> bool:
    """
    Order operands of a commutative operator: by value, then by text.

    Text is only rendered when the values tie.
    """
    if left.value != right.value:
        return left.value < right.value
    return left.text <= right.text
