"""Tests for the enumeration steps and their pruning rules."""

import math
import unittest
from collections import Counter
from unittest import mock

from approx_composer.budget import BudgetGuard
from approx_composer.config import SearchConfig
from approx_composer.expansion import combine_binary, expand_unary, generate_atoms
from approx_composer.primitives import is_identity_operand
from approx_composer.search import EnumerativeSearch, SearchContext


def _context(**options):
    config = SearchConfig(max_seconds=1e9, **options)
    return SearchContext.start(config, guard=BudgetGuard(1e9))


def _texts(nodes):
    return [node.text for node in nodes]


def _enumerate(**options):
    """Run a full search and return its context (memo table included)."""
    ctx = _context(**options)
    EnumerativeSearch(ctx.config).search(context=ctx)
    return ctx


def _all_nodes(ctx):
    for cost in range(1, ctx.memo.max_cost + 1):
        yield from ctx.memo[cost]


class TestGenerateAtoms(unittest.TestCase):

    def test_integers_then_constants(self):
        ctx = _context(n_atoms=3, constants={"pi": math.pi, "e": math.e})
        atoms = list(generate_atoms(ctx))
        self.assertEqual(_texts(atoms), ["1", "2", "3", "pi", "e"])
        self.assertEqual([a.value for a in atoms], [1.0, 2.0, 3.0, math.pi, math.e])
        self.assertTrue(all(a.cost == 1 for a in atoms))

    def test_no_atoms(self):
        ctx = _context(n_atoms=0)
        self.assertEqual(list(generate_atoms(ctx)), [])

    def test_stops_when_budget_spent(self):
        ctx = _context(n_atoms=5)
        ctx.guard.fired = True
        self.assertEqual(list(generate_atoms(ctx)), [])


class TestExpandUnary(unittest.TestCase):

    def test_function_order_and_invalid_dropped(self):
        ctx = _context(n_atoms=2, use_exp=True, use_ln=True)
        ctx.memo.store(1, generate_atoms(ctx))
        level2 = list(expand_unary(ctx, 2))
        self.assertEqual(_texts(level2), ["exp(1)", "ln(1)", "exp(2)", "ln(2)"])
        ctx.memo.store(2, level2)

        level3 = list(expand_unary(ctx, 3))
        # ln(exp(x)) and exp(ln(x)) are pruned, ln(ln(1)) = ln(0) is invalid
        self.assertEqual(_texts(level3),
                         ["exp(exp(1))", "exp(exp(2))", "ln(ln(2))"])
        self.assertTrue(all(n.cost == 3 for n in level3))

    def test_negation_text(self):
        ctx = _context(n_atoms=1, use_neg=True)
        ctx.memo.store(1, generate_atoms(ctx))
        level2 = list(expand_unary(ctx, 2))
        self.assertEqual(_texts(level2), ["-(1)"])
        self.assertEqual(level2[0].value, -1.0)

    def test_no_functions_enabled(self):
        ctx = _context(n_atoms=3)
        ctx.memo.store(1, generate_atoms(ctx))
        self.assertEqual(list(expand_unary(ctx, 2)), [])

    def test_stops_before_evaluating_when_budget_spent(self):
        ctx = _context(n_atoms=3, use_sqrt=True)
        ctx.memo.store(1, generate_atoms(ctx))
        ctx.guard.fired = True
        with mock.patch("approx_composer.expansion.evaluate") as evaluate:
            self.assertEqual(list(expand_unary(ctx, 2)), [])
        evaluate.assert_not_called()

    def test_cancellation_pruned_everywhere(self):
        ctx = _enumerate(n_atoms=2, use_exp=True, use_ln=True, use_neg=True,
                         max_cost=5)
        for node in _all_nodes(ctx):
            self.assertNotIn("ln(exp(", node.text)
            self.assertNotIn("exp(ln(", node.text)

    def test_cancellation_looks_through_one_negation_only(self):
        ctx = _enumerate(n_atoms=1, use_exp=True, use_ln=True, use_neg=True,
                         max_cost=5)
        texts = set(_texts(_all_nodes(ctx)))
        self.assertIn("-(ln(1))", texts)
        self.assertNotIn("exp(-(ln(1)))", texts)
        self.assertIn("-(-(ln(1)))", texts)
        self.assertIn("exp(-(-(ln(1))))", texts)


class TestCombineBinary(unittest.TestCase):

    def setUp(self):
        self.ctx = _context(n_atoms=3)
        self.ctx.memo.store(1, generate_atoms(self.ctx))
        self.ctx.memo.store(2, [])
        self.level3 = list(combine_binary(self.ctx, 3))
        self.texts = _texts(self.level3)

    def test_first_combinations_in_order(self):
        self.assertEqual(self.texts[:8], [
            "(1 + 1)", "(1 - 1)", "(1 - 1)",
            "(1 + 2)", "(1 - 2)", "(2 - 1)", "(1 * 2)", "(1 / 2)",
        ])

    def test_values_match_text(self):
        for node in self.level3:
            expected = eval(node.text, {"__builtins__": {}}, {})
            self.assertAlmostEqual(node.value, expected)
            self.assertEqual(node.cost, 3)

    def test_commutative_operators_in_one_order(self):
        self.assertIn("(1 * 2)", self.texts)
        self.assertNotIn("(2 * 1)", self.texts)
        self.assertIn("(2 + 3)", self.texts)
        self.assertNotIn("(3 + 2)", self.texts)

    def test_non_commutative_operators_in_both_orders(self):
        self.assertIn("(2 - 3)", self.texts)
        self.assertIn("(3 - 2)", self.texts)
        self.assertIn("(2 / 3)", self.texts)
        self.assertIn("(3 / 2)", self.texts)

    def test_identity_operands_skipped(self):
        self.assertNotIn("(2 * 1)", self.texts)
        self.assertNotIn("(2 / 1)", self.texts)
        self.assertNotIn("(1 / 1)", self.texts)

    def test_no_cost_two_pairs(self):
        # Level 2 is empty, so cost 4 has nothing to combine
        self.ctx.memo.store(3, self.level3)
        self.assertEqual(list(combine_binary(self.ctx, 4)), [])

    def test_division_by_zero_dropped(self):
        ctx = _enumerate(n_atoms=1, max_cost=5)
        texts = set(_texts(ctx.memo[5]))
        self.assertNotIn("(1 / (1 - 1))", texts)
        self.assertIn("((1 - 1) - 1)", texts)

    def test_identity_right_operand_skips_both_orders(self):
        ctx = _enumerate(n_atoms=1, max_cost=5)
        counts = Counter(_texts(ctx.memo[5]))
        # Built only from the split (3, 1), once per copy of (1 - 1)
        self.assertEqual(counts["((1 - 1) - 1)"], 2)
        self.assertNotIn("(1 - (1 - 1))", counts)
        self.assertEqual(sum(counts.values()), 11)

    def test_pow_enabled(self):
        ctx = _context(n_atoms=2, use_pow=True)
        ctx.memo.store(1, generate_atoms(ctx))
        texts = _texts(combine_binary(ctx, 3))
        self.assertIn("(2 ^ 2)", texts)
        self.assertIn("(1 ^ 2)", texts)
        self.assertIn("(2 ^ 1)", texts)


class TestPruningProperties(unittest.TestCase):
    """Whole-run properties of every memoized expression."""

    @classmethod
    def setUpClass(cls):
        cls.ctx = _enumerate(n_atoms=3, use_sqrt=True, use_neg=True,
                             use_pow=True, max_cost=5)
        cls.binary = [n for n in _all_nodes(cls.ctx) if n.is_binary]

    def test_no_identity_right_operands(self):
        epsilon = self.ctx.config.epsilon
        for node in self.binary:
            right = node.children[1]
            self.assertFalse(
                is_identity_operand(node.primitive, right.value, epsilon),
                f"{node.text} has an identity operand",
            )

    def test_commutative_pairs_generated_once(self):
        seen = set()
        for node in self.binary:
            if not node.primitive.commutative:
                continue
            left, right = node.children
            seen.add((node.primitive.name, left.text, right.text))
        for name, left, right in seen:
            if left != right:
                self.assertNotIn((name, right, left), seen)

    def test_costs_match_levels(self):
        for cost in range(1, self.ctx.memo.max_cost + 1):
            for node in self.ctx.memo[cost]:
                self.assertEqual(node.cost, cost)

    def test_all_values_finite(self):
        for node in _all_nodes(self.ctx):
            self.assertTrue(math.isfinite(node.value), node.text)


if __name__ == "__main__":
    unittest.main()
