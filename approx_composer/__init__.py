"""
Approx Composer: find closed-form expressions that approximate a number.

Enumerates expressions built from small integers, named constants, unary
functions and binary operators in order of increasing cost, keeping the
distinct values closest to a target within a cost ceiling and a time
budget.
"""

from approx_composer.primitives import Primitive, PRIMITIVE_REGISTRY, safe_apply
from approx_composer.expression import ExpressionNode
from approx_composer.config import ConfigError, SearchConfig, parse_constants
from approx_composer.selector import CandidateRecord, TopKSelector
from approx_composer.search import EnumerativeSearch, SearchHistory
from approx_composer.composer import Composer, ApproximationResult

__version__ = "0.1.0"
__all__ = [
    "Primitive",
    "PRIMITIVE_REGISTRY",
    "safe_apply",
    "ExpressionNode",
    "ConfigError",
    "SearchConfig",
    "parse_constants",
    "CandidateRecord",
    "TopKSelector",
    "EnumerativeSearch",
    "SearchHistory",
    "Composer",
    "ApproximationResult",
]
