"""
AI assertion support.

Semantic checks on captured images, scored by a pluggable external model.
"""

from goldenshot.ai.assertions import (
    AiAssertion,
    AiAssertionOptions,
    AiAssertionResult,
    AiAssertionResults,
    AiAssertionScorer,
    check_fulfillment,
)

__all__ = [
    "AiAssertion",
    "AiAssertionOptions",
    "AiAssertionResult",
    "AiAssertionResults",
    "AiAssertionScorer",
    "check_fulfillment",
]
