"""Result validators turning a comparison result into a pass/fail verdict."""

from __future__ import annotations

from typing import Protocol

from goldenshot.compare.comparator import ComparisonResult


class ResultValidator(Protocol):
    """Callable returning True when a comparison result is acceptable."""

    def __call__(self, result: ComparisonResult) -> bool: ...


class ThresholdValidator:
    """
    Accept a comparison when its difference ratio is within a threshold.

    A threshold of 0 only accepts bit-exact matches; a threshold of 1 accepts
    every result.
    """

    def __init__(self, threshold: float = 0.0) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        self.threshold = threshold

    def __call__(self, result: ComparisonResult) -> bool:
        return result.ratio <= self.threshold

    def __repr__(self) -> str:
        return f"ThresholdValidator(threshold={self.threshold})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ThresholdValidator):
            return NotImplemented
        return self.threshold == other.threshold

    def __hash__(self) -> int:
        return hash(("ThresholdValidator", self.threshold))


DEFAULT_RESULT_VALIDATOR = ThresholdValidator(0.0)
