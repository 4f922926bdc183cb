"""
Error taxonomy for goldenshot.

Comparison input problems, verification failures, AI assertion failures and
persistence failures are distinct so callers can tell them apart.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from goldenshot.ai.assertions import AiAssertionResult


class GoldenshotError(Exception):
    """Base class for goldenshot library errors."""


class ComparisonInputError(GoldenshotError, ValueError):
    """Raised when images passed to the comparator are malformed or empty."""


class InvalidImageError(ComparisonInputError):
    """Raised when the diff renderer receives a zero-sized image."""


class PersistenceError(GoldenshotError):
    """Raised when a report or image artifact cannot be written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")


class VerificationFailure(AssertionError):
    """Raised when a verifying capture is Added or Changed."""

    def __init__(
        self,
        message: str,
        golden_file: str | None = None,
        actual_file: str | None = None,
        compare_file: str | None = None,
    ) -> None:
        super().__init__(message)
        self.golden_file = golden_file
        self.actual_file = actual_file
        self.compare_file = compare_file


class AiAssertionFailure(AssertionError):
    """Raised when a required AI assertion is below its fulfillment percentage."""

    def __init__(self, message: str, result: AiAssertionResult | None = None) -> None:
        super().__init__(message)
        self.result = result
