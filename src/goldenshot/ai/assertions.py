"""
AI assertions layered on top of pixel comparison.

Scoring is delegated to a pluggable ``AiAssertionScorer``; this module only
defines the assertion/result models and the fulfillment gate.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field

from goldenshot.errors import AiAssertionFailure

logger = structlog.get_logger(__name__)


class AiAssertion(BaseModel):
    """A natural language expectation about the captured image."""

    model_config = ConfigDict(frozen=True)

    assert_prompt: str = Field(min_length=1)
    required_fulfillment_percent: int | None = Field(default=None, ge=0, le=100)
    fail_if_not_fulfilled: bool = True


class AiAssertionResult(BaseModel):
    """Outcome of scoring a single assertion."""

    model_config = ConfigDict(frozen=True)

    assert_prompt: str
    required_fulfillment_percent: int | None = None
    fail_if_not_fulfilled: bool = True
    fulfillment_percent: int = Field(ge=0, le=100)
    explanation: str | None = None

    @property
    def is_gated(self) -> bool:
        """Whether this result can fail the capture."""
        return self.fail_if_not_fulfilled and self.required_fulfillment_percent is not None

    @property
    def is_fulfilled(self) -> bool:
        if self.required_fulfillment_percent is None:
            return True
        return self.fulfillment_percent >= self.required_fulfillment_percent


class AiAssertionResults(BaseModel):
    """All assertion results for one capture."""

    model_config = ConfigDict(frozen=True)

    ai_assertion_results: list[AiAssertionResult] = Field(default_factory=list)


class AiAssertionScorer(Protocol):
    """External model that scores assertions against captured images."""

    def assert_images(
        self,
        reference_file: Path | None,
        compare_file: Path,
        actual_file: Path,
        assertions: list[AiAssertion],
    ) -> AiAssertionResults: ...


@dataclass(frozen=True, slots=True)
class AiAssertionOptions:
    """Assertions to evaluate for Added/Changed captures and the scorer that evaluates them."""

    ai_assertions: tuple[AiAssertion, ...] = ()
    scorer: AiAssertionScorer | None = field(default=None, compare=False)

    def with_assertions(self, *assertions: AiAssertion) -> AiAssertionOptions:
        """Return new options with the given assertions appended."""
        return replace(self, ai_assertions=self.ai_assertions + tuple(assertions))


def failure_message(result: AiAssertionResult) -> str:
    return (
        "The generated image did not meet the required prompt fulfillment percentage.\n"
        f"prompt:{result.assert_prompt}\n"
        f"aiAssertion.fulfillmentPercent:{result.fulfillment_percent}\n"
        f"requiredFulfillmentPercent:{result.required_fulfillment_percent}\n"
        f"explanation:{result.explanation}"
    )


def check_fulfillment(results: Iterable[AiAssertionResult]) -> None:
    """
    Fail on the first gated assertion below its required percentage.

    Raises:
        AiAssertionFailure: If a gated assertion is not fulfilled.
    """
    for result in results:
        if result.is_gated and not result.is_fulfilled:
            logger.info(
                "AI assertion not fulfilled",
                prompt=result.assert_prompt,
                fulfillment=result.fulfillment_percent,
                required=result.required_fulfillment_percent,
            )
            raise AiAssertionFailure(failure_message(result), result=result)
