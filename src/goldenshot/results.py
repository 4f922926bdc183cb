"""
Capture results.

A capture is classified into exactly one of four variants. The variants are
pydantic models discriminated by their ``type`` tag so they round-trip through
the JSON records written by the reporters.
"""

from __future__ import annotations

import time
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)

from goldenshot.ai.assertions import AiAssertionResults

FilePath = Annotated[str, Field(min_length=1)]


class CaptureResultType(StrEnum):
    """Discriminator values of the capture result variants."""

    ADDED = "added"
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    RECORDED = "recorded"


class _CaptureResultBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp_ns: int = Field(default_factory=time.time_ns)
    context_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("*", mode="after")
    @classmethod
    def _absolute_file_paths(cls, value: Any, info: ValidationInfo) -> Any:
        if info.field_name.endswith("_file") and isinstance(value, str):
            return str(Path(value).absolute())
        return value

    @property
    def report_name(self) -> str:
        """File name stem the JSON record is named after."""
        return Path(self.golden_file).stem  # type: ignore[attr-defined]


class Added(_CaptureResultBase):
    """No golden file existed for the capture."""

    type: Literal["added"] = "added"
    golden_file: FilePath
    compare_file: FilePath
    actual_file: FilePath
    ai_assertion_results: AiAssertionResults | None = None

    @property
    def report_name(self) -> str:
        return Path(self.compare_file).stem


class Changed(_CaptureResultBase):
    """The golden file existed and the comparison was rejected."""

    type: Literal["changed"] = "changed"
    golden_file: FilePath
    compare_file: FilePath
    actual_file: FilePath
    ai_assertion_results: AiAssertionResults | None = None


class Unchanged(_CaptureResultBase):
    """The golden file existed and the comparison was accepted."""

    type: Literal["unchanged"] = "unchanged"
    golden_file: FilePath


class Recorded(_CaptureResultBase):
    """The capture was written as the golden file without comparison."""

    type: Literal["recorded"] = "recorded"
    golden_file: FilePath


CaptureResult = Annotated[
    Added | Changed | Unchanged | Recorded,
    Field(discriminator="type"),
]

capture_result_adapter: TypeAdapter[CaptureResult] = TypeAdapter(CaptureResult)


def parse_capture_result(data: str | bytes | dict[str, Any]) -> CaptureResult:
    """Load a capture result from a JSON document or a plain dictionary."""
    if isinstance(data, dict):
        return capture_result_adapter.validate_python(data)
    return capture_result_adapter.validate_json(data)


def dump_capture_result(result: CaptureResult) -> str:
    return capture_result_adapter.dump_json(result, indent=2).decode("utf-8")
