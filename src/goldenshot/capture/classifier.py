"""
Capture classification.

Maps (golden exists, verdict, task type) to exactly one capture result
variant:

    record only          -> Recorded
    golden missing       -> Added
    verdict accepted     -> Unchanged
    otherwise            -> Changed
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, assert_never

from goldenshot.ai.assertions import AiAssertionResults
from goldenshot.results import Added, CaptureResult, CaptureResultType, Changed, Recorded, Unchanged
from goldenshot.task import TaskType


def classify_type(
    golden_exists: bool,
    verdict: bool | None,
    task_type: TaskType,
) -> CaptureResultType:
    """Pure decision table behind ``classify``."""
    if task_type.is_record_only:
        return CaptureResultType.RECORDED
    if not golden_exists:
        return CaptureResultType.ADDED
    if verdict is True:
        return CaptureResultType.UNCHANGED
    return CaptureResultType.CHANGED


def classify(
    golden_exists: bool,
    verdict: bool | None,
    task_type: TaskType,
    *,
    golden_file: str | Path,
    compare_file: str | Path,
    actual_file: str | Path,
    timestamp_ns: int | None = None,
    ai_assertion_results: AiAssertionResults | None = None,
    context_data: Mapping[str, Any] | None = None,
) -> CaptureResult:
    """
    Build the capture result for one capture.

    Total over its inputs: a missing verdict on an existing golden file counts
    as a rejection. AI results are only attached to Added and Changed.
    """
    common: dict[str, Any] = {"context_data": dict(context_data or {})}
    if timestamp_ns is not None:
        common["timestamp_ns"] = timestamp_ns

    match classify_type(golden_exists, verdict, task_type):
        case CaptureResultType.RECORDED:
            return Recorded(golden_file=str(golden_file), **common)
        case CaptureResultType.ADDED:
            return Added(
                golden_file=str(golden_file),
                compare_file=str(compare_file),
                actual_file=str(actual_file),
                ai_assertion_results=ai_assertion_results,
                **common,
            )
        case CaptureResultType.UNCHANGED:
            return Unchanged(golden_file=str(golden_file), **common)
        case CaptureResultType.CHANGED:
            return Changed(
                golden_file=str(golden_file),
                compare_file=str(compare_file),
                actual_file=str(actual_file),
                ai_assertion_results=ai_assertion_results,
                **common,
            )
        case _ as unreachable:
            assert_never(unreachable)
