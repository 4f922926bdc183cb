"""
Capture result reporters.

The default pipeline persists the JSON record first and only then raises a
verification failure, so a record of every failing comparison exists on disk.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import structlog

from goldenshot.ai.assertions import check_fulfillment
from goldenshot.errors import AiAssertionFailure, PersistenceError, VerificationFailure
from goldenshot.results import Added, CaptureResult, Changed, dump_capture_result
from goldenshot.task import TaskType

logger = structlog.get_logger(__name__)

DEFAULT_RESULT_DIRECTORY = "build/test-results/goldenshot"


class CaptureResultReporter(Protocol):
    """Produces side effects for a capture result and may raise to fail the test."""

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> None: ...


def report_file_path(result_directory: str | Path, timestamp_ns: int, name: str) -> Path:
    """Path of the JSON record for a capture, unique per test name and timestamp."""
    return Path(result_directory).absolute() / f"{name}_{timestamp_ns}.json"


def verification_error(capture_result: CaptureResult) -> VerificationFailure | None:
    """Build the failure raised for a verified capture, or None when it passed."""
    match capture_result:
        case Added():
            return VerificationFailure(
                f"goldenshot: The original file({capture_result.golden_file}) was not found.\n"
                f"See the compare image at {capture_result.compare_file}\n"
                f"See the actual image at {capture_result.actual_file}",
                golden_file=capture_result.golden_file,
                actual_file=capture_result.actual_file,
                compare_file=capture_result.compare_file,
            )
        case Changed():
            return VerificationFailure(
                f"goldenshot: {capture_result.golden_file} is changed.\n"
                f"See the compare image at {capture_result.compare_file}\n"
                f"See the actual image at {capture_result.actual_file}",
                golden_file=capture_result.golden_file,
                actual_file=capture_result.actual_file,
                compare_file=capture_result.compare_file,
            )
        case _:
            return None


class JsonOutputCaptureResultReporter:
    """Writes each capture result as a JSON record in the result directory."""

    def __init__(self, result_directory: str | Path = DEFAULT_RESULT_DIRECTORY) -> None:
        self.result_directory = Path(result_directory)
        self._log = logger.bind(component="json_reporter")

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> Path:
        path = report_file_path(
            self.result_directory,
            capture_result.timestamp_ns,
            capture_result.report_name,
        )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                f.write(dump_capture_result(capture_result))
        except OSError as e:
            raise PersistenceError(path, str(e)) from e

        self._log.debug("JSON result written", path=str(path), type=capture_result.type)
        return path


class VerifyCaptureResultReporter:
    """Persists the record, then fails Added and Changed captures."""

    def __init__(self, json_reporter: JsonOutputCaptureResultReporter | None = None) -> None:
        self._json_reporter = json_reporter or JsonOutputCaptureResultReporter()

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> None:
        """
        Raises:
            VerificationFailure: If the capture is Added or Changed, also when
                the record could not be written.
            PersistenceError: If the record could not be written for a passing capture.
        """
        error = verification_error(capture_result)
        try:
            self._json_reporter.report(capture_result, task_type)
        except PersistenceError as e:
            if error is None:
                raise
            error.add_note(f"PersistenceError: {e}")
            raise error from e
        if error is not None:
            raise error


class AiCaptureResultReporter:
    """Fails Added and Changed captures whose required AI assertions are unfulfilled."""

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> None:
        match capture_result:
            case Added() | Changed() if capture_result.ai_assertion_results is not None:
                check_fulfillment(capture_result.ai_assertion_results.ai_assertion_results)
            case _:
                return


class CompositeCaptureResultReporter:
    """
    Runs reporters in order.

    Every reporter runs even when an earlier one raised an assertion-style
    failure; the first failure is re-raised with the later ones attached as
    notes. Any other exception propagates immediately.
    """

    def __init__(self, reporters: Sequence[CaptureResultReporter]) -> None:
        self.reporters = tuple(reporters)

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> None:
        failures: list[AssertionError] = []
        for reporter in self.reporters:
            try:
                reporter.report(capture_result, task_type)
            except (VerificationFailure, AiAssertionFailure) as e:
                failures.append(e)

        if not failures:
            return
        first = failures[0]
        for other in failures[1:]:
            first.add_note(f"{type(other).__name__}: {other}")
        raise first


class DefaultCaptureResultReporter:
    """Verify or JSON reporter depending on the task type, followed by the AI reporter."""

    def __init__(self, result_directory: str | Path = DEFAULT_RESULT_DIRECTORY) -> None:
        self.result_directory = Path(result_directory)
        self._json = JsonOutputCaptureResultReporter(self.result_directory)
        self._verify = VerifyCaptureResultReporter(self._json)
        self._ai = AiCaptureResultReporter()

    def report(self, capture_result: CaptureResult, task_type: TaskType) -> None:
        primary: CaptureResultReporter = self._verify if task_type.is_verifying else self._json
        CompositeCaptureResultReporter([primary, self._ai]).report(capture_result, task_type)
