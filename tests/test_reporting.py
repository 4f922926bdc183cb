"""Tests for capture result reporters."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from goldenshot.ai.assertions import AiAssertionResult, AiAssertionResults
from goldenshot.errors import AiAssertionFailure, PersistenceError, VerificationFailure
from goldenshot.reporting.reporters import (
    AiCaptureResultReporter,
    CompositeCaptureResultReporter,
    DefaultCaptureResultReporter,
    JsonOutputCaptureResultReporter,
    VerifyCaptureResultReporter,
    report_file_path,
)
from goldenshot.results import Added, Changed, Recorded, Unchanged
from goldenshot.task import TaskType


def _failing_ai() -> AiAssertionResults:
    return AiAssertionResults(
        ai_assertion_results=[
            AiAssertionResult(
                assert_prompt="dialog is shown",
                required_fulfillment_percent=90,
                fulfillment_percent=20,
            )
        ]
    )


def _changed(tmp: Path, ai: AiAssertionResults | None = None) -> Changed:
    return Changed(
        golden_file=str(tmp / "screen.png"),
        compare_file=str(tmp / "out" / "screen_compare.png"),
        actual_file=str(tmp / "out" / "screen_actual.png"),
        timestamp_ns=1000,
        ai_assertion_results=ai,
    )


def _added(tmp: Path) -> Added:
    return Added(
        golden_file=str(tmp / "screen.png"),
        compare_file=str(tmp / "out" / "screen_compare.png"),
        actual_file=str(tmp / "out" / "screen_actual.png"),
        timestamp_ns=2000,
    )


class TestJsonReporter:
    """Tests for JsonOutputCaptureResultReporter."""

    def test_writes_named_record(self, temp_dir: Path) -> None:
        reporter = JsonOutputCaptureResultReporter(temp_dir / "results")
        path = reporter.report(_changed(temp_dir), TaskType.COMPARE)

        assert path == temp_dir / "results" / "screen_1000.json"
        assert json.loads(path.read_text())["type"] == "changed"

    def test_added_record_named_after_compare_file(self, temp_dir: Path) -> None:
        reporter = JsonOutputCaptureResultReporter(temp_dir / "results")
        path = reporter.report(_added(temp_dir), TaskType.VERIFY)

        assert path.name == "screen_compare_2000.json"

    def test_report_file_path_is_absolute(self) -> None:
        path = report_file_path("results", 5, "screen")
        assert path.is_absolute()
        assert path.name == "screen_5.json"

    def test_unwritable_directory_raises_persistence_error(self, temp_dir: Path) -> None:
        blocker = temp_dir / "results"
        blocker.write_text("not a directory")

        with pytest.raises(PersistenceError) as exc_info:
            JsonOutputCaptureResultReporter(blocker).report(_changed(temp_dir), TaskType.COMPARE)

        assert exc_info.value.path.parent == blocker


class TestVerifyReporter:
    """Tests for VerifyCaptureResultReporter."""

    def test_changed_fails_after_writing_record(self, temp_dir: Path) -> None:
        json_reporter = JsonOutputCaptureResultReporter(temp_dir / "results")
        reporter = VerifyCaptureResultReporter(json_reporter)

        with pytest.raises(VerificationFailure, match="is changed") as exc_info:
            reporter.report(_changed(temp_dir), TaskType.VERIFY)

        assert (temp_dir / "results" / "screen_1000.json").exists()
        assert "See the compare image at" in str(exc_info.value)
        assert exc_info.value.compare_file.endswith("screen_compare.png")

    def test_added_fails_with_missing_golden_message(self, temp_dir: Path) -> None:
        reporter = VerifyCaptureResultReporter(JsonOutputCaptureResultReporter(temp_dir))

        with pytest.raises(VerificationFailure, match="was not found") as exc_info:
            reporter.report(_added(temp_dir), TaskType.VERIFY)

        message = str(exc_info.value)
        assert f"See the compare image at {temp_dir / 'out' / 'screen_compare.png'}" in message
        assert f"See the actual image at {temp_dir / 'out' / 'screen_actual.png'}" in message

    @pytest.mark.parametrize("result_cls", [Unchanged, Recorded])
    def test_passing_results_do_not_raise(self, temp_dir: Path, result_cls) -> None:
        reporter = VerifyCaptureResultReporter(JsonOutputCaptureResultReporter(temp_dir))
        reporter.report(result_cls(golden_file=str(temp_dir / "a.png")), TaskType.VERIFY)

    def test_persistence_error_does_not_mask_failure(self, temp_dir: Path) -> None:
        blocker = temp_dir / "results"
        blocker.write_text("not a directory")
        reporter = VerifyCaptureResultReporter(JsonOutputCaptureResultReporter(blocker))

        with pytest.raises(VerificationFailure) as exc_info:
            reporter.report(_changed(temp_dir), TaskType.VERIFY)

        assert isinstance(exc_info.value.__cause__, PersistenceError)
        assert exc_info.value.__notes__[0].startswith("PersistenceError:")

    def test_persistence_error_for_passing_result(self, temp_dir: Path) -> None:
        blocker = temp_dir / "results"
        blocker.write_text("not a directory")
        reporter = VerifyCaptureResultReporter(JsonOutputCaptureResultReporter(blocker))

        with pytest.raises(PersistenceError):
            reporter.report(Unchanged(golden_file=str(temp_dir / "a.png")), TaskType.VERIFY)


class TestAiReporter:
    """Tests for AiCaptureResultReporter."""

    def test_unfulfilled_assertion_fails(self, temp_dir: Path) -> None:
        with pytest.raises(AiAssertionFailure):
            AiCaptureResultReporter().report(_changed(temp_dir, _failing_ai()), TaskType.COMPARE)

    def test_no_ai_results_passes(self, temp_dir: Path) -> None:
        AiCaptureResultReporter().report(_changed(temp_dir), TaskType.COMPARE)

    @pytest.mark.parametrize("result_cls", [Unchanged, Recorded])
    def test_passing_results_are_not_checked(self, temp_dir: Path, result_cls) -> None:
        with patch("goldenshot.reporting.reporters.check_fulfillment") as check:
            AiCaptureResultReporter().report(
                result_cls(golden_file=str(temp_dir / "a.png")), TaskType.VERIFY
            )
        check.assert_not_called()


class TestCompositeReporter:
    """Tests for CompositeCaptureResultReporter."""

    def test_runs_every_reporter(self, temp_dir: Path) -> None:
        first, second = MagicMock(), MagicMock()
        result = _changed(temp_dir)

        CompositeCaptureResultReporter([first, second]).report(result, TaskType.COMPARE)

        first.report.assert_called_once_with(result, TaskType.COMPARE)
        second.report.assert_called_once_with(result, TaskType.COMPARE)

    def test_first_failure_raised_with_later_as_notes(self, temp_dir: Path) -> None:
        result = _changed(temp_dir, _failing_ai())
        reporters = [
            VerifyCaptureResultReporter(JsonOutputCaptureResultReporter(temp_dir)),
            AiCaptureResultReporter(),
        ]

        with pytest.raises(VerificationFailure) as exc_info:
            CompositeCaptureResultReporter(reporters).report(result, TaskType.VERIFY)

        notes = exc_info.value.__notes__
        assert len(notes) == 1
        assert notes[0].startswith("AiAssertionFailure:")

    def test_other_errors_propagate(self, temp_dir: Path) -> None:
        broken = MagicMock()
        broken.report.side_effect = RuntimeError("boom")
        after = MagicMock()

        with pytest.raises(RuntimeError):
            CompositeCaptureResultReporter([broken, after]).report(
                _changed(temp_dir), TaskType.COMPARE
            )
        after.report.assert_not_called()


class TestDefaultReporter:
    """Tests for DefaultCaptureResultReporter."""

    def test_verify_mode_raises_and_writes(self, temp_dir: Path) -> None:
        reporter = DefaultCaptureResultReporter(temp_dir / "results")

        with pytest.raises(VerificationFailure):
            reporter.report(_changed(temp_dir), TaskType.VERIFY)

        assert list((temp_dir / "results").glob("*.json"))

    def test_compare_mode_only_writes(self, temp_dir: Path) -> None:
        reporter = DefaultCaptureResultReporter(temp_dir / "results")
        reporter.report(_changed(temp_dir), TaskType.COMPARE)

        assert (temp_dir / "results" / "screen_1000.json").exists()

    def test_verify_and_record_also_verifies(self, temp_dir: Path) -> None:
        reporter = DefaultCaptureResultReporter(temp_dir / "results")

        with pytest.raises(VerificationFailure):
            reporter.report(_added(temp_dir), TaskType.VERIFY_AND_RECORD)

    def test_compare_mode_still_gates_ai(self, temp_dir: Path) -> None:
        reporter = DefaultCaptureResultReporter(temp_dir / "results")

        with pytest.raises(AiAssertionFailure):
            reporter.report(_changed(temp_dir, _failing_ai()), TaskType.COMPARE)
        assert (temp_dir / "results" / "screen_1000.json").exists()
