"""
Reporting module.

Reporters persist capture results and turn them into test failures.
"""

from goldenshot.reporting.reporters import (
    DEFAULT_RESULT_DIRECTORY,
    AiCaptureResultReporter,
    CaptureResultReporter,
    CompositeCaptureResultReporter,
    DefaultCaptureResultReporter,
    JsonOutputCaptureResultReporter,
    VerifyCaptureResultReporter,
    report_file_path,
    verification_error,
)
from goldenshot.reporting.summary import CaptureResultsSummary

__all__ = [
    "DEFAULT_RESULT_DIRECTORY",
    "AiCaptureResultReporter",
    "CaptureResultReporter",
    "CaptureResultsSummary",
    "CompositeCaptureResultReporter",
    "DefaultCaptureResultReporter",
    "JsonOutputCaptureResultReporter",
    "VerifyCaptureResultReporter",
    "report_file_path",
    "verification_error",
]
