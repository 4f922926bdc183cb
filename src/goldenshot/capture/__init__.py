"""
Capture module.

Classification of captures and the processor that records, compares and
reports them.
"""

from goldenshot.capture.classifier import classify, classify_type
from goldenshot.capture.naming import (
    CaptureIdentity,
    FilePathStrategy,
    NamingStrategy,
    golden_path_for,
    resolve_golden_path,
)
from goldenshot.capture.processor import CaptureProcessor, capture

__all__ = [
    "CaptureIdentity",
    "CaptureProcessor",
    "FilePathStrategy",
    "NamingStrategy",
    "capture",
    "classify",
    "classify_type",
    "golden_path_for",
    "resolve_golden_path",
]
