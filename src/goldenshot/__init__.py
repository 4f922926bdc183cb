"""
goldenshot: golden image comparison for visual regression tests.

Compares captured images against accepted golden images, renders compare
images, classifies each capture as added, changed, unchanged or recorded and
reports the outcome.
"""

__version__ = "0.1.0"

from goldenshot.ai import (
    AiAssertion,
    AiAssertionOptions,
    AiAssertionResult,
    AiAssertionResults,
    AiAssertionScorer,
)
from goldenshot.capture import (
    CaptureIdentity,
    CaptureProcessor,
    FilePathStrategy,
    NamingStrategy,
    capture,
    classify,
)
from goldenshot.compare import (
    ComparisonResult,
    ImageComparator,
    PerceptualHashComparator,
    ResultValidator,
    SimpleImageComparator,
    ThresholdValidator,
)
from goldenshot.errors import (
    AiAssertionFailure,
    ComparisonInputError,
    GoldenshotError,
    InvalidImageError,
    PersistenceError,
    VerificationFailure,
)
from goldenshot.options import (
    CompareOptions,
    GoldenshotOptions,
    PixelBitConfig,
    RecordOptions,
    ReportOptions,
)
from goldenshot.render import DiffRenderer, GridStyle, SimpleStyle
from goldenshot.reporting import (
    CaptureResultReporter,
    CaptureResultsSummary,
    DefaultCaptureResultReporter,
    JsonOutputCaptureResultReporter,
)
from goldenshot.results import (
    Added,
    CaptureResult,
    CaptureResultType,
    Changed,
    Recorded,
    Unchanged,
)
from goldenshot.settings import GoldenshotSettings, load_settings
from goldenshot.task import TaskType

__all__ = [
    # Capture results
    "Added",
    "CaptureResult",
    "CaptureResultType",
    "Changed",
    "Recorded",
    "Unchanged",
    # Comparison
    "ComparisonResult",
    "DiffRenderer",
    "GridStyle",
    "ImageComparator",
    "PerceptualHashComparator",
    "ResultValidator",
    "SimpleImageComparator",
    "SimpleStyle",
    "ThresholdValidator",
    # Capture and reporting
    "CaptureIdentity",
    "CaptureProcessor",
    "CaptureResultReporter",
    "CaptureResultsSummary",
    "DefaultCaptureResultReporter",
    "FilePathStrategy",
    "JsonOutputCaptureResultReporter",
    "NamingStrategy",
    "capture",
    "classify",
    # Options
    "CompareOptions",
    "GoldenshotOptions",
    "GoldenshotSettings",
    "PixelBitConfig",
    "RecordOptions",
    "ReportOptions",
    "TaskType",
    "load_settings",
    # AI assertions
    "AiAssertion",
    "AiAssertionOptions",
    "AiAssertionResult",
    "AiAssertionResults",
    "AiAssertionScorer",
    # Errors
    "AiAssertionFailure",
    "ComparisonInputError",
    "GoldenshotError",
    "InvalidImageError",
    "PersistenceError",
    "VerificationFailure",
    "__version__",
]
