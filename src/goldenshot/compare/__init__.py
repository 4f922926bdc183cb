"""
Image comparison module.

Provides pixel and perceptual comparators and the validators that turn their
results into verdicts.
"""

from goldenshot.compare.comparator import (
    DEFAULT_MAX_DISTANCE,
    ComparisonResult,
    ImageComparator,
    PerceptualHashComparator,
    SimpleImageComparator,
    difference_mask,
)
from goldenshot.compare.validator import (
    DEFAULT_RESULT_VALIDATOR,
    ResultValidator,
    ThresholdValidator,
)

__all__ = [
    "DEFAULT_MAX_DISTANCE",
    "DEFAULT_RESULT_VALIDATOR",
    "ComparisonResult",
    "ImageComparator",
    "PerceptualHashComparator",
    "ResultValidator",
    "SimpleImageComparator",
    "ThresholdValidator",
    "difference_mask",
]
