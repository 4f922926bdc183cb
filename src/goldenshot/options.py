"""
Capture options.

Immutable policy bundle describing what a capture does (task type), how it is
compared, how the captured image is prepared and how the result is reported.
Copies with overrides produce new instances.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from pathlib import Path
from typing import Any, Self

import numpy as np
from PIL import Image

from goldenshot.ai.assertions import AiAssertion, AiAssertionOptions
from goldenshot.compare.comparator import ImageComparator, SimpleImageComparator
from goldenshot.compare.validator import (
    DEFAULT_RESULT_VALIDATOR,
    ResultValidator,
    ThresholdValidator,
)
from goldenshot.render.styles import ComparisonStyle, GridStyle
from goldenshot.reporting.reporters import CaptureResultReporter, DefaultCaptureResultReporter
from goldenshot.task import TaskType

DEFAULT_OUTPUT_DIRECTORY = "build/outputs/goldenshot"


class PixelBitConfig(StrEnum):
    """Bit depth the captured image is reduced to before saving or comparing."""

    ARGB_8888 = "argb8888"
    RGB_565 = "rgb565"

    def apply(self, image: Image.Image) -> Image.Image:
        if self is PixelBitConfig.ARGB_8888:
            return image.convert("RGBA")
        arr = np.asarray(image.convert("RGB"), dtype=np.uint8)
        quantized = arr & np.array([0xF8, 0xFC, 0xF8], dtype=np.uint8)
        return Image.fromarray(quantized, "RGB")


@dataclass(frozen=True, slots=True)
class CompareOptions:
    """How a capture is compared against its golden file."""

    output_directory: Path = Path(DEFAULT_OUTPUT_DIRECTORY)
    image_comparator: ImageComparator = field(default_factory=SimpleImageComparator)
    comparison_style: ComparisonStyle = field(default_factory=GridStyle)
    ai_assertion_options: AiAssertionOptions | None = None
    result_validator: ResultValidator = DEFAULT_RESULT_VALIDATOR
    density: float = 1.0
    """Pixels per density-independent unit for grid spacing."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_directory", Path(self.output_directory))
        if self.density <= 0:
            raise ValueError("density must be positive")

    @classmethod
    def with_change_threshold(cls, change_threshold: float, **kwargs: Any) -> CompareOptions:
        """
        Build compare options accepting up to ``change_threshold`` of changed pixels.

        The threshold must be between 0 and 1.
        """
        return cls(result_validator=ThresholdValidator(change_threshold), **kwargs)


@dataclass(frozen=True, slots=True)
class RecordOptions:
    """How the captured image is prepared before it is saved or compared."""

    resize_scale: float = 1.0
    pixel_bit_config: PixelBitConfig = PixelBitConfig.ARGB_8888

    def __post_init__(self) -> None:
        if self.resize_scale <= 0:
            raise ValueError("resize_scale must be positive")

    def apply(self, image: Image.Image) -> Image.Image:
        """Return a resized, bit-depth adjusted copy of the image."""
        prepared = image
        if self.resize_scale != 1.0:
            width = max(1, round(image.width * self.resize_scale))
            height = max(1, round(image.height * self.resize_scale))
            prepared = image.resize((width, height), Image.Resampling.BILINEAR)
        return self.pixel_bit_config.apply(prepared)


@dataclass(frozen=True, slots=True)
class ReportOptions:
    capture_result_reporter: CaptureResultReporter = field(
        default_factory=DefaultCaptureResultReporter
    )


@dataclass(frozen=True, slots=True)
class GoldenshotOptions:
    """
    Options for a single capture.

    Construct once per test context; use the ``with_*``/``added_*`` helpers to
    derive variants.
    """

    task_type: TaskType = TaskType.NONE
    capture_enabled: bool = True
    context_data: Mapping[str, Any] = field(default_factory=dict)
    compare_options: CompareOptions = field(default_factory=CompareOptions)
    record_options: RecordOptions = field(default_factory=RecordOptions)
    report_options: ReportOptions = field(default_factory=ReportOptions)

    @property
    def should_capture(self) -> bool:
        return self.capture_enabled and self.task_type.is_enabled

    def with_overrides(self, **changes: Any) -> Self:
        """Create a new options instance; the original is not modified."""
        return replace(self, **changes)

    def added_ai_assertion(self, assert_prompt: str, required_fulfillment_percent: int) -> Self:
        return self.added_ai_assertions(
            AiAssertion(
                assert_prompt=assert_prompt,
                required_fulfillment_percent=required_fulfillment_percent,
            )
        )

    def added_ai_assertions(self, *assertions: AiAssertion) -> Self:
        ai_options = self.compare_options.ai_assertion_options or AiAssertionOptions()
        return replace(
            self,
            compare_options=replace(
                self.compare_options,
                ai_assertion_options=ai_options.with_assertions(*assertions),
            ),
        )
