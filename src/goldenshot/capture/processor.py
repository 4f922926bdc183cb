"""
Capture processing.

Runs one capture to completion: prepares the captured image, records or
compares it against the golden file, writes the actual and compare images,
classifies the outcome and hands the result to the configured reporter.
"""

from __future__ import annotations

import time
from pathlib import Path

import structlog
from PIL import Image

from goldenshot.ai.assertions import AiAssertionResults
from goldenshot.capture.classifier import classify, classify_type
from goldenshot.capture.naming import FilePathStrategy, resolve_golden_path, sibling_path
from goldenshot.compare.comparator import DEFAULT_MAX_DISTANCE, ComparisonResult, ensure_raster
from goldenshot.errors import PersistenceError
from goldenshot.options import GoldenshotOptions
from goldenshot.render.diff_renderer import DiffRenderer
from goldenshot.results import CaptureResult, CaptureResultType

logger = structlog.get_logger(__name__)


class CaptureProcessor:
    """
    Processes captures for one set of options.

    Example:
        processor = CaptureProcessor(GoldenshotOptions(task_type=TaskType.VERIFY))
        result = processor.process(screenshot, "screenshots/home.png")
    """

    def __init__(
        self,
        options: GoldenshotOptions | None = None,
        file_path_strategy: FilePathStrategy = FilePathStrategy.RELATIVE_PATH_FROM_CURRENT_DIRECTORY,
        renderer: DiffRenderer | None = None,
    ) -> None:
        self.options = options or GoldenshotOptions()
        self.file_path_strategy = file_path_strategy
        compare_options = self.options.compare_options
        comparator = compare_options.image_comparator
        self._renderer = renderer or DiffRenderer(
            max_distance=getattr(comparator, "max_distance", DEFAULT_MAX_DISTANCE),
            density=compare_options.density,
            h_shift=getattr(comparator, "h_shift", 0),
            v_shift=getattr(comparator, "v_shift", 0),
        )
        self._log = logger.bind(component="capture_processor")
        self.last_comparison: ComparisonResult | None = None

    def process(self, image: Image.Image, golden_file: str | Path) -> CaptureResult | None:
        """
        Record or compare one captured image and report the result.

        Returns None without touching the filesystem when capturing is disabled.

        Raises:
            ComparisonInputError: If the captured image has no pixels.
            PersistenceError: If an image or report cannot be written.
            VerificationFailure: If verifying and the capture is Added or Changed.
            AiAssertionFailure: If a required AI assertion is not fulfilled.
        """
        options = self.options
        if not options.should_capture:
            self._log.debug("Capture skipped", task_type=options.task_type)
            return None

        ensure_raster(image, "captured image")
        compare_options = options.compare_options
        task_type = options.task_type
        output_directory = compare_options.output_directory.absolute()

        golden_path = resolve_golden_path(
            golden_file, self.file_path_strategy, compare_options.output_directory
        )
        compare_path = sibling_path(golden_path, output_directory, "compare")
        actual_path = sibling_path(golden_path, output_directory, "actual")
        prepared = options.record_options.apply(image)
        timestamp_ns = time.time_ns()
        self.last_comparison = None

        golden_exists = False
        verdict: bool | None = None
        ai_results: AiAssertionResults | None = None

        if task_type.is_record_only:
            self._save(prepared, golden_path)
            self._log.info("Golden image recorded", path=str(golden_path))
        else:
            golden_image = self._load_golden(golden_path)
            golden_exists = golden_image is not None
            if golden_image is not None:
                comparison = compare_options.image_comparator.compare(golden_image, prepared)
                verdict = compare_options.result_validator(comparison)
                self.last_comparison = comparison
                self._log.info(
                    "Capture compared",
                    golden=str(golden_path),
                    ratio=comparison.ratio,
                    accepted=verdict,
                )

            outcome = classify_type(golden_exists, verdict, task_type)
            if outcome in (CaptureResultType.ADDED, CaptureResultType.CHANGED):
                self._save(prepared, actual_path)
                compare_image = self._renderer.render(
                    golden_image, prepared, compare_options.comparison_style
                )
                self._save(compare_image, compare_path)
                ai_results = self._score_ai_assertions(
                    golden_path if golden_exists else None, compare_path, actual_path
                )
                if task_type.is_recording:
                    self._save(prepared, golden_path)
                    self._log.info("Golden image updated", path=str(golden_path))

        result = classify(
            golden_exists,
            verdict,
            task_type,
            golden_file=golden_path,
            compare_file=compare_path,
            actual_file=actual_path,
            timestamp_ns=timestamp_ns,
            ai_assertion_results=ai_results,
            context_data=options.context_data,
        )
        self._log.info("Capture classified", type=result.type, golden=str(golden_path))

        options.report_options.capture_result_reporter.report(result, task_type)
        return result

    def _load_golden(self, path: Path) -> Image.Image | None:
        if not path.exists():
            return None
        with Image.open(path) as img:
            return img.convert("RGBA")

    def _score_ai_assertions(
        self,
        reference_file: Path | None,
        compare_file: Path,
        actual_file: Path,
    ) -> AiAssertionResults | None:
        ai_options = self.options.compare_options.ai_assertion_options
        if ai_options is None or not ai_options.ai_assertions:
            return None
        if ai_options.scorer is None:
            self._log.warning(
                "AI assertions configured without a scorer",
                count=len(ai_options.ai_assertions),
            )
            return None
        return ai_options.scorer.assert_images(
            reference_file, compare_file, actual_file, list(ai_options.ai_assertions)
        )

    def _save(self, image: Image.Image, path: Path) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                image.save(f, "PNG")
        except OSError as e:
            raise PersistenceError(path, str(e)) from e
        self._log.debug("Image written", path=str(path))


def capture(
    image: Image.Image,
    golden_file: str | Path,
    options: GoldenshotOptions | None = None,
) -> CaptureResult | None:
    """Process a single capture with the given options."""
    return CaptureProcessor(options).process(image, golden_file)
