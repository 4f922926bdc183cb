"""Summaries over the JSON records in a result directory."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from goldenshot.results import CaptureResult, CaptureResultType, parse_capture_result

logger = structlog.get_logger(__name__)


class CaptureResultsSummary:
    """Counts of capture results by variant, with the results themselves."""

    def __init__(self, results: list[CaptureResult]) -> None:
        self.results = sorted(results, key=lambda r: r.timestamp_ns)
        counts = Counter(CaptureResultType(r.type) for r in self.results)
        self.added = counts[CaptureResultType.ADDED]
        self.changed = counts[CaptureResultType.CHANGED]
        self.unchanged = counts[CaptureResultType.UNCHANGED]
        self.recorded = counts[CaptureResultType.RECORDED]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def has_failures(self) -> bool:
        """True when any capture would fail verification."""
        return self.added > 0 or self.changed > 0

    @classmethod
    def load(cls, result_directory: str | Path) -> CaptureResultsSummary:
        """
        Read every JSON record in a result directory.

        Records that are not capture results are skipped with a warning.
        """
        directory = Path(result_directory)
        results: list[CaptureResult] = []
        if not directory.is_dir():
            logger.info("Result directory not found", path=str(directory))
            return cls(results)

        for path in sorted(directory.glob("*.json")):
            try:
                results.append(parse_capture_result(path.read_bytes()))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid result record",
                    path=str(path),
                    errors=e.error_count(),
                )
        return cls(results)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total": self.total,
                "added": self.added,
                "changed": self.changed,
                "unchanged": self.unchanged,
                "recorded": self.recorded,
            },
            "results": [r.model_dump(mode="json") for r in self.results],
        }
