"""
Command-line interface for goldenshot.

Compares an image file against a golden file and summarizes result records.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import structlog
from PIL import Image, UnidentifiedImageError

from goldenshot import __version__
from goldenshot.capture.processor import CaptureProcessor
from goldenshot.compare.validator import ThresholdValidator
from goldenshot.errors import AiAssertionFailure, GoldenshotError, VerificationFailure
from goldenshot.render.styles import GridStyle, SimpleStyle
from goldenshot.reporting.summary import CaptureResultsSummary
from goldenshot.settings import load_settings
from goldenshot.task import TaskType

logger = structlog.get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except (VerificationFailure, AiAssertionFailure) as e:
        print(str(e), file=sys.stderr)
        return 1
    except (GoldenshotError, OSError, UnidentifiedImageError, ValueError) as e:
        logger.error("Command failed", error=str(e))
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="goldenshot",
        description="Golden image comparison and reporting for visual regression tests",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"goldenshot {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a goldenshot YAML config file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    compare_parser = subparsers.add_parser(
        "compare", help="Compare an image against its golden file"
    )
    compare_parser.add_argument("golden", type=Path, help="Golden image path (may not exist)")
    compare_parser.add_argument("actual", type=Path, help="Newly captured image path")
    compare_parser.add_argument(
        "--task",
        choices=[t.value for t in TaskType if t is not TaskType.NONE],
        default=None,
        help="Task type (defaults to settings, then 'verify')",
    )
    compare_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Accepted ratio of changed pixels (0-1)",
    )
    compare_parser.add_argument(
        "--style",
        choices=["grid", "simple"],
        default="grid",
        help="Compare image layout",
    )
    compare_parser.set_defaults(func=cmd_compare)

    summary_parser = subparsers.add_parser(
        "summary", help="Summarize capture result records"
    )
    summary_parser.add_argument(
        "result_directory",
        nargs="?",
        type=Path,
        default=None,
        help="Result directory (defaults to settings)",
    )
    summary_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full summary as JSON",
    )
    summary_parser.set_defaults(func=cmd_summary)

    return parser


def configure_logging(verbose: bool) -> None:
    """Configure structured logging."""
    level = "DEBUG" if verbose else "INFO"
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if verbose else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, level))


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare one image file against a golden file."""
    settings = load_settings(args.config)
    task_type = TaskType(args.task) if args.task else settings.resolved_task_type
    if task_type is TaskType.NONE:
        task_type = TaskType.VERIFY

    base = settings.to_options(task_type=task_type)
    validator = (
        ThresholdValidator(args.threshold)
        if args.threshold is not None
        else base.compare_options.result_validator
    )
    style = SimpleStyle() if args.style == "simple" else GridStyle()
    options = base.with_overrides(
        compare_options=replace(
            base.compare_options,
            result_validator=validator,
            comparison_style=style,
        )
    )

    processor = CaptureProcessor(options, settings.file_path_strategy)
    with Image.open(args.actual) as img:
        actual = img.convert("RGBA")

    result = processor.process(actual, args.golden)
    if result is None:
        return 0

    print(f"{result.type}: {result.golden_file}")
    comparison = processor.last_comparison
    if comparison is not None:
        print(
            f"  {comparison.pixel_differences}/{comparison.pixel_count} pixels differ "
            f"({comparison.ratio:.4%})"
        )
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Summarize capture result records."""
    settings = load_settings(args.config)
    directory = args.result_directory or settings.result_directory
    summary = CaptureResultsSummary.load(directory)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
        return 0

    print(f"Results in {Path(directory).absolute()}")
    print(f"  Total:     {summary.total}")
    print(f"  Added:     {summary.added}")
    print(f"  Changed:   {summary.changed}")
    print(f"  Unchanged: {summary.unchanged}")
    print(f"  Recorded:  {summary.recorded}")
    for result in summary.results:
        print(f"  [{result.type}] {result.golden_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
