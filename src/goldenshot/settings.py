"""
Environment-based settings.

This is the one place where the process environment (and an optional YAML
file) is read; it produces explicit ``GoldenshotOptions`` for everything
downstream.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from goldenshot.capture.naming import (
    CaptureIdentity,
    FilePathStrategy,
    NamingStrategy,
    golden_path_for,
)
from goldenshot.capture.processor import CaptureProcessor
from goldenshot.compare.validator import DEFAULT_RESULT_VALIDATOR, ThresholdValidator
from goldenshot.options import (
    DEFAULT_OUTPUT_DIRECTORY,
    CompareOptions,
    GoldenshotOptions,
    PixelBitConfig,
    RecordOptions,
    ReportOptions,
)
from goldenshot.reporting.reporters import DEFAULT_RESULT_DIRECTORY, DefaultCaptureResultReporter
from goldenshot.task import TaskType

logger = structlog.get_logger(__name__)

STANDARD_CONFIG_PATHS = (
    Path(".goldenshot.yaml"),
    Path(".goldenshot.yml"),
    Path("goldenshot.yaml"),
    Path("goldenshot.yml"),
)


class GoldenshotSettings(BaseSettings):
    """
    Settings loaded from environment variables with the GOLDENSHOT_ prefix.

    The task type is taken from GOLDENSHOT_TASK_TYPE when set, otherwise from
    the GOLDENSHOT_RECORD / GOLDENSHOT_COMPARE / GOLDENSHOT_VERIFY switches.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOLDENSHOT_",
        case_sensitive=False,
        extra="ignore",
    )

    task_type: TaskType | None = None
    record: bool = False
    compare: bool = False
    verify: bool = False

    output_directory: Path = Path(DEFAULT_OUTPUT_DIRECTORY)
    result_directory: Path = Path(DEFAULT_RESULT_DIRECTORY)
    file_path_strategy: FilePathStrategy = FilePathStrategy.RELATIVE_PATH_FROM_CURRENT_DIRECTORY
    naming_strategy: NamingStrategy = NamingStrategy.TEST_PACKAGE_AND_CLASS_AND_METHOD

    resize_scale: float = Field(default=1.0, gt=0.0)
    pixel_bit_config: PixelBitConfig = PixelBitConfig.ARGB_8888
    change_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    density: float = Field(default=1.0, gt=0.0)

    config_file: Path | None = None

    @field_validator("file_path_strategy", mode="before")
    @classmethod
    def _known_file_path_strategy(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in set(FilePathStrategy):
            logger.warning(
                "Unknown file path strategy, using default",
                value=value,
                default=FilePathStrategy.RELATIVE_PATH_FROM_CURRENT_DIRECTORY.value,
            )
            return FilePathStrategy.RELATIVE_PATH_FROM_CURRENT_DIRECTORY
        return value

    @property
    def resolved_task_type(self) -> TaskType:
        if self.task_type is not None:
            return self.task_type
        return TaskType.from_flags(record=self.record, compare=self.compare, verify=self.verify)

    def to_options(self, **overrides: Any) -> GoldenshotOptions:
        """Build capture options from these settings."""
        validator = (
            ThresholdValidator(self.change_threshold)
            if self.change_threshold is not None
            else DEFAULT_RESULT_VALIDATOR
        )
        options = GoldenshotOptions(
            task_type=self.resolved_task_type,
            compare_options=CompareOptions(
                output_directory=self.output_directory,
                result_validator=validator,
                density=self.density,
            ),
            record_options=RecordOptions(
                resize_scale=self.resize_scale,
                pixel_bit_config=self.pixel_bit_config,
            ),
            report_options=ReportOptions(
                capture_result_reporter=DefaultCaptureResultReporter(self.result_directory),
            ),
        )
        if overrides:
            options = options.with_overrides(**overrides)
        return options

    def processor(self, **overrides: Any) -> CaptureProcessor:
        return CaptureProcessor(self.to_options(**overrides), self.file_path_strategy)

    def golden_path(self, identity: CaptureIdentity | str) -> Path:
        """Default golden file for a test identity or pytest node id."""
        if isinstance(identity, str):
            identity = CaptureIdentity.from_pytest_nodeid(identity)
        return golden_path_for(identity, self.output_directory, self.naming_strategy)


def _read_config_file(path: Path) -> dict[str, Any]:
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_file: str | Path | None = None) -> GoldenshotSettings:
    """
    Load settings from environment and an optional YAML file.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (explicit path, GOLDENSHOT_CONFIG_FILE, or a standard location)
    3. Defaults
    """
    env_settings = GoldenshotSettings()
    path = Path(config_file) if config_file else env_settings.config_file
    if path is None:
        path = next((p for p in STANDARD_CONFIG_PATHS if p.exists()), None)

    if path is None or not path.exists():
        return env_settings

    file_config = _read_config_file(path)
    logger.debug("Loaded config file", path=str(path), keys=sorted(file_config))

    # Only explicitly set environment values override the file.
    env_values = env_settings.model_dump(exclude_unset=True)
    merged = {**file_config, **env_values, "config_file": path}
    return GoldenshotSettings.model_validate(merged)
