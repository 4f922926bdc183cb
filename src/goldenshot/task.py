"""Task types driving record/compare/verify behaviour."""

from __future__ import annotations

from enum import StrEnum


class TaskType(StrEnum):
    """What a capture should do with its image."""

    NONE = "none"
    """Capturing disabled; nothing is recorded or compared."""

    RECORD = "record"
    """Write the captured image as the new golden file."""

    COMPARE = "compare"
    """Compare against the golden file and write a diff, never fail."""

    VERIFY = "verify"
    """Compare against the golden file and fail on Added/Changed."""

    VERIFY_AND_RECORD = "verify_and_record"
    """Verify, and also write the golden file when it is missing or changed."""

    @property
    def is_enabled(self) -> bool:
        return self is not TaskType.NONE

    @property
    def is_recording(self) -> bool:
        return self in (TaskType.RECORD, TaskType.VERIFY_AND_RECORD)

    @property
    def is_comparing(self) -> bool:
        return self is TaskType.COMPARE

    @property
    def is_verifying(self) -> bool:
        return self in (TaskType.VERIFY, TaskType.VERIFY_AND_RECORD)

    @property
    def is_record_only(self) -> bool:
        return self is TaskType.RECORD

    @classmethod
    def from_flags(
        cls,
        record: bool = False,
        compare: bool = False,
        verify: bool = False,
    ) -> TaskType:
        """Resolve a task type from the boolean record/compare/verify switches."""
        if record and verify:
            return cls.VERIFY_AND_RECORD
        if record:
            return cls.RECORD
        if compare:
            return cls.COMPARE
        if verify:
            return cls.VERIFY
        return cls.NONE
