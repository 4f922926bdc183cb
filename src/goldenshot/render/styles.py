"""Layout styles for the compare image."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GridStyle:
    """
    Side-by-side reference/diff/new panels with ruled gridlines.

    Line spacings are density-independent units; None disables that tier.
    """

    big_line_space_dp: int | None = 16
    small_line_space_dp: int | None = 4
    has_label: bool = True

    def __post_init__(self) -> None:
        for name in ("big_line_space_dp", "small_line_space_dp"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive or None")


@dataclass(frozen=True, slots=True)
class SimpleStyle:
    """Single overlay of the new image with differing regions highlighted."""


ComparisonStyle = GridStyle | SimpleStyle
