"""
Compare image rendering.

Composes the artifact written next to a Changed or Added capture: either a
reference/diff/new grid with rulers and labels, or a single overlay of the new
image with the differing regions highlighted.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import structlog
from PIL import Image
from scipy import ndimage

from goldenshot.compare.comparator import DEFAULT_MAX_DISTANCE, difference_mask, union_size
from goldenshot.errors import InvalidImageError
from goldenshot.render.canvas import Canvas, Color
from goldenshot.render.styles import ComparisonStyle, GridStyle, SimpleStyle

logger = structlog.get_logger(__name__)

BACKGROUND: Color = (255, 255, 255, 255)
HIGHLIGHT: Color = (255, 0, 0, 255)
LABEL_COLOR: Color = (0, 0, 0, 255)
BIG_LINE_COLOR: Color = (0, 0, 255, 128)
SMALL_LINE_COLOR: Color = (0, 0, 255, 40)
REGION_OUTLINE: Color = (255, 0, 0, 255)

PANEL_TITLES = ("Reference", "Diff", "New")


@dataclass(frozen=True, slots=True)
class _GridLayout:
    """Positions computed in the measurement pass, consumed by the draw pass."""

    panel_width: int
    panel_height: int
    column_width: int
    left_margin: int
    title_height: int
    header_height: int
    spacing: int
    padding: int
    width: int
    height: int

    def panel_x(self, index: int) -> int:
        return self.left_margin + index * (self.column_width + self.spacing)


class DiffRenderer:
    """
    Render compare images for a golden/actual pair.

    Grid line spacings are given in density-independent units and converted
    to pixels with ``density``.
    """

    def __init__(
        self,
        max_distance: float = DEFAULT_MAX_DISTANCE,
        density: float = 1.0,
        panel_spacing: int = 8,
        padding: int = 4,
        h_shift: int = 0,
        v_shift: int = 0,
    ) -> None:
        if density <= 0:
            raise ValueError("density must be positive")
        self.max_distance = max_distance
        self.h_shift = h_shift
        self.v_shift = v_shift
        self.density = density
        self.panel_spacing = panel_spacing
        self.padding = padding
        self._log = logger.bind(component="diff_renderer")

    def dp_to_px(self, dp: int | None) -> int | None:
        if dp is None:
            return None
        return max(1, round(dp * self.density))

    def render(
        self,
        golden: Image.Image | None,
        actual: Image.Image,
        style: ComparisonStyle | None = None,
    ) -> Image.Image:
        """
        Render a new compare image; the inputs are never modified.

        A missing golden image renders as an empty reference panel.

        Raises:
            InvalidImageError: If either image has no pixels.
        """
        self._check_image(actual, "actual")
        if golden is None:
            golden = Image.new("RGBA", actual.size, (0, 0, 0, 0))
        else:
            self._check_image(golden, "golden")

        style = style if style is not None else GridStyle()
        mask = difference_mask(golden, actual, self.max_distance, self.h_shift, self.v_shift)

        match style:
            case GridStyle():
                image = self._render_grid(golden, actual, mask, style)
            case SimpleStyle():
                image = self._render_simple(actual, mask)
            case _:
                raise ValueError(f"Unknown comparison style: {style!r}")

        self._log.debug(
            "Compare image rendered",
            style=type(style).__name__,
            size=image.size,
            changed_pixels=int(np.count_nonzero(mask)),
        )
        return image

    @staticmethod
    def _check_image(image: Image.Image, name: str) -> None:
        if not isinstance(image, Image.Image):
            raise InvalidImageError(f"{name} must be a PIL image, got {type(image).__name__}")
        if image.width <= 0 or image.height <= 0:
            raise InvalidImageError(f"{name} is zero-sized ({image.width}x{image.height})")

    @staticmethod
    def _panel(image: Image.Image, width: int, height: int) -> Image.Image:
        panel = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        panel.paste(image.convert("RGBA"), (0, 0))
        return panel

    def _diff_panel(
        self, golden: Image.Image, actual: Image.Image, mask: np.ndarray
    ) -> Image.Image:
        height, width = mask.shape
        golden_arr = np.asarray(self._panel(golden, width, height).convert("RGB"), dtype=float)
        actual_arr = np.asarray(self._panel(actual, width, height).convert("RGB"), dtype=float)

        blended = golden_arr * 0.3 + actual_arr * 0.7
        faded = blended * 0.4 + 255.0 * 0.6
        faded[mask] = HIGHLIGHT[:3]

        return Image.fromarray(faded.astype(np.uint8), "RGB").convert("RGBA")

    # =========================================================================
    # Grid style
    # =========================================================================

    def _measure_grid(
        self,
        canvas: Canvas,
        width: int,
        height: int,
        big_px: int | None,
        has_label: bool,
    ) -> _GridLayout:
        padding = self.padding
        title_height = 0
        ruler_height = 0
        left_margin = 0
        column_width = width

        if has_label:
            title_sizes = [canvas.text_size(title) for title in PANEL_TITLES]
            title_height = max(h for _, h in title_sizes) + padding * 2
            column_width = max(width, *(w for w, _ in title_sizes))
            if big_px is not None:
                x_labels = [canvas.text_size(str(x)) for x in range(0, width, big_px)]
                y_labels = [canvas.text_size(str(y)) for y in range(0, height, big_px)]
                ruler_height = max(h for _, h in x_labels) + padding
                left_margin = max(w for w, _ in y_labels) + padding * 2

        header_height = title_height + ruler_height
        total_width = left_margin + column_width * 3 + self.panel_spacing * 2
        return _GridLayout(
            panel_width=width,
            panel_height=height,
            column_width=column_width,
            left_margin=left_margin,
            title_height=title_height,
            header_height=header_height,
            spacing=self.panel_spacing,
            padding=padding,
            width=total_width,
            height=header_height + height,
        )

    def _render_grid(
        self,
        golden: Image.Image,
        actual: Image.Image,
        mask: np.ndarray,
        style: GridStyle,
    ) -> Image.Image:
        width, height = union_size(golden, actual)
        big_px = self.dp_to_px(style.big_line_space_dp)
        small_px = self.dp_to_px(style.small_line_space_dp)

        # Measurement needs a drawing context for the font metrics.
        layout = self._measure_grid(Canvas(1, 1), width, height, big_px, style.has_label)
        canvas = Canvas(layout.width, layout.height, BACKGROUND)

        panels = (
            self._panel(golden, width, height),
            self._diff_panel(golden, actual, mask),
            self._panel(actual, width, height),
        )
        top = layout.header_height
        # Translucent lines go on their own layer so they blend over the panels.
        grid_layer = Canvas(layout.width, layout.height)
        for index, panel in enumerate(panels):
            left = layout.panel_x(index)
            canvas.draw_image(panel, (left, top))
            self._draw_gridlines(grid_layer, left, top, width, height, small_px, SMALL_LINE_COLOR)
            self._draw_gridlines(grid_layer, left, top, width, height, big_px, BIG_LINE_COLOR)
        canvas.draw_image(grid_layer.to_image(), (0, 0))

        if style.has_label:
            self._draw_labels(canvas, layout, big_px)

        return canvas.to_image()

    @staticmethod
    def _draw_gridlines(
        canvas: Canvas,
        left: int,
        top: int,
        width: int,
        height: int,
        spacing: int | None,
        color: Color,
    ) -> None:
        if spacing is None:
            return
        for x in range(spacing, width, spacing):
            canvas.draw_line((left + x, top), (left + x, top + height - 1), color)
        for y in range(spacing, height, spacing):
            canvas.draw_line((left, top + y), (left + width - 1, top + y), color)

    def _draw_labels(self, canvas: Canvas, layout: _GridLayout, big_px: int | None) -> None:
        padding = layout.padding
        for index, title in enumerate(PANEL_TITLES):
            text_width, _ = canvas.text_size(title)
            x = layout.panel_x(index) + (layout.column_width - text_width) // 2
            canvas.draw_text(x, padding, title, LABEL_COLOR)

        if big_px is None:
            return

        ruler_top = layout.title_height
        for index in range(len(PANEL_TITLES)):
            left = layout.panel_x(index)
            for x in range(0, layout.panel_width, big_px):
                text = str(x)
                text_width, _ = canvas.text_size(text)
                if x + text_width > layout.column_width:
                    break
                canvas.draw_text(left + x, ruler_top, text, LABEL_COLOR)

        last_bottom = layout.header_height
        for y in range(0, layout.panel_height, big_px):
            text = str(y)
            text_width, text_height = canvas.text_size(text)
            text_top = min(layout.header_height + y, layout.height - text_height)
            if text_top < last_bottom:
                continue
            canvas.draw_text(layout.left_margin - padding - text_width, text_top, text, LABEL_COLOR)
            last_bottom = text_top + text_height

    # =========================================================================
    # Simple style
    # =========================================================================

    def _render_simple(self, actual: Image.Image, mask: np.ndarray) -> Image.Image:
        height, width = mask.shape
        canvas = Canvas(width, height, BACKGROUND)
        canvas.draw_image(self._panel(actual, width, height), (0, 0))

        overlay = np.zeros((height, width, 4), dtype=np.uint8)
        overlay[mask] = (HIGHLIGHT[0], HIGHLIGHT[1], HIGHLIGHT[2], 160)
        canvas.draw_image(Image.fromarray(overlay, "RGBA"), (0, 0))

        labeled, _ = ndimage.label(mask)
        for region in ndimage.find_objects(labeled):
            if region is None:
                continue
            rows, cols = region
            canvas.draw_outline((cols.start, rows.start, cols.stop, rows.stop), REGION_OUTLINE)

        return canvas.to_image()
