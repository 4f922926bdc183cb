"""Tests for the compare image renderer."""

from __future__ import annotations

import pytest
from PIL import Image

from goldenshot.errors import ComparisonInputError, InvalidImageError
from goldenshot.render.canvas import Canvas
from goldenshot.render.diff_renderer import HIGHLIGHT, PANEL_TITLES, DiffRenderer
from goldenshot.render.styles import GridStyle, SimpleStyle

BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)
WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


@pytest.fixture
def pair(solid_image) -> tuple[Image.Image, Image.Image]:
    golden = solid_image(10, 10, BLUE)
    actual = golden.copy()
    actual.putpixel((1, 1), GREEN)
    return golden, actual


class TestGridStyle:
    """Tests for the grid layout."""

    def test_unlabeled_layout_size(self, pair) -> None:
        golden, actual = pair
        renderer = DiffRenderer(panel_spacing=8)

        image = renderer.render(golden, actual, GridStyle(has_label=False))

        assert image.size == (10 * 3 + 8 * 2, 10)

    def test_panels_show_reference_diff_and_new(self, pair) -> None:
        golden, actual = pair
        image = DiffRenderer(panel_spacing=8).render(golden, actual, GridStyle(has_label=False))

        assert image.getpixel((1, 1)) == BLUE
        assert image.getpixel((18 + 1, 1)) == HIGHLIGHT
        assert image.getpixel((36 + 1, 1)) == GREEN

    def test_unchanged_pixels_are_not_highlighted(self, pair) -> None:
        golden, actual = pair
        image = DiffRenderer(panel_spacing=8).render(golden, actual, GridStyle(has_label=False))

        assert image.getpixel((18 + 2, 2)) != HIGHLIGHT

    def test_gridlines_drawn_at_spacing(self, solid_image) -> None:
        golden = solid_image(10, 10, WHITE)
        style = GridStyle(big_line_space_dp=None, small_line_space_dp=4, has_label=False)

        image = DiffRenderer().render(golden, golden.copy(), style)

        assert image.getpixel((4, 1)) != WHITE
        assert image.getpixel((1, 4)) != WHITE
        assert image.getpixel((1, 1)) == WHITE

    def test_no_gridlines_when_disabled(self, solid_image) -> None:
        golden = solid_image(10, 10, WHITE)
        style = GridStyle(big_line_space_dp=None, small_line_space_dp=None, has_label=False)

        image = DiffRenderer().render(golden, golden.copy(), style)

        assert image.getpixel((4, 4)) == WHITE

    def test_labels_add_header_and_fit_titles(self, pair) -> None:
        golden, actual = pair
        image = DiffRenderer().render(golden, actual, GridStyle())

        canvas = Canvas(1, 1)
        title_widths = [canvas.text_size(title)[0] for title in PANEL_TITLES]

        assert image.height > 10
        assert image.width >= sum(title_widths)

    def test_size_mismatch_uses_union_panels(self, solid_image) -> None:
        golden = solid_image(10, 6, BLUE)
        actual = solid_image(6, 10, BLUE)

        image = DiffRenderer(panel_spacing=0).render(golden, actual, GridStyle(has_label=False))

        assert image.size == (30, 10)
        # bottom-left of the diff panel exists only in the actual image
        assert image.getpixel((10 + 1, 9)) == HIGHLIGHT

    def test_density_scales_line_spacing(self) -> None:
        renderer = DiffRenderer(density=2.0)
        assert renderer.dp_to_px(16) == 32
        assert renderer.dp_to_px(None) is None

    def test_invalid_line_spacing(self) -> None:
        with pytest.raises(ValueError, match="big_line_space_dp"):
            GridStyle(big_line_space_dp=0)


class TestSimpleStyle:
    """Tests for the simple overlay."""

    def test_highlights_only_changed_region(self, solid_image) -> None:
        golden = solid_image(10, 10, WHITE)
        actual = golden.copy()
        actual.putpixel((5, 5), BLACK)

        image = DiffRenderer().render(golden, actual, SimpleStyle())

        assert image.size == (10, 10)
        assert image.getpixel((5, 5)) == HIGHLIGHT
        assert image.getpixel((0, 0)) == WHITE
        assert image.getpixel((8, 2)) == WHITE

    def test_shift_tolerance_matches_comparator(self, solid_image) -> None:
        golden = solid_image(10, 10, WHITE)
        actual = solid_image(10, 10, WHITE)
        for y in range(10):
            golden.putpixel((3, y), BLACK)
            actual.putpixel((4, y), BLACK)

        strict = DiffRenderer().render(golden, actual, SimpleStyle())
        shifted = DiffRenderer(h_shift=1).render(golden, actual, SimpleStyle())

        assert strict.getpixel((4, 0)) == HIGHLIGHT
        assert shifted.getpixel((4, 0)) == BLACK


class TestRendererInputs:
    """Tests for input handling."""

    def test_inputs_are_not_modified(self, pair) -> None:
        golden, actual = pair
        golden_bytes, actual_bytes = golden.tobytes(), actual.tobytes()

        DiffRenderer().render(golden, actual, GridStyle())
        DiffRenderer().render(golden, actual, SimpleStyle())

        assert golden.tobytes() == golden_bytes
        assert actual.tobytes() == actual_bytes

    def test_missing_golden_renders_empty_reference(self, solid_image) -> None:
        actual = solid_image(10, 10, GREEN)
        image = DiffRenderer(panel_spacing=8).render(None, actual, GridStyle(has_label=False))

        assert image.size == (46, 10)
        assert image.getpixel((1, 1)) == WHITE
        assert image.getpixel((18 + 1, 1)) == HIGHLIGHT

    def test_default_style_is_grid(self, pair) -> None:
        golden, actual = pair
        image = DiffRenderer().render(golden, actual)
        assert image.width > 30

    @pytest.mark.parametrize("style", [GridStyle(), SimpleStyle()])
    def test_zero_sized_image_raises(self, solid_image, style) -> None:
        with pytest.raises(InvalidImageError):
            DiffRenderer().render(Image.new("RGBA", (0, 0)), solid_image(), style)
        with pytest.raises(ComparisonInputError):
            DiffRenderer().render(solid_image(), Image.new("RGBA", (0, 0)), style)

    def test_invalid_density(self) -> None:
        with pytest.raises(ValueError, match="density"):
            DiffRenderer(density=0)


class TestCanvas:
    """Tests for the drawing canvas."""

    def test_draw_rect_exclusive_bounds(self) -> None:
        canvas = Canvas(6, 6, WHITE)
        canvas.draw_rect((1, 1, 3, 3), BLACK)

        assert canvas.get_pixel(1, 1) == BLACK
        assert canvas.get_pixel(2, 2) == BLACK
        assert canvas.get_pixel(3, 3) == WHITE

    def test_multiline_text_size(self) -> None:
        canvas = Canvas(1, 1)
        single_width, single_height = canvas.text_size("Reference")
        multi_width, multi_height = canvas.text_size("Ref\nReference")

        assert multi_width == single_width
        assert multi_height == single_height * 2

    def test_draw_text_changes_pixels(self) -> None:
        canvas = Canvas(60, 20, WHITE)
        canvas.draw_text(2, 2, "New", BLACK)

        image = canvas.to_image()
        assert any(p != WHITE for p in image.getdata())
