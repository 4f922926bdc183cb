"""Minimal drawing surface used to compose compare images."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

Color = tuple[int, int, int, int]


class Canvas:
    """RGBA drawing surface with rectangle, line and multi-line text primitives."""

    def __init__(
        self,
        width: int,
        height: int,
        background: Color = (0, 0, 0, 0),
        font: ImageFont.ImageFont | ImageFont.FreeTypeFont | None = None,
    ) -> None:
        self._image = Image.new("RGBA", (width, height), background)
        self._draw = ImageDraw.Draw(self._image, "RGBA")
        self._font = font or ImageFont.load_default()

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def draw_rect(self, box: tuple[int, int, int, int], color: Color) -> None:
        """Fill the rectangle (left, top, right, bottom); right and bottom are exclusive."""
        left, top, right, bottom = box
        if right <= left or bottom <= top:
            return
        self._draw.rectangle((left, top, right - 1, bottom - 1), fill=color)

    def draw_outline(self, box: tuple[int, int, int, int], color: Color, width: int = 1) -> None:
        left, top, right, bottom = box
        if right <= left or bottom <= top:
            return
        self._draw.rectangle((left, top, right - 1, bottom - 1), outline=color, width=width)

    def draw_line(
        self,
        start: tuple[int, int],
        end: tuple[int, int],
        color: Color,
        width: int = 1,
    ) -> None:
        self._draw.line((start, end), fill=color, width=width)

    def draw_image(self, image: Image.Image, position: tuple[int, int]) -> None:
        self._image.alpha_composite(image.convert("RGBA"), dest=position)

    def text_size(self, text: str) -> tuple[int, int]:
        """Measure text as (width of the longest line, line height * line count)."""
        lines = text.split("\n")
        width = 0
        for line in lines:
            width = max(width, int(self._draw.textlength(line, font=self._font) + 0.5))
        return width, self._line_height() * len(lines)

    def draw_text(self, x: int, y: int, text: str, color: Color) -> None:
        line_height = self._line_height()
        for i, line in enumerate(text.split("\n")):
            self._draw.text((x, y + i * line_height), line, fill=color, font=self._font)

    def get_pixel(self, x: int, y: int) -> Color:
        return self._image.getpixel((x, y))  # type: ignore[return-value]

    def to_image(self) -> Image.Image:
        return self._image.copy()

    def save(self, path: str | Path) -> None:
        self._image.save(path, "PNG")

    def _line_height(self) -> int:
        _, top, _, bottom = self._draw.textbbox((0, 0), "Ag", font=self._font)
        return max(1, bottom - min(top, 0))
