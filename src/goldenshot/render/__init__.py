"""
Compare image rendering.

Provides the grid and simple comparison styles, the drawing canvas and the
renderer that composes them.
"""

from goldenshot.render.canvas import Canvas
from goldenshot.render.diff_renderer import DiffRenderer
from goldenshot.render.styles import ComparisonStyle, GridStyle, SimpleStyle

__all__ = [
    "Canvas",
    "ComparisonStyle",
    "DiffRenderer",
    "GridStyle",
    "SimpleStyle",
]
