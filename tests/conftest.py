"""Pytest fixtures for goldenshot tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

ImageFactory = Callable[..., Image.Image]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test artifacts."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def solid_image() -> ImageFactory:
    """Factory for single-color RGBA images."""

    def factory(
        width: int = 16,
        height: int = 16,
        color: tuple[int, int, int, int] = (255, 255, 255, 255),
    ) -> Image.Image:
        return Image.new("RGBA", (width, height), color)

    return factory


@pytest.fixture
def noise_image() -> ImageFactory:
    """Factory for reproducible random RGBA images."""

    def factory(width: int = 16, height: int = 16, seed: int = 0) -> Image.Image:
        rng = np.random.default_rng(seed)
        data = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
        data[..., 3] = 255
        return Image.fromarray(data, "RGBA")

    return factory


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> Path:
    """Remove GOLDENSHOT_* variables and run from an empty directory."""
    for key in list(os.environ):
        if key.startswith("GOLDENSHOT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(temp_dir)
    return temp_dir
