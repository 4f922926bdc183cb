"""
Pixel comparison between a golden image and a newly captured image.

Images are compared on the union canvas of both sizes: the overlapping region
is compared pixel by pixel and any pixel that exists in only one image counts
as a difference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import imagehash
import numpy as np
import structlog
from PIL import Image

from goldenshot.errors import ComparisonInputError

logger = structlog.get_logger(__name__)

DEFAULT_MAX_DISTANCE = 0.007


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Aggregate outcome of comparing two images."""

    pixel_differences: int
    pixel_count: int
    width: int
    height: int
    method: str = "simple"

    @property
    def ratio(self) -> float:
        """Fraction of compared units that differ, in [0, 1]."""
        if self.pixel_count <= 0:
            return 0.0
        return self.pixel_differences / self.pixel_count

    @property
    def matching(self) -> bool:
        return self.pixel_differences == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "pixel_differences": self.pixel_differences,
            "pixel_count": self.pixel_count,
            "width": self.width,
            "height": self.height,
            "ratio": self.ratio,
            "method": self.method,
        }


@runtime_checkable
class ImageComparator(Protocol):
    """Anything that can compare two images and report a ratio-based result."""

    def compare(self, golden: Image.Image, actual: Image.Image) -> ComparisonResult: ...


def ensure_raster(image: Image.Image, name: str = "image") -> None:
    """Reject objects that are not PIL images or have no pixels."""
    if not isinstance(image, Image.Image):
        raise ComparisonInputError(f"{name} must be a PIL image, got {type(image).__name__}")
    width, height = image.size
    if width <= 0 or height <= 0:
        raise ComparisonInputError(f"{name} is zero-sized ({width}x{height})")


def to_rgba_array(image: Image.Image) -> np.ndarray:
    """Return an (h, w, 4) float array with channels normalized to [0, 1]."""
    return np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0


def union_size(golden: Image.Image, actual: Image.Image) -> tuple[int, int]:
    return max(golden.width, actual.width), max(golden.height, actual.height)


def _pad(arr: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Place arr in the top-left corner of a (height, width) canvas."""
    h, w = arr.shape[:2]
    padded = np.zeros((height, width, arr.shape[2]), dtype=arr.dtype)
    padded[:h, :w] = arr
    valid = np.zeros((height, width), dtype=bool)
    valid[:h, :w] = True
    return padded, valid


def _shift(
    arr: np.ndarray, valid: np.ndarray, dx: int, dy: int
) -> tuple[np.ndarray, np.ndarray]:
    """Return arrays where out[y, x] == arr[y + dy, x + dx]."""
    h, w = valid.shape
    out = np.zeros_like(arr)
    out_valid = np.zeros_like(valid)
    dst_y = slice(max(0, -dy), min(h, h - dy))
    src_y = slice(max(0, dy), min(h, h + dy))
    dst_x = slice(max(0, -dx), min(w, w - dx))
    src_x = slice(max(0, dx), min(w, w + dx))
    out[dst_y, dst_x] = arr[src_y, src_x]
    out_valid[dst_y, dst_x] = valid[src_y, src_x]
    return out, out_valid


def difference_mask(
    golden: Image.Image,
    actual: Image.Image,
    max_distance: float = DEFAULT_MAX_DISTANCE,
    h_shift: int = 0,
    v_shift: int = 0,
) -> np.ndarray:
    """
    Compute a boolean mask of differing pixels over the union canvas.

    The distance between two pixels is the RMS of their per-channel RGBA
    differences, so it lies in [0, 1]. A golden pixel matches when some actual
    pixel within (h_shift, v_shift) of it is at most max_distance away.

    Raises:
        ComparisonInputError: If either image is not a raster or has no pixels.
    """
    ensure_raster(golden, "golden")
    ensure_raster(actual, "actual")

    width, height = union_size(golden, actual)
    golden_arr, golden_valid = _pad(to_rgba_array(golden), width, height)
    actual_arr, actual_valid = _pad(to_rgba_array(actual), width, height)

    matched = np.zeros((height, width), dtype=bool)
    for dy in range(-v_shift, v_shift + 1):
        for dx in range(-h_shift, h_shift + 1):
            shifted, shifted_valid = _shift(actual_arr, actual_valid, dx, dy)
            distance = np.sqrt(np.mean((golden_arr - shifted) ** 2, axis=2))
            matched |= (distance <= max_distance) & shifted_valid

    return ~(matched & golden_valid)


class SimpleImageComparator:
    """
    Per-pixel distance comparator.

    A pixel is different when its normalized RGBA distance to the
    corresponding pixel exceeds max_distance.
    """

    def __init__(
        self,
        max_distance: float = DEFAULT_MAX_DISTANCE,
        h_shift: int = 0,
        v_shift: int = 0,
    ) -> None:
        if not 0.0 <= max_distance <= 1.0:
            raise ValueError("max_distance must be between 0 and 1")
        if h_shift < 0 or v_shift < 0:
            raise ValueError("h_shift and v_shift must be non-negative")
        self.max_distance = max_distance
        self.h_shift = h_shift
        self.v_shift = v_shift
        self._log = logger.bind(component="simple_image_comparator")

    def __repr__(self) -> str:
        return (
            f"SimpleImageComparator(max_distance={self.max_distance}, "
            f"h_shift={self.h_shift}, v_shift={self.v_shift})"
        )

    def difference_mask(self, golden: Image.Image, actual: Image.Image) -> np.ndarray:
        return difference_mask(
            golden, actual, self.max_distance, self.h_shift, self.v_shift
        )

    def compare(self, golden: Image.Image, actual: Image.Image) -> ComparisonResult:
        mask = self.difference_mask(golden, actual)
        height, width = mask.shape

        if golden.size != actual.size:
            self._log.warning(
                "Image size mismatch",
                golden=golden.size,
                actual=actual.size,
            )

        result = ComparisonResult(
            pixel_differences=int(np.count_nonzero(mask)),
            pixel_count=width * height,
            width=width,
            height=height,
            method="simple",
        )
        self._log.debug(
            "Pixel comparison complete",
            differences=result.pixel_differences,
            total=result.pixel_count,
        )
        return result


class PerceptualHashComparator:
    """Layout-agnostic comparator based on the hamming distance of perceptual hashes."""

    def __init__(self, hash_size: int = 8) -> None:
        if hash_size < 2:
            raise ValueError("hash_size must be at least 2")
        self.hash_size = hash_size

    def __repr__(self) -> str:
        return f"PerceptualHashComparator(hash_size={self.hash_size})"

    def compare(self, golden: Image.Image, actual: Image.Image) -> ComparisonResult:
        ensure_raster(golden, "golden")
        ensure_raster(actual, "actual")

        golden_hash = imagehash.phash(golden.convert("RGB"), hash_size=self.hash_size)
        actual_hash = imagehash.phash(actual.convert("RGB"), hash_size=self.hash_size)
        width, height = union_size(golden, actual)

        return ComparisonResult(
            pixel_differences=int(golden_hash - actual_hash),
            pixel_count=self.hash_size * self.hash_size,
            width=width,
            height=height,
            method="perceptual_hash",
        )
