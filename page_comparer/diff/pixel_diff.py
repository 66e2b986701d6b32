"""Pixel difference engine — channel-tolerant comparison of two screenshots."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image

from page_comparer.models.capture import PixelDiffResult

DEFAULT_TOLERANCE = 10


def decode_png(data: bytes) -> Image.Image:
    """Decode screenshot bytes into an RGBA image."""
    with Image.open(io.BytesIO(data)) as img:
        return img.convert("RGBA")


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def to_rgba_array(image: Image.Image, width: int | None = None, height: int | None = None) -> np.ndarray:
    """Return the image (optionally cropped from the top-left) as an int16 HxWx4 array."""
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    if width is not None and height is not None and (width, height) != image.size:
        image = image.crop((0, 0, width, height))
    return np.asarray(image, dtype=np.int16)


def difference_mask(before: np.ndarray, after: np.ndarray, tolerance: int) -> np.ndarray:
    """Boolean HxW mask of pixels where any RGBA channel differs by more than tolerance."""
    return (np.abs(before - after) > tolerance).any(axis=2)


def compare(before: Image.Image, after: Image.Image, tolerance: int = DEFAULT_TOLERANCE) -> PixelDiffResult:
    """Count pixels that differ between two images.

    Only the overlapping top-left region (min width x min height) is scored;
    pixels outside it show up in the diff visualizations instead.
    """
    width = min(before.width, after.width)
    height = min(before.height, after.height)
    total = width * height
    if total == 0:
        return PixelDiffResult(different_pixels=0, total_pixels=0, difference_percentage=0.0)

    mask = difference_mask(
        to_rgba_array(before, width, height),
        to_rgba_array(after, width, height),
        tolerance,
    )
    different = int(np.count_nonzero(mask))
    return PixelDiffResult(
        different_pixels=different,
        total_pixels=total,
        difference_percentage=different / total * 100,
    )
