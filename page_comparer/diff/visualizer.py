"""Diff visualizations: side-by-side, overlay highlight and shifted silhouette."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .pixel_diff import DEFAULT_TOLERANCE, difference_mask, encode_png, to_rgba_array

DEFAULT_MARGIN = 50
DEFAULT_WHITENESS_THRESHOLD = 240

TRANSPARENT = (0, 0, 0, 0)
WHITE = (255, 255, 255, 255)
HIGHLIGHT_COLOR = (255, 0, 255, 180)  # magenta
DELETED_COLOR = (255, 100, 100, 150)
ADDED_COLOR = (100, 255, 100, 150)
BEFORE_COLOR = (255, 0, 0, 255)
AFTER_COLOR = (0, 0, 255, 255)


def _max_size(before: Image.Image, after: Image.Image) -> tuple[int, int]:
    return max(before.width, after.width), max(before.height, after.height)


def _as_rgba(image: Image.Image) -> Image.Image:
    return image if image.mode == "RGBA" else image.convert("RGBA")


def render_compare_image(before: Image.Image, after: Image.Image, margin: int = DEFAULT_MARGIN) -> Image.Image:
    max_width, max_height = _max_size(before, after)
    canvas = Image.new("RGBA", (max_width * 2 + margin, max_height), TRANSPARENT)
    canvas.paste(_as_rgba(before), (0, 0))
    canvas.paste(_as_rgba(after), (max_width + margin, 0))
    return canvas


def render_diff_image(before: Image.Image, after: Image.Image, tolerance: int = DEFAULT_TOLERANCE) -> Image.Image:
    width, height = _max_size(before, after)
    overlap_w = min(before.width, after.width)
    overlap_h = min(before.height, after.height)

    # Anything outside ``before`` reads as added area, including the corner
    # neither image covers when one is wider and the other taller.
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = ADDED_COLOR
    canvas[:before.height, :before.width] = DELETED_COLOR

    if overlap_w and overlap_h:
        before_px = to_rgba_array(before, overlap_w, overlap_h)
        after_px = to_rgba_array(after, overlap_w, overlap_h)
        mask = difference_mask(before_px, after_px, tolerance)

        gray = (after_px[:, :, :3].sum(axis=2) // 3).astype(np.uint8)
        overlap = np.empty((overlap_h, overlap_w, 4), dtype=np.uint8)
        overlap[:, :, 0] = gray
        overlap[:, :, 1] = gray
        overlap[:, :, 2] = gray
        overlap[:, :, 3] = 255
        overlap[mask] = HIGHLIGHT_COLOR
        canvas[:overlap_h, :overlap_w] = overlap

    return Image.fromarray(canvas)


def _non_white(image: Image.Image, threshold: int) -> np.ndarray:
    rgb = to_rgba_array(image)[:, :, :3]
    return ~(rgb >= threshold).all(axis=2)


def render_shifted_diff_image(
    before: Image.Image, after: Image.Image, threshold: int = DEFAULT_WHITENESS_THRESHOLD,
) -> Image.Image:
    width, height = _max_size(before, after)
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = WHITE

    # Pass 2 overwrites pass 1, so content present in both shows the after color.
    if before.width and before.height:
        region = canvas[:before.height, :before.width]
        region[_non_white(before, threshold)] = BEFORE_COLOR
    if after.width and after.height:
        region = canvas[:after.height, :after.width]
        region[_non_white(after, threshold)] = AFTER_COLOR

    return Image.fromarray(canvas)


def create_compare_image(before: Image.Image, after: Image.Image, margin: int = DEFAULT_MARGIN) -> bytes:
    """Before and after side by side, separated by ``margin`` transparent pixels."""
    return encode_png(render_compare_image(before, after, margin))


def create_diff_image(before: Image.Image, after: Image.Image, tolerance: int = DEFAULT_TOLERANCE) -> bytes:
    """Grayscale overlay with changed pixels in magenta and size changes tinted."""
    return encode_png(render_diff_image(before, after, tolerance))


def create_shifted_diff_image(
    before: Image.Image, after: Image.Image, threshold: int = DEFAULT_WHITENESS_THRESHOLD,
) -> bytes:
    """Red/blue silhouettes of the non-white content of each image."""
    return encode_png(render_shifted_diff_image(before, after, threshold))
