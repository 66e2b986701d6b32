"""Diff and visualize one before/after capture pair."""

from __future__ import annotations

import logging

from page_comparer.models.capture import CaptureResult, PairAnalysis

from .pixel_diff import DEFAULT_TOLERANCE, compare, decode_png
from .visualizer import (
    DEFAULT_MARGIN,
    DEFAULT_WHITENESS_THRESHOLD,
    create_compare_image,
    create_diff_image,
    create_shifted_diff_image,
)

logger = logging.getLogger(__name__)


def analyze_pair(
    before: CaptureResult,
    after: CaptureResult,
    tolerance: int = DEFAULT_TOLERANCE,
    margin: int = DEFAULT_MARGIN,
    whiteness_threshold: int = DEFAULT_WHITENESS_THRESHOLD,
) -> PairAnalysis:
    """Score the screenshots and render all three visualizations.

    CPU bound; callers on the event loop should run it in a worker thread.
    """
    before_img = decode_png(before.screenshot)
    after_img = decode_png(after.screenshot)
    logger.debug("Diffing %dx%d against %dx%d",
                 before_img.width, before_img.height, after_img.width, after_img.height)

    result = compare(before_img, after_img, tolerance)
    return PairAnalysis(
        diff=result,
        compare_image=create_compare_image(before_img, after_img, margin),
        diff_image=create_diff_image(before_img, after_img, tolerance),
        shifted_diff_image=create_shifted_diff_image(before_img, after_img, whiteness_threshold),
    )
