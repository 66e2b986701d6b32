"""Tests for pair analysis."""

import io

from PIL import Image

from page_comparer.diff.analysis import analyze_pair
from page_comparer.models.capture import CaptureResult


def _capture(png: bytes) -> CaptureResult:
    return CaptureResult(screenshot=png, aria_snapshot="", dom_snapshot="")


def _size(png: bytes) -> tuple[int, int]:
    return Image.open(io.BytesIO(png)).size


class TestAnalyzePair:
    def test_scores_and_renders(self, make_png):
        before = _capture(make_png((10, 20), (255, 255, 255, 255)))
        after = _capture(make_png((10, 10), (0, 0, 0, 255)))

        analysis = analyze_pair(before, after)

        assert analysis.diff.total_pixels == 100
        assert analysis.diff.different_pixels == 100
        assert analysis.diff.difference_percentage == 100.0
        assert _size(analysis.compare_image) == (70, 20)
        assert _size(analysis.diff_image) == (10, 20)
        assert _size(analysis.shifted_diff_image) == (10, 20)

    def test_custom_margin_and_tolerance(self, make_png):
        before = _capture(make_png((4, 4), (100, 100, 100, 255)))
        after = _capture(make_png((4, 4), (120, 100, 100, 255)))

        analysis = analyze_pair(before, after, tolerance=30, margin=2)

        assert analysis.diff.different_pixels == 0
        assert _size(analysis.compare_image) == (10, 4)
