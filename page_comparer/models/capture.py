"""Capture, diff and metadata data structures."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class CaptureResult(BaseModel):
    screenshot: bytes  # full-page PNG
    aria_snapshot: str
    dom_snapshot: str


class PixelDiffResult(BaseModel):
    different_pixels: int = 0
    total_pixels: int = 0
    difference_percentage: float = 0.0  # 0-100


class PairAnalysis(BaseModel):
    """Diff score plus the three rendered visualizations for one device pair."""
    diff: PixelDiffResult
    compare_image: bytes
    diff_image: bytes
    shifted_diff_image: bytes


class ViewportSizeInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    width: int
    height: int


class ScreenshotMetadata(BaseModel):
    """Per-device metadata.json record, serialized with PascalCase keys."""
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    page_name: str
    before_url: str
    after_url: str
    # "Typestamp" is the key existing consumers of metadata.json read.
    timestamp: str = Field(alias="Typestamp")  # ISO timestamp, UTC
    device_type: str
    viewport: ViewportSizeInfo
    user_agent: str
    difference_percentage: int  # rounded for reporting
    total_pixels: int
    different_pixels: int
