"""Pytest configuration and shared fixtures."""

import io
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
from PIL import Image

from page_comparer.models.capture import CaptureResult
from page_comparer.models.config import ComparerConfig, DeviceProfile, RouteConfig
from page_comparer.models.route import RouteDefinition


def _image(size=(4, 4), color=(255, 255, 255, 255)) -> Image.Image:
    """Create a solid RGBA image."""
    return Image.new("RGBA", size, color)


def _png(size=(4, 4), color=(255, 255, 255, 255)) -> bytes:
    buffer = io.BytesIO()
    _image(size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _mock_page(screenshot: bytes | None = None, aria: str = "- document", dom: str = "<html></html>"):
    """Create an AsyncMock Playwright page with a sync ``locator()``."""
    page = AsyncMock()
    page.url = "about:blank"
    page.screenshot = AsyncMock(return_value=screenshot or _png())
    locator = Mock()
    locator.aria_snapshot = AsyncMock(return_value=aria)
    locator.scroll_into_view_if_needed = AsyncMock()
    page.locator = Mock(return_value=locator)
    page.content = AsyncMock(return_value=dom)
    page.keyboard = Mock()
    page.keyboard.press = AsyncMock()
    return page


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest.fixture
def make_image():
    """Factory for solid RGBA Pillow images."""
    return _image


@pytest.fixture
def make_png():
    """Factory for solid RGBA PNG bytes."""
    return _png


@pytest.fixture
def make_mock_page():
    """Factory for mock Playwright pages."""
    return _mock_page


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def desktop_profile() -> DeviceProfile:
    return DeviceProfile()


@pytest.fixture
def comparer_config(tmp_path: Path) -> ComparerConfig:
    """Create a test comparer configuration with desktop and mobile devices."""
    return ComparerConfig(
        before_url="https://a.test",
        after_url="https://b.test",
        routes=[RouteConfig(name="Home", path="/home")],
        output_dir=str(tmp_path / "out"),
    )


@pytest.fixture
def desktop_only_config(tmp_path: Path) -> ComparerConfig:
    return ComparerConfig(
        before_url="https://a.test",
        after_url="https://b.test",
        routes=[RouteConfig(name="Home", path="/home")],
        devices=[DeviceProfile()],
        output_dir=str(tmp_path / "out"),
    )


@pytest.fixture
def temp_config_file(comparer_config: ComparerConfig, tmp_path: Path) -> Path:
    config_file = tmp_path / "compare-config.json"
    comparer_config.save(config_file)
    return config_file


# ============================================================================
# Route and Capture Fixtures
# ============================================================================


@pytest.fixture
def home_route() -> RouteDefinition:
    return RouteDefinition(name="Home", path="/home")


@pytest.fixture
def mock_page():
    return _mock_page()


@pytest.fixture
def capture_result() -> CaptureResult:
    return CaptureResult(
        screenshot=_png((10, 10), (0, 0, 0, 255)),
        aria_snapshot="- heading \"Home\" [level=1]",
        dom_snapshot="<html><body><h1>Home</h1></body></html>",
    )
