"""Tests for the capture collector."""

from unittest.mock import AsyncMock, Mock

import pytest

from page_comparer.capture.collector import CaptureCollector
from page_comparer.errors import CaptureFailure
from page_comparer.models.route import RouteDefinition


def _recording_page(page, calls: list[str]):
    """Make a mock page record the order of the calls made on it."""
    page.goto = AsyncMock(side_effect=lambda url, **kw: calls.append(f"goto {url}"))
    page.wait_for_load_state = AsyncMock(side_effect=lambda state, **kw: calls.append(f"wait {state}"))
    original_screenshot = page.screenshot.return_value
    page.screenshot = AsyncMock(
        side_effect=lambda **kw: calls.append("screenshot") or original_screenshot
    )
    return page


def _hook(calls: list[str], label: str):
    async def _run(page):
        calls.append(label)
    return _run


@pytest.mark.asyncio
class TestCapture:
    """Tests for CaptureCollector.capture."""

    async def test_returns_capture_result(self, mock_page, home_route):
        result = await CaptureCollector().capture(mock_page, "https://a.test", home_route)

        mock_page.goto.assert_called_once_with("https://a.test/home")
        mock_page.wait_for_load_state.assert_called_once_with("networkidle")
        mock_page.screenshot.assert_called_once_with(full_page=True)
        mock_page.locator.assert_called_once_with("html")
        assert result.screenshot.startswith(b"\x89PNG")
        assert result.aria_snapshot == "- document"
        assert result.dom_snapshot == "<html></html>"

    async def test_hook_order(self, make_png, make_mock_page):
        calls: list[str] = []
        page = _recording_page(make_mock_page(screenshot=make_png((3, 3))), calls)
        route = RouteDefinition(
            name="Login", path="/login",
            pre_load=_hook(calls, "pre_load"),
            after_load=_hook(calls, "after_load"),
            cleanup=_hook(calls, "cleanup"),
        )

        await CaptureCollector().capture(page, "https://a.test", route)

        assert calls == [
            "goto https://a.test/login",
            "wait networkidle",
            "pre_load",
            "goto https://a.test/login",
            "wait networkidle",
            "after_load",
            "screenshot",
            "cleanup",
        ]

    async def test_without_pre_load_navigates_once(self, mock_page):
        route = RouteDefinition(name="Home", path="/", after_load=AsyncMock())
        await CaptureCollector().capture(mock_page, "https://a.test", route)
        assert mock_page.goto.call_count == 1
        route.after_load.assert_called_once_with(mock_page)

    async def test_hooks_receive_page(self, mock_page):
        pre_load = AsyncMock()
        cleanup = AsyncMock()
        route = RouteDefinition(name="Home", path="/", pre_load=pre_load, cleanup=cleanup)
        await CaptureCollector().capture(mock_page, "https://a.test", route)
        pre_load.assert_called_once_with(mock_page)
        cleanup.assert_called_once_with(mock_page)

    async def test_custom_root_selector(self, mock_page, home_route):
        await CaptureCollector(root_selector="main").capture(mock_page, "https://a.test", home_route)
        mock_page.locator.assert_called_once_with("main")

    async def test_navigation_failure_raises_capture_failure(self, mock_page, home_route):
        mock_page.goto = AsyncMock(side_effect=TimeoutError("Timeout 30000ms exceeded"))

        with pytest.raises(CaptureFailure, match="Timeout") as exc_info:
            await CaptureCollector(device="mobile").capture(mock_page, "https://a.test", home_route)

        assert exc_info.value.url == "https://a.test/home"
        assert exc_info.value.device == "mobile"
        assert isinstance(exc_info.value.__cause__, TimeoutError)

    async def test_hook_failure_raises_capture_failure(self, mock_page):
        route = RouteDefinition(
            name="Home", path="/",
            after_load=AsyncMock(side_effect=RuntimeError("element not found")),
        )
        with pytest.raises(CaptureFailure, match="element not found"):
            await CaptureCollector().capture(mock_page, "https://a.test", route)
        mock_page.screenshot.assert_not_called()

    async def test_snapshot_failure_skips_cleanup(self, mock_page):
        cleanup = AsyncMock()
        route = RouteDefinition(name="Home", path="/", cleanup=cleanup)
        mock_page.locator = Mock(return_value=Mock(
            aria_snapshot=AsyncMock(side_effect=RuntimeError("detached"))
        ))
        with pytest.raises(CaptureFailure):
            await CaptureCollector().capture(mock_page, "https://a.test", route)
        cleanup.assert_not_called()
