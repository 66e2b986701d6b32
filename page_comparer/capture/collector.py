"""Capture collector — renders one route on one page and snapshots it."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from page_comparer.errors import CaptureFailure
from page_comparer.models.capture import CaptureResult
from page_comparer.models.route import RouteDefinition
from page_comparer.url_utils import build_route_url

logger = logging.getLogger(__name__)


class CaptureCollector:
    """Collects the screenshot, accessibility tree and DOM for a route."""

    def __init__(self, device: str = "desktop", root_selector: str = "html"):
        self.device = device
        self.root_selector = root_selector

    async def capture(self, page: Page, origin: str, route: RouteDefinition) -> CaptureResult:
        """Navigate to ``origin + route.path`` and capture the rendered page.

        A ``pre_load`` hook runs once the first load settles, after which the
        page is loaded again so the capture reflects the post-setup state.
        Any failure is raised as :class:`CaptureFailure`.
        """
        url = build_route_url(origin, route.path)
        try:
            logger.debug("[%s] Navigating to %s", self.device, url)
            await page.goto(url)
            if route.pre_load is not None:
                await page.wait_for_load_state("networkidle")
                logger.debug("[%s] Running pre-load hook for %s", self.device, route.name)
                await route.pre_load(page)
                await page.goto(url)
            await page.wait_for_load_state("networkidle")
            if route.after_load is not None:
                logger.debug("[%s] Running after-load hook for %s", self.device, route.name)
                await route.after_load(page)

            screenshot = await page.screenshot(full_page=True)
            aria_snapshot = await page.locator(self.root_selector).aria_snapshot()
            dom_snapshot = await page.content()

            if route.cleanup is not None:
                logger.debug("[%s] Running cleanup hook for %s", self.device, route.name)
                await route.cleanup(page)
        except Exception as e:
            raise CaptureFailure(url, self.device, str(e)) from e

        logger.debug("[%s] Captured %s (%d bytes)", self.device, url, len(screenshot))
        return CaptureResult(
            screenshot=screenshot,
            aria_snapshot=aria_snapshot,
            dom_snapshot=dom_snapshot,
        )
