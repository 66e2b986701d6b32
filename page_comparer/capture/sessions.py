"""Browser session utilities — long-lived per-device, per-origin pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from playwright.async_api import Browser, BrowserContext, Page, Playwright

from page_comparer.models.config import ComparerConfig, DeviceProfile

logger = logging.getLogger(__name__)


async def launch_browser(playwright: Playwright, headless: bool = True) -> Browser:
    """Launch Chromium for rendering captures."""
    return await playwright.chromium.launch(headless=headless)


async def create_device_context(browser: Browser, profile: DeviceProfile) -> BrowserContext:
    """Create a browser context emulating a device profile."""
    return await browser.new_context(viewport=profile.viewport, user_agent=profile.user_agent)


@dataclass
class DeviceSessions:
    """The before/after page pair rendering one device profile."""
    profile: DeviceProfile
    before_page: Page
    after_page: Page
    contexts: list[BrowserContext] = field(default_factory=list)


@dataclass
class RenderSessions:
    """All render sessions for a run, reused across routes and retries.

    Retries re-navigate these same pages; nothing is reset in between, so
    cookies or DOM state left by a failed attempt can carry over.
    """
    devices: list[DeviceSessions] = field(default_factory=list)

    async def close(self) -> None:
        for session in self.devices:
            for context in session.contexts:
                try:
                    await context.close()
                except Exception as e:
                    logger.warning("Failed to close %s context: %s", session.profile.name, e)


async def open_sessions(browser: Browser, config: ComparerConfig) -> RenderSessions:
    """Open one context and page per (device, origin) slot."""
    sessions = RenderSessions()
    opened: list[BrowserContext] = []
    try:
        for profile in config.devices:
            before_context = await create_device_context(browser, profile)
            opened.append(before_context)
            after_context = await create_device_context(browser, profile)
            opened.append(after_context)
            session = DeviceSessions(
                profile=profile,
                before_page=await before_context.new_page(),
                after_page=await after_context.new_page(),
                contexts=[before_context, after_context],
            )
            sessions.devices.append(session)
            logger.debug("Opened %s sessions (%dx%d)",
                         profile.name, profile.width, profile.height)
    except Exception:
        for context in opened:
            await context.close()
        raise
    return sessions
