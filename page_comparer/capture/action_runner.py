"""Action runner — translates configured hook actions to Playwright calls."""

from __future__ import annotations

import logging

from playwright.async_api import Page

from page_comparer.models.route import Action, PageHook

logger = logging.getLogger(__name__)


async def run_action(page: Page, action: Action, timeout: int = 10000) -> None:
    """Execute a single action on the Playwright page.

    Args:
        page: Playwright page instance.
        action: The action to execute.
        timeout: Selector timeout in milliseconds (default 10000).
    """

    logger.debug("Running action: %s | selector=%s | value=%s | %s",
                 action.action_type, action.selector, action.value,
                 action.description or "")

    match action.action_type:
        case "navigate":
            url = action.value or action.selector or ""
            logger.debug("Navigating to %s...", url)
            await page.goto(url, timeout=timeout)

        case "click":
            if not action.selector:
                raise ValueError("click action requires a selector")
            logger.debug("Clicking: %s", action.selector)
            await page.click(action.selector, timeout=timeout)

        case "fill":
            if not action.selector:
                raise ValueError("fill action requires a selector")
            logger.debug("Filling %s with '%s'", action.selector,
                         "***" if "password" in action.selector.lower() else action.value)
            await page.fill(action.selector, action.value or "", timeout=timeout)

        case "select":
            if not action.selector:
                raise ValueError("select action requires a selector")
            logger.debug("Selecting '%s' in %s", action.value, action.selector)
            await page.select_option(action.selector, action.value or "", timeout=timeout)

        case "hover":
            if not action.selector:
                raise ValueError("hover action requires a selector")
            logger.debug("Hovering over: %s", action.selector)
            await page.hover(action.selector, timeout=timeout)

        case "scroll":
            if action.value:
                logger.debug("Scrolling to y=%s", action.value)
                await page.evaluate("y => window.scrollTo(0, y)", int(action.value))
            elif action.selector:
                logger.debug("Scrolling element into view: %s", action.selector)
                await page.locator(action.selector).scroll_into_view_if_needed(timeout=timeout)
            else:
                logger.debug("Scrolling to bottom of page")
                await page.evaluate("window.scrollTo(0, document.body.scrollHeight)")

        case "wait":
            if action.selector:
                logger.debug("Waiting for selector: %s", action.selector)
                await page.wait_for_selector(action.selector, timeout=timeout)
            elif action.value:
                logger.debug("Waiting %sms...", action.value)
                await page.wait_for_timeout(int(action.value))
            else:
                logger.debug("Waiting 1000ms...")
                await page.wait_for_timeout(1000)

        case "keyboard":
            key = action.value or "Enter"
            logger.debug("Pressing key: %s", key)
            await page.keyboard.press(key)

        case "evaluate":
            if not action.value:
                raise ValueError("evaluate action requires a script value")
            logger.debug("Evaluating script (%d chars)", len(action.value))
            await page.evaluate(action.value)

        case _:
            logger.warning("Unknown action type: %s", action.action_type)


def action_hook(actions: list[Action], timeout: int = 10000) -> PageHook:
    """Wrap a list of actions into a route hook that runs them in order."""
    steps = list(actions)

    async def _hook(page: Page) -> None:
        for action in steps:
            await run_action(page, action, timeout=timeout)

    return _hook
