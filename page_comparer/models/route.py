"""Route definitions and the declarative actions their hooks can replay."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

from playwright.async_api import Page
from pydantic import BaseModel, ConfigDict

PageHook = Callable[[Page], Awaitable[None]]


class Action(BaseModel):
    action_type: str  # navigate, click, fill, select, hover, scroll, wait, keyboard, evaluate
    selector: Optional[str] = None
    value: Optional[str] = None
    description: str = ""


class RouteDefinition(BaseModel):
    """A page to compare, identified by name.

    Hooks are async callables taking the Playwright page. Each one runs at
    most once per capture.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    path: str
    pre_load: Optional[PageHook] = None
    after_load: Optional[PageHook] = None
    cleanup: Optional[PageHook] = None
