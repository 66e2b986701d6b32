"""Exception types raised by the comparison pipeline."""

from __future__ import annotations


class ComparerError(Exception):
    """Base class for page comparer failures."""


class CaptureFailure(ComparerError):
    """Navigation, hook or snapshot failure while capturing one page."""

    def __init__(self, url: str, device: str, message: str):
        super().__init__(f"Capture of {url} ({device}) failed: {message}")
        self.url = url
        self.device = device


class WriteFailure(ComparerError):
    """The archive rejected a write. Never retried."""


class RouteAborted(ComparerError):
    """A route used up its retry budget; the run stops here."""

    def __init__(self, route_name: str, attempts: int, reason: str | None):
        super().__init__(
            f"Route '{route_name}' failed after {attempts} attempt(s): {reason}"
        )
        self.route_name = route_name
        self.attempts = attempts
        self.reason = reason
