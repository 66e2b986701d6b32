"""Shared URL and archive naming utilities."""

from __future__ import annotations


def build_route_url(origin: str, path: str) -> str:
    """Append a route path to an origin, keeping exactly one slash between them."""
    if not path:
        return origin
    if origin.endswith("/") and path.startswith("/"):
        return origin + path[1:]
    if not origin.endswith("/") and not path.startswith(("/", "?", "#")):
        return f"{origin}/{path}"
    return origin + path


def entry_key(folder: str, file_name: str) -> str:
    """Archive entry name for a file inside a route folder."""
    return f"{folder}/{file_name}"
