"""Per-build render state shared by every shortcode on a page.

A page that embeds the same shortcode several times must carry its
behavior/style block only once, and every carousel on it needs a distinct
DOM id. Both facts live on a RenderSession that the caller creates for one
page build and passes to each shortcode invocation.

Shortcodes called without a session share DEFAULT_SESSION, so direct calls
from one process still inject once and never reuse a carousel id.
"""
from __future__ import annotations

from collections import defaultdict


class RenderSession:
    """One-time asset injection and id counters for a single page build."""

    def __init__(self) -> None:
        self._injected: set[str] = set()
        self._counters: dict[str, int] = defaultdict(int)

    def claim(self, asset: str) -> bool:
        """True the first time ``asset`` is claimed, False afterwards."""
        if asset in self._injected:
            return False
        self._injected.add(asset)
        return True

    def is_injected(self, asset: str) -> bool:
        return asset in self._injected

    def next_id(self, prefix: str) -> str:
        """Sequential ids per prefix: ``prefix-1``, ``prefix-2``, ..."""
        self._counters[prefix] += 1
        return f"{prefix}-{self._counters[prefix]}"


DEFAULT_SESSION = RenderSession()


def default_session() -> RenderSession:
    return DEFAULT_SESSION


def reset_default_session() -> RenderSession:
    """Start a fresh process-wide session (e.g. before building the next page)."""
    global DEFAULT_SESSION
    DEFAULT_SESSION = RenderSession()
    return DEFAULT_SESSION
