"""Colour & symbol helpers for terminal output.

- Disabled automatically when stdout is not a TTY unless FORCE_COLOR=1.
- NO_COLOR disables colour completely.
"""
from __future__ import annotations

import os
import re
import sys

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR


def _code(part: str) -> str:
    return f"\033[{part}m"


RESET = _code("0")
RED = _code("31")
GREEN = _code("32")
YELLOW = _code("33")
BLUE = _code("34")
CYAN = _code("36")
WHITE = _code("37")
GRAY = _code("90")

PRIORITY_COLOR = {
    "high": RED,
    "medium": YELLOW,
    "low": GREEN,
}

STATUS_COLOR = {
    "completed": GREEN,
    "pending": YELLOW,
}

CHECK = "✓"
PENDING = "◻"
BAR_FULL = "█"
BAR_EMPTY = "░"
STATS = "📊"
WARNING = "⚠️ "
PARTY = "🎉"


def color(text: str, *styles: str, enabled: bool | None = None) -> str:
    """Wrap text in ANSI styles (no-op when colour is disabled)."""
    if enabled is None:
        enabled = _ENABLE
    if not enabled or not styles:
        return text
    return "".join(styles) + text + RESET


def highlight(text: str, keyword: str, *styles: str) -> str:
    """Colour every case-insensitive occurrence of keyword inside text."""
    if not keyword:
        return text
    pattern = re.compile(re.escape(keyword), re.IGNORECASE)
    return pattern.sub(lambda m: color(m.group(0), *styles), text)


def progress_bar(done: int, total: int, width: int = 25) -> str:
    """Fixed-width completion bar; empty string when there is nothing to show."""
    if total <= 0:
        return ""
    filled = (done * width * 2 + total) // (total * 2)
    return color(BAR_FULL * filled, GREEN) + color(BAR_EMPTY * (width - filled), GRAY)


__all__ = [
    "color", "highlight", "progress_bar", "PRIORITY_COLOR", "STATUS_COLOR",
    "RESET", "RED", "GREEN", "YELLOW", "BLUE", "CYAN", "WHITE", "GRAY",
    "CHECK", "PENDING", "STATS", "WARNING", "PARTY",
]
