"""Utility functions for formatting Discord messages."""

from __future__ import annotations

import math
from functools import cache

PROGRESS_BAR_WIDTH = 12


@cache
def format_duration(seconds: int | float | None) -> str:
    if seconds is None:
        return "–"

    total_seconds = int(seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    secs = total_seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_timestamp(value: str) -> int | None:
    """Parse a timestamp string into total seconds.

    Accepts formats like "90", "1:30", or "1:30:00".
    Returns None if the input is invalid.
    """
    value = value.strip()
    if not value:
        return None

    parts = value.split(":")
    if len(parts) > 3:
        return None

    try:
        int_parts = [int(p) for p in parts]
    except ValueError:
        return None

    if any(p < 0 for p in int_parts):
        return None
    # Only the leading unit may exceed 59
    if any(p > 59 for p in int_parts[1:]):
        return None

    seconds = 0
    for part in int_parts:
        seconds = seconds * 60 + part
    return seconds


def progress_bar(elapsed: float, total: int | None, width: int = PROGRESS_BAR_WIDTH) -> str:
    """Render ``elapsed / total`` as a text bar with a position marker."""
    if not total:
        return f"{format_duration(elapsed)} / {format_duration(total)}"
    filled = min(width - 1, int(width * min(elapsed, total) / total))
    bar = "▬" * filled + "🔘" + "▬" * (width - filled - 1)
    return f"{bar} {format_duration(elapsed)} / {format_duration(total)}"


def page_bounds(total_items: int, page: int, per_page: int) -> tuple[int, int, int]:
    """Clamp ``page`` into range. Returns ``(page, total_pages, start_index)``."""
    total_pages = max(1, math.ceil(total_items / per_page))
    page = max(1, min(page, total_pages))
    return page, total_pages, (page - 1) * per_page


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
