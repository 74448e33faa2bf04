"""Duration and timestamp formatting, plus the elapsed-time calculator parser."""

from __future__ import annotations

import re
from datetime import date, datetime

import pytz

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")
_DMY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_YMD_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def format_duration(total_seconds: int | float | None) -> str:
    """Render seconds as ``"1h 30m"``; anything under a minute is ``"0m"``."""
    seconds = max(int(total_seconds or 0), 0)
    hours, rem = divmod(seconds, 3600)
    minutes = rem // 60
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return " ".join(parts) or "0m"


def format_time_range(start_ms: int | None, end_ms: int | None, tz: pytz.BaseTzInfo) -> str:
    if start_ms is None or end_ms is None:
        return "-"
    start = datetime.fromtimestamp(start_ms / 1000, tz=tz)
    end = datetime.fromtimestamp(end_ms / 1000, tz=tz)
    return f"{start:%H:%M} - {end:%H:%M}"


def parse_flexible_datetime(text: str | None) -> datetime | None:
    """Parse ``YYYY-MM-DD HH:MM[:SS]`` or ``DD/MM/YYYY HH:MM[:SS]`` (``T`` also separates).

    Returns a naive datetime, or None for anything malformed or out of range
    (for example 31/02).
    """
    raw = (text or "").strip()
    if not raw:
        return None
    parts = re.split(r"[T\s]+", raw, maxsplit=1)
    if len(parts) != 2:
        return None
    date_part, time_part = parts
    time_match = _TIME_RE.match(time_part)
    if not time_match:
        return None
    hours, minutes = int(time_match.group(1)), int(time_match.group(2))
    seconds = int(time_match.group(3) or 0)

    dmy = _DMY_RE.match(date_part)
    ymd = _YMD_RE.match(date_part)
    if dmy:
        day, month, year = (int(g) for g in dmy.groups())
    elif ymd:
        year, month, day = (int(g) for g in ymd.groups())
    else:
        return None
    try:
        return datetime.combine(date(year, month, day), datetime.min.time()).replace(
            hour=hours, minute=minutes, second=seconds
        )
    except ValueError:
        return None


def elapsed_between(start_text: str | None, end_text: str | None) -> str:
    """Elapsed time between two free-form timestamps, clamped at zero; ``"-"`` if unparseable."""
    start = parse_flexible_datetime(start_text)
    end = parse_flexible_datetime(end_text)
    if start is None or end is None:
        return "-"
    return format_duration(max(0, int((end - start).total_seconds())))
