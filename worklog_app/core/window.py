"""Time-window calculator: day-aligned, end-exclusive boundaries for a date range."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytz

from .config import TIMEZONE
from .errors import InvalidRequestError
from .models import TimeWindow

DateLike = date | datetime | str | None


def parse_calendar_date(value: DateLike) -> date | None:
    """Coerce ``YYYY-MM-DD`` strings, dates and datetimes to a ``date``.

    Blank values return None so callers can fall back to a default.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        if len(text) != 10:
            raise ValueError(text)
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidRequestError(f"Invalid date {text!r}, expected YYYY-MM-DD") from exc


def local_midnight_ms(day: date, tz: pytz.BaseTzInfo) -> int:
    midnight = tz.localize(datetime.combine(day, datetime.min.time()))
    return int(midnight.timestamp() * 1000)


def today_in(tz: pytz.BaseTzInfo) -> date:
    return datetime.now(tz).date()


def compute_window(
    start: DateLike = None,
    end: DateLike = None,
    *,
    tz: pytz.BaseTzInfo | str | None = None,
    today: date | None = None,
) -> TimeWindow:
    """Return the half-open window ``[start midnight, day-after-end midnight)``.

    Missing values default rather than error: ``start`` falls back to ``end``
    (or today), ``end`` falls back to ``start``. An ``end`` earlier than
    ``start`` is kept as given and simply yields an empty window.
    """
    if tz is None or isinstance(tz, str):
        tz = pytz.timezone(tz or TIMEZONE)
    start_day = parse_calendar_date(start)
    end_day = parse_calendar_date(end)
    if start_day is None:
        start_day = end_day or today or today_in(tz)
    if end_day is None:
        end_day = start_day
    end_exclusive = end_day + timedelta(days=1)
    return TimeWindow(
        start_date=start_day,
        end_date=end_exclusive,
        start_ms=local_midnight_ms(start_day, tz),
        end_ms=local_midnight_ms(end_exclusive, tz),
    )
