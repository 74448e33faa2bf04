"""Pure helpers to build the worklog page context for testing (no Streamlit)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pandas as pd
import pytz

from worklog_app.features.worklog_view.formatting import format_duration, format_time_range

WORKLOG_COLUMNS = (
    "key",
    "summary",
    "started",
    "ended",
    "day",
    "time_spent_seconds",
    "hours",
    "duration",
    "time_range",
    "comment",
)


@dataclass(slots=True)
class DayGroup:
    day: date
    worklogs: pd.DataFrame
    total_seconds: int = 0

    @property
    def total_display(self) -> str:
        return format_duration(self.total_seconds)


@dataclass(slots=True)
class WorklogViewContext:
    """Context data for the worklog page."""

    user_email: str | None
    start_date: str | None
    end_date: str | None
    total_seconds: int = 0
    worklogs: pd.DataFrame = field(default_factory=pd.DataFrame)
    days: list[DayGroup] = field(default_factory=list)
    daily_totals: pd.DataFrame = field(default_factory=pd.DataFrame)

    @property
    def total_display(self) -> str:
        return format_duration(self.total_seconds)

    @property
    def is_empty(self) -> bool:
        return self.worklogs.empty


def worklogs_to_dataframe(worklogs: Iterable[Mapping[str, Any]], tz: pytz.BaseTzInfo) -> pd.DataFrame:
    """Tabulate serialized worklog entries; ``day`` is the start date in ``tz``."""
    rows = []
    for wl in worklogs:
        started_ms = wl.get("startedAtMs")
        ended_ms = wl.get("endedAtMs")
        seconds = int(wl.get("timeSpentSeconds") or 0)
        started = pd.to_datetime(started_ms, unit="ms", utc=True).tz_convert(tz)
        ended = pd.to_datetime(ended_ms, unit="ms", utc=True).tz_convert(tz)
        rows.append(
            {
                "key": wl.get("issueKey"),
                "summary": wl.get("summary"),
                "started": started,
                "ended": ended,
                "day": started.date(),
                "time_spent_seconds": seconds,
                "hours": round(seconds / 3600, 2),
                "duration": format_duration(seconds),
                "time_range": format_time_range(started_ms, ended_ms, tz),
                "comment": wl.get("comment"),
            }
        )
    if not rows:
        return pd.DataFrame(columns=list(WORKLOG_COLUMNS))
    return pd.DataFrame(rows, columns=list(WORKLOG_COLUMNS))


def group_by_day(df: pd.DataFrame) -> list[DayGroup]:
    if df.empty:
        return []
    groups = []
    for day, group in df.groupby("day", sort=True):
        groups.append(
            DayGroup(
                day=day,
                worklogs=group.reset_index(drop=True),
                total_seconds=int(group["time_spent_seconds"].sum()),
            )
        )
    return groups


def daily_totals(days: Iterable[DayGroup]) -> pd.DataFrame:
    rows = [
        {
            "day": g.day,
            "entries": len(g.worklogs),
            "total_seconds": g.total_seconds,
            "duration": g.total_display,
            "hours": round(g.total_seconds / 3600, 2),
        }
        for g in days
    ]
    return pd.DataFrame(rows, columns=["day", "entries", "total_seconds", "duration", "hours"])


def build_worklog_context(body: Mapping[str, Any], tz: pytz.BaseTzInfo | None = None) -> WorklogViewContext:
    """Build the page context from a successful gateway response body.

    Parameters
    ----------
    body : mapping
        ``{"summary": {...}, "worklogs": [...]}`` as returned by the gateway.
    tz : timezone, optional
        Viewer time zone used to bucket entries into calendar days.

    Returns
    -------
    WorklogViewContext
        Entries, per-day groups and totals ready for rendering.
    """
    if tz is None:
        tz = pytz.UTC
    summary = body.get("summary") or {}
    df = worklogs_to_dataframe(body.get("worklogs") or [], tz)
    days = group_by_day(df)
    return WorklogViewContext(
        user_email=summary.get("userEmail"),
        start_date=summary.get("startDate") or summary.get("date"),
        end_date=summary.get("endDate") or summary.get("date"),
        total_seconds=int(summary.get("totalSeconds") or 0),
        worklogs=df,
        days=days,
        daily_totals=daily_totals(days),
    )
