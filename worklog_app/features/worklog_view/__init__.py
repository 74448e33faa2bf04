"""Worklog view feature module: formatting and per-day grouping helpers."""

from worklog_app.features.worklog_view.context import (
    DayGroup,
    WorklogViewContext,
    build_worklog_context,
    daily_totals,
    group_by_day,
    worklogs_to_dataframe,
)
from worklog_app.features.worklog_view.formatting import (
    elapsed_between,
    format_duration,
    format_time_range,
    parse_flexible_datetime,
)

__all__ = [
    "DayGroup",
    "WorklogViewContext",
    "build_worklog_context",
    "daily_totals",
    "elapsed_between",
    "format_duration",
    "format_time_range",
    "group_by_day",
    "parse_flexible_datetime",
    "worklogs_to_dataframe",
]
