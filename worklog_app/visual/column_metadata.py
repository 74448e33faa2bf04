"""Column labels and hover help for worklog tables."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float2" -> 2 decimal float, None -> default text column
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "summary": ("Task", "Issue summary from Jira.", None),
    "time_range": ("From - To", "Worklog start and computed end time.", None),
    "duration": ("Total Time", "Time logged on this entry.", None),
    "hours": ("Hours", "Time logged, in decimal hours.", "float2"),
    "comment": ("Comment", "Worklog comment as plain text.", None),
    "day": ("Day", "Calendar day the worklog started on.", None),
    "entries": ("Entries", "Number of worklogs started on this day.", "int"),
    "time_spent_seconds": ("Seconds", "Time logged, in seconds.", "int"),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float2":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.2f")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
