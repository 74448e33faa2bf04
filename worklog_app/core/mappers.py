"""Mapping raw Jira worklog JSON into WorklogEntry instances and aggregates."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from .models import AggregateResult, IssueRef, IssueWorklogs, TimeWindow, WorklogEntry


def extract_comment_text(comment: Any) -> str | None:
    """Flatten a worklog comment to plain text.

    Jira Server sends plain strings; Jira Cloud sends Atlassian Document Format,
    a tree of ``content`` blocks whose leaves carry ``text``. Every leaf
    fragment is trimmed and joined with single spaces. Returns None when no
    text is found, never an empty string.
    """
    if comment is None:
        return None
    if isinstance(comment, str):
        return comment.strip() or None

    fragments: list[str] = []

    def walk(node: Any):
        if isinstance(node, dict):
            text = node.get("text")
            if isinstance(text, str) and text.strip():
                fragments.append(text.strip())
            walk(node.get("content"))
        elif isinstance(node, list):
            for item in node:
                walk(item)

    walk(comment)
    return " ".join(fragments) or None


def parse_started_ms(value: Any) -> int | None:
    """Parse Jira's ``2024-06-01T09:00:00.000+0000`` into epoch milliseconds."""
    if not value:
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return int(ts.value // 1_000_000)


def _seconds(value: Any) -> int:
    try:
        seconds = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return max(seconds, 0)


def map_worklog(raw: dict[str, Any], issue: IssueRef) -> WorklogEntry | None:
    started_ms = parse_started_ms(raw.get("started"))
    if started_ms is None:
        return None
    seconds = _seconds(raw.get("timeSpentSeconds"))
    return WorklogEntry(
        issue_key=issue.key,
        summary=issue.summary,
        time_spent_seconds=seconds,
        started_ms=started_ms,
        # Never trust an upstream end time
        ended_ms=started_ms + seconds * 1000,
        comment=extract_comment_text(raw.get("comment")),
    )


def normalize_worklogs(
    fetched: Iterable[IssueWorklogs],
    window: TimeWindow,
    user_email: str | None = None,
) -> AggregateResult:
    """Map, window-filter, and sort fetched worklogs into an AggregateResult.

    The ``[start_ms, end_ms)`` check here is the authoritative window filter;
    whatever the worklog endpoint already filtered is treated as a hint.
    """
    entries: list[WorklogEntry] = []
    for group in fetched:
        for raw in group.worklogs:
            if not isinstance(raw, dict):
                continue
            entry = map_worklog(raw, group.issue)
            if entry is None or not window.contains(entry.started_ms):
                continue
            entries.append(entry)
    # Stable sort: ties keep fetch order
    entries.sort(key=lambda e: e.started_ms)
    return AggregateResult(user_email=user_email, window=window, entries=tuple(entries))
