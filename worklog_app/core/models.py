"""Domain data models for time windows, identities, issues and worklogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any


def _ms_to_iso(value: int) -> str:
    ts = datetime.fromtimestamp(value / 1000, tz=UTC)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class TimeWindow:
    start_date: date
    end_date: date  # exclusive
    start_ms: int
    end_ms: int

    @property
    def start_iso(self) -> str:
        return self.start_date.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end_date.isoformat()

    def contains(self, epoch_ms: int) -> bool:
        return self.start_ms <= epoch_ms < self.end_ms


@dataclass(frozen=True, slots=True)
class AccountIdentity:
    email: str
    account_id: str | None


@dataclass(frozen=True, slots=True)
class IssueRef:
    key: str
    summary: str | None = None


@dataclass(slots=True)
class IssueWorklogs:
    issue: IssueRef
    worklogs: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class WorklogEntry:
    issue_key: str
    summary: str | None
    time_spent_seconds: int
    started_ms: int
    ended_ms: int
    comment: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "issueKey": self.issue_key,
            "summary": self.summary,
            "timeSpentSeconds": self.time_spent_seconds,
            "startedAtMs": self.started_ms,
            "endedAtMs": self.ended_ms,
            "startedISO": _ms_to_iso(self.started_ms),
            "endedISO": _ms_to_iso(self.ended_ms),
            "comment": self.comment,
        }


@dataclass(frozen=True, slots=True)
class AggregateResult:
    user_email: str | None
    window: TimeWindow
    entries: tuple[WorklogEntry, ...] = ()

    @property
    def window_start(self) -> date:
        return self.window.start_date

    @property
    def window_end(self) -> date:
        return self.window.end_date

    @property
    def total_seconds(self) -> int:
        return sum(e.time_spent_seconds for e in self.entries)
