from datetime import date, datetime

import pytz

from worklog_app.features.worklog_view import (
    build_worklog_context,
    elapsed_between,
    format_duration,
    format_time_range,
    parse_flexible_datetime,
)

JUNE_1 = 1_717_200_000_000  # 2024-06-01T00:00:00Z
HOUR = 3_600_000


def _row(key, started_ms, seconds, summary=None):
    return {
        "issueKey": key,
        "summary": summary,
        "timeSpentSeconds": seconds,
        "startedAtMs": started_ms,
        "endedAtMs": started_ms + seconds * 1000,
        "comment": None,
    }


def test_format_duration():
    assert format_duration(0) == "0m"
    assert format_duration(59) == "0m"
    assert format_duration(60) == "1m"
    assert format_duration(3600) == "1h"
    assert format_duration(5400) == "1h 30m"
    assert format_duration(None) == "0m"


def test_format_time_range_uses_viewer_zone():
    bangkok = pytz.timezone("Asia/Bangkok")
    assert format_time_range(JUNE_1 + 9 * HOUR, JUNE_1 + 10 * HOUR, pytz.UTC) == "09:00 - 10:00"
    assert format_time_range(JUNE_1 + 9 * HOUR, JUNE_1 + 10 * HOUR, bangkok) == "16:00 - 17:00"
    assert format_time_range(None, JUNE_1, pytz.UTC) == "-"


def test_parse_flexible_datetime():
    assert parse_flexible_datetime("2024-06-01 09:30") == datetime(2024, 6, 1, 9, 30)
    assert parse_flexible_datetime("2024-06-01T09:30:15") == datetime(2024, 6, 1, 9, 30, 15)
    assert parse_flexible_datetime("01/06/2024 9:05") == datetime(2024, 6, 1, 9, 5)
    assert parse_flexible_datetime("31/02/2024 10:00") is None
    assert parse_flexible_datetime("2024-06-01 24:00") is None
    assert parse_flexible_datetime("2024-06-01") is None
    assert parse_flexible_datetime("") is None


def test_elapsed_between():
    assert elapsed_between("2024-06-01 09:00", "2024-06-01 10:30") == "1h 30m"
    assert elapsed_between("2024-06-01 10:30", "2024-06-01 09:00") == "0m"
    assert elapsed_between("nope", "2024-06-01 09:00") == "-"


def test_context_groups_by_local_day():
    body = {
        "summary": {
            "userEmail": "me@x.com",
            "startDate": "2024-06-01",
            "endDate": "2024-06-02",
            "totalSeconds": 5400,
        },
        "worklogs": [
            _row("ABC-1", JUNE_1 + 9 * HOUR, 3600, "Login"),
            # 23:30 UTC is already June 2nd in Bangkok
            _row("ABC-2", JUNE_1 + 23 * HOUR + 30 * 60_000, 1800),
        ],
    }
    utc_ctx = build_worklog_context(body, pytz.UTC)
    assert [g.day for g in utc_ctx.days] == [date(2024, 6, 1)]
    bkk_ctx = build_worklog_context(body, pytz.timezone("Asia/Bangkok"))
    assert [g.day for g in bkk_ctx.days] == [date(2024, 6, 1), date(2024, 6, 2)]
    assert bkk_ctx.total_display == "1h 30m"
    assert list(bkk_ctx.daily_totals["total_seconds"]) == [3600, 1800]
    assert bkk_ctx.start_date == "2024-06-01"
    assert bkk_ctx.end_date == "2024-06-02"


def test_empty_context():
    ctx = build_worklog_context({"summary": {"date": "2024-06-01", "totalSeconds": 0}, "worklogs": []})
    assert ctx.is_empty
    assert ctx.days == []
    assert ctx.start_date == ctx.end_date == "2024-06-01"
    assert ctx.total_display == "0m"
