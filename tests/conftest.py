"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import worklog_app` works. Also provides an in-memory Jira
double shared by the service and gateway tests.
"""

from __future__ import annotations

import sys
import threading
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from worklog_app.core.jira_client import JiraAPI  # noqa: E402


class FakeJiraAPI(JiraAPI):
    """JiraAPI double: canned users, search pages and per-issue worklogs.

    ``worklogs`` values may be an exception instance, which is raised when that
    issue is fetched.
    """

    def __init__(self, users=None, pages=None, worklogs=None, delay: float = 0.0):
        self.server = "https://example.atlassian.net"
        self.users = users or {}
        self.pages = pages if pages is not None else [{"issues": []}]
        self.worklogs = worklogs or {}
        self.delay = delay
        self.user_calls: list[str] = []
        self.search_calls: list[tuple[str, str | None]] = []
        self.worklog_calls: list[tuple[str, int | None, int | None]] = []
        self._lock = threading.Lock()
        self._in_flight = 0
        self.max_in_flight = 0

    def search_users(self, query, max_results=2):
        self.user_calls.append(query)
        return list(self.users.get(query, []))

    def search_issues_page(self, jql, fields=None, max_results=100, next_page_token=None):
        self.search_calls.append((jql, next_page_token))
        index = 0 if next_page_token is None else int(next_page_token)
        return self.pages[index]

    def list_worklogs(self, issue_key, started_after_ms=None, started_before_ms=None, page_size=5000):
        with self._lock:
            self.worklog_calls.append((issue_key, started_after_ms, started_before_ms))
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            value = self.worklogs.get(issue_key, [])
            if isinstance(value, Exception):
                raise value
            return {"worklogs": list(value)}
        finally:
            with self._lock:
                self._in_flight -= 1


def issue(key, summary=None):
    return {"key": key, "fields": {"summary": summary}}


def worklog(started, seconds, account_id="acc-1", comment=None):
    return {
        "started": started,
        "timeSpentSeconds": seconds,
        "author": {"accountId": account_id},
        "comment": comment,
    }
