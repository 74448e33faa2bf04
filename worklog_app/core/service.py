"""WorklogService: orchestrates identity, issue search, worklog fetch and aggregation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date

import pytz

from .config import (
    ISSUE_SEARCH_FIELDS,
    ISSUE_SEARCH_PAGE_SIZE,
    TIMEZONE,
    WORKLOG_FETCH_MAX_WORKERS,
    WORKLOG_FETCH_MIN_PARALLEL,
)
from .identity import IdentityResolver, TTLCache, normalize_email
from .jira_client import JiraAPI
from .mappers import normalize_worklogs
from .models import AggregateResult, IssueRef, IssueWorklogs, TimeWindow
from .window import compute_window

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


def build_worklog_jql(account_id: str | None, window: TimeWindow) -> str:
    if account_id:
        author = f'worklogAuthor in ("{account_id}")'
    else:
        author = "worklogAuthor = currentUser()"
    return f'{author} AND worklogDate >= "{window.start_iso}" AND worklogDate < "{window.end_iso}"'


class WorklogService:
    def __init__(
        self,
        api: JiraAPI,
        resolver: IdentityResolver | None = None,
        *,
        tz: pytz.BaseTzInfo | str | None = None,
        max_workers: int = WORKLOG_FETCH_MAX_WORKERS,
    ):
        self.api = api
        self.resolver = resolver or IdentityResolver(api, TTLCache())
        if tz is None or isinstance(tz, str):
            tz = pytz.timezone(tz or TIMEZONE)
        self._tz = tz
        self.max_workers = max(1, int(max_workers))

    @property
    def tz(self) -> pytz.BaseTzInfo:
        return self._tz

    # ------------------ Issue Locator ------------------
    def locate_issues(
        self,
        account_id: str | None,
        window: TimeWindow,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[IssueRef]:
        """Return issues with worklogs by the author inside the window, in search order."""
        jql = build_worklog_jql(account_id, window)
        issues: list[IssueRef] = []
        token: str | None = None
        page = 0
        while True:
            page += 1
            if progress:
                progress(f"Searching issues (page {page})", None, None)
            data = self.api.search_issues_page(
                jql,
                fields=list(ISSUE_SEARCH_FIELDS),
                max_results=ISSUE_SEARCH_PAGE_SIZE,
                next_page_token=token,
            )
            for raw in data.get("issues") or []:
                key = raw.get("key") if isinstance(raw, dict) else None
                if not key:
                    continue
                summary = (raw.get("fields") or {}).get("summary")
                issues.append(IssueRef(key=key, summary=summary))
            token = data.get("nextPageToken")
            if not token:
                break
        logger.debug("Located %s issue(s) over %s page(s) for %s", len(issues), page, jql)
        return issues

    # ------------------ Worklog Fetcher ------------------
    def fetch_worklogs(
        self,
        issues: Sequence[IssueRef],
        window: TimeWindow,
        account_id: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> list[IssueWorklogs]:
        """Fetch worklogs for every issue with at most ``max_workers`` in flight.

        Each issue is submitted exactly once. Results are kept per issue and
        returned in issue order once all fetches finish. The first failure
        cancels pending fetches and is re-raised; no partial result is returned.
        """
        if not issues:
            return []
        total = len(issues)
        results: list[IssueWorklogs | None] = [None] * total

        if total < WORKLOG_FETCH_MIN_PARALLEL or self.max_workers == 1:
            for idx, issue in enumerate(issues):
                results[idx] = self._fetch_issue_worklogs(issue, window, account_id)
                if progress:
                    progress("Loading worklogs", idx + 1, total)
            return [r for r in results if r is not None]

        if progress:
            progress("Loading worklogs", 0, total)
        completed = 0
        with ThreadPoolExecutor(max_workers=min(self.max_workers, total)) as pool:
            futures = {
                pool.submit(self._fetch_issue_worklogs, issue, window, account_id): idx
                for idx, issue in enumerate(issues)
            }
            try:
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
                    completed += 1
                    if progress:
                        progress("Loading worklogs", completed, total)
            except Exception:
                for pending in futures:
                    pending.cancel()
                raise
        return [r for r in results if r is not None]

    def _fetch_issue_worklogs(
        self,
        issue: IssueRef,
        window: TimeWindow,
        account_id: str | None,
    ) -> IssueWorklogs:
        data = self.api.list_worklogs(
            issue.key,
            started_after_ms=window.start_ms,
            started_before_ms=window.end_ms,
        )
        worklogs = [wl for wl in data.get("worklogs") or [] if isinstance(wl, dict)]
        if account_id:
            worklogs = [wl for wl in worklogs if (wl.get("author") or {}).get("accountId") == account_id]
        return IssueWorklogs(issue=issue, worklogs=worklogs)

    # ------------------ Pipeline ------------------
    def aggregate(
        self,
        email: str | None = None,
        start: date | str | None = None,
        end: date | str | None = None,
        *,
        user_email: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> AggregateResult:
        """Run window -> identity -> issues -> worklogs -> normalize for one identity.

        ``email`` selects whose worklogs to load; without it (or when Jira has
        no matching account) the search falls back to ``currentUser()``.
        ``user_email`` is the label reported back and defaults to ``email``.
        """
        window = compute_window(start, end, tz=self._tz)
        email = normalize_email(email)
        account_id = None
        if email:
            if progress:
                progress(f"Resolving Jira account for {email}", None, None)
            account_id = self.resolver.resolve(email)
        issues = self.locate_issues(account_id, window, progress=progress)
        fetched = self.fetch_worklogs(issues, window, account_id, progress=progress)
        result = normalize_worklogs(fetched, window, user_email=user_email or email)
        logger.info(
            "Aggregated %s worklog(s) over %s issue(s) for %s [%s, %s): %ss",
            len(result.entries),
            len(issues),
            result.user_email or "currentUser()",
            window.start_iso,
            window.end_iso,
            result.total_seconds,
        )
        return result
