"""Jira API client wrapper (REST v3: user search, enhanced JQL search, worklogs)."""

from __future__ import annotations

import logging
from typing import Any

from jira import JIRA

from .config import ISSUE_SEARCH_PAGE_SIZE, WORKLOG_PAGE_SIZE
from .errors import JiraRequestError

logger = logging.getLogger(__name__)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        self.server = server.rstrip("/")
        self.client = JIRA(
            basic_auth=(email, token), options={"server": self.server, "rest_api_version": "3"}
        )

    def _request(self, method: str, path: str, **kwargs) -> Any:
        session = getattr(self.client, "_session", None)
        if session is None:
            raise RuntimeError("JIRA session unavailable")
        url = f"{self.server}{path}"
        resp = session.request(method, url, **kwargs)
        if resp.status_code >= 400:
            try:
                payload = resp.json()
            except ValueError:
                payload = resp.text
            raise JiraRequestError(
                f"Jira {method} {path} failed {resp.status_code}: {str(resp.text)[:200]}",
                resp.status_code,
                payload,
            )
        return resp.json()

    def search_users(self, query: str, max_results: int = 2) -> list[dict[str, Any]]:
        data = self._request(
            "GET",
            "/rest/api/3/user/search",
            params={"query": query, "maxResults": max_results},
        )
        return data if isinstance(data, list) else []

    def search_issues_page(
        self,
        jql: str,
        fields: list[str] | None = None,
        max_results: int = ISSUE_SEARCH_PAGE_SIZE,
        next_page_token: str | None = None,
    ) -> dict[str, Any]:
        """Fetch one page of the enhanced JQL search.

        The caller drives pagination through the returned ``nextPageToken``.
        """
        body: dict[str, Any] = {"jql": jql, "maxResults": max_results}
        if fields:
            body["fields"] = list(fields)
        if next_page_token:
            body["nextPageToken"] = next_page_token
        data = self._request("POST", "/rest/api/3/search/jql", json=body)
        return data if isinstance(data, dict) else {}

    def list_worklogs(
        self,
        issue_key: str,
        started_after_ms: int | None = None,
        started_before_ms: int | None = None,
        page_size: int = WORKLOG_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Return ``{"worklogs": [...]}`` for an issue, following startAt paging."""
        params: dict[str, Any] = {"maxResults": page_size}
        if started_after_ms is not None:
            params["startedAfter"] = started_after_ms
        if started_before_ms is not None:
            params["startedBefore"] = started_before_ms
        out: list[dict[str, Any]] = []
        start_at = 0
        while True:
            data = self._request(
                "GET",
                f"/rest/api/3/issue/{issue_key}/worklog",
                params={**params, "startAt": start_at},
            )
            page = data.get("worklogs") or []
            out.extend(page)
            total = data.get("total")
            start_at += len(page)
            if not page or not isinstance(total, int) or start_at >= total:
                break
            logger.debug("Paging worklogs for %s: %s of %s", issue_key, start_at, total)
        return {"worklogs": out}
