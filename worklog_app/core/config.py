"""Central configuration, constants, tuning knobs, and Jira settings loading."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .errors import ConfigurationError

# =============================================================================
# Viewer Settings
# =============================================================================
# Calendar days (and their midnights) are computed in this zone unless the
# deployment overrides it with WORKLOG_TIMEZONE.
TIMEZONE = "UTC"

# =============================================================================
# Identity Resolution
# =============================================================================
IDENTITY_CACHE_TTL_SECONDS: float = 300.0
USER_SEARCH_MAX_RESULTS: int = 2

# =============================================================================
# Issue Search
# =============================================================================
ISSUE_SEARCH_PAGE_SIZE: int = 100
ISSUE_SEARCH_FIELDS: Sequence[str] = ("summary",)

# =============================================================================
# Worklog Fetching
# =============================================================================
# Threads, because jira/requests calls are synchronous and I/O bound. Keep the
# worker count low to stay clear of Jira rate limits.
WORKLOG_FETCH_MAX_WORKERS: int = 6
WORKLOG_FETCH_MIN_PARALLEL: int = 2  # below this, stay sequential
WORKLOG_PAGE_SIZE: int = 5000  # Jira caps the worklog endpoint at 5000

# =============================================================================
# Table Columns
# =============================================================================
WORKLOG_CORE_COLUMNS: Sequence[str] = (
    "key",
    "summary",
    "started",
    "ended",
    "time_spent_seconds",
    "comment",
)

DISPLAY_ORDER_WORKLOG: Sequence[str] = (
    "Ticket",
    "summary",
    "time_range",
    "duration",
    "hours",
    "comment",
)

DISPLAY_ORDER_DAILY_TOTALS: Sequence[str] = (
    "day",
    "entries",
    "duration",
    "hours",
)

# Secret/environment key aliases, first match wins
_SERVER_KEYS = ("JIRA_DOMAIN", "JIRA_SERVER")
_EMAIL_KEYS = ("JIRA_USER_EMAIL", "JIRA_EMAIL")
_TOKEN_KEYS = ("JIRA_API_TOKEN", "JIRA_TOKEN")


@dataclass(slots=True)
class JiraSettings:
    server: str
    email: str
    token: str
    timezone: str = TIMEZONE
    allowed_domains: tuple[str, ...] = field(default_factory=tuple)


def normalize_server(domain: str) -> str:
    """Turn ``acme.atlassian.net`` or ``https://acme.atlassian.net/`` into a base URL."""
    text = domain.strip()
    if not text.startswith(("https://", "http://")):
        text = f"https://{text}"
    return text.rstrip("/")


def parse_allowed_domains(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        parts = value.split(",")
    else:
        parts = [str(v) for v in value]
    out: list[str] = []
    for part in parts:
        cleaned = part.strip().lower().lstrip("@")
        if cleaned and cleaned not in out:
            out.append(cleaned)
    return tuple(out)


def _lookup(sources: Sequence[Mapping[str, Any]], keys: Sequence[str]) -> Any:
    for source in sources:
        for key in keys:
            value = source.get(key)
            if value:
                return value
    return None


def load_settings(
    source: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> JiraSettings:
    """Build :class:`JiraSettings` from secrets-like mappings.

    Lookup order: a ``[jira]`` section of ``source``, the top level of
    ``source``, then the process environment.

    Raises
    ------
    ConfigurationError
        When the Jira domain or the API credentials are missing.
    """
    source = source or {}
    section = source.get("jira") or {}
    sources: list[Mapping[str, Any]] = [section, source, environ if environ is not None else os.environ]

    server = _lookup(sources, _SERVER_KEYS)
    if not server:
        raise ConfigurationError("JIRA_DOMAIN is not set")
    email = _lookup(sources, _EMAIL_KEYS)
    token = _lookup(sources, _TOKEN_KEYS)
    if not email or not token:
        raise ConfigurationError("JIRA_USER_EMAIL or JIRA_API_TOKEN is not set")

    return JiraSettings(
        server=normalize_server(str(server)),
        email=str(email).strip(),
        token=str(token).strip(),
        timezone=str(_lookup(sources, ("WORKLOG_TIMEZONE",)) or TIMEZONE),
        allowed_domains=parse_allowed_domains(_lookup(sources, ("ALLOWED_EMAIL_DOMAINS",))),
    )
