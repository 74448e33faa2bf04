"""Identity resolution: email -> Jira account id, behind an injected TTL cache."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from .config import IDENTITY_CACHE_TTL_SECONDS, USER_SEARCH_MAX_RESULTS
from .jira_client import JiraAPI
from .models import AccountIdentity

logger = logging.getLogger(__name__)


class TTLCache:
    """Last-write-wins map whose entries expire ``ttl_seconds`` after being stored.

    Stale entries are ignored on read and overwritten on the next store; there
    is no background eviction.
    """

    def __init__(
        self,
        ttl_seconds: float = IDENTITY_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def lookup(self, key: str) -> tuple[bool, Any]:
        """Return ``(hit, value)``; a cached ``None`` is still a hit."""
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        stored_at, value = entry
        if self._clock() - stored_at < self.ttl_seconds:
            return True, value
        return False, None

    def store(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def normalize_email(email: str | None) -> str | None:
    if email is None:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


class IdentityResolver:
    def __init__(self, api: JiraAPI, cache: TTLCache | None = None):
        self.api = api
        self.cache = cache if cache is not None else TTLCache()

    def resolve(self, email: str) -> str | None:
        return self.identity(email).account_id

    def identity(self, email: str) -> AccountIdentity:
        """Resolve ``email`` to an account id, consulting the cache first.

        Concurrent misses for the same email are not coalesced; each issues its
        own lookup and the last one to finish wins the cache slot. Lookup
        failures propagate and nothing is cached for them.
        """
        key = normalize_email(email)
        if key is None:
            return AccountIdentity(email="", account_id=None)
        hit, cached = self.cache.lookup(key)
        if hit:
            logger.debug("Identity cache hit for %s", key)
            return AccountIdentity(email=key, account_id=cached)

        users = self.api.search_users(key, max_results=USER_SEARCH_MAX_RESULTS)
        first = users[0] if users else None
        account_id = (first.get("accountId") if isinstance(first, dict) else None) or None
        self.cache.store(key, account_id)
        if account_id is None:
            logger.info("No Jira account found for %s", key)
        return AccountIdentity(email=key, account_id=account_id)
