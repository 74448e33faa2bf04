"""Error taxonomy for the worklog pipeline, each mapped to an HTTP status."""

from __future__ import annotations

from typing import Any


class WorklogError(RuntimeError):
    status_code: int = 500

    @property
    def payload(self) -> Any:
        return str(self)


class ConfigurationError(WorklogError):
    """Jira domain or credentials are missing."""


class InvalidRequestError(WorklogError):
    status_code = 400


class JiraRequestError(WorklogError):
    """Jira rejected a request; keeps the upstream status and body verbatim."""

    def __init__(self, message: str, status_code: int, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self._payload = payload

    @property
    def payload(self) -> Any:
        return self._payload if self._payload not in (None, "") else str(self)
