"""Dashboard gateway: authenticate the caller, run the pipeline, shape the response.

``handle_worklog_request`` returns ``(status, body)`` pairs so any front end
(the Streamlit pages here, or an HTTP route) can serve the same contract.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import timedelta
from typing import Any

import requests
from jira import JIRAError

from .errors import WorklogError
from .identity import normalize_email
from .models import AggregateResult
from .service import ProgressCallback, WorklogService

logger = logging.getLogger(__name__)


def email_allowed(email: str, allowed_domains: Sequence[str]) -> bool:
    if not allowed_domains:
        return True
    lowered = email.lower()
    return any(lowered.endswith(f"@{domain}") for domain in allowed_domains)


def _param(params: Mapping[str, Any], name: str) -> str | None:
    value = params.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def serialize_result(result: AggregateResult) -> dict[str, Any]:
    window = result.window
    last_day = window.end_date - timedelta(days=1)
    summary: dict[str, Any] = {"userEmail": result.user_email}
    if last_day == window.start_date:
        summary["date"] = window.start_iso
    summary["startDate"] = window.start_iso
    summary["endDate"] = last_day.isoformat()
    summary["totalSeconds"] = result.total_seconds
    return {"summary": summary, "worklogs": [e.to_dict() for e in result.entries]}


def handle_worklog_request(
    service: WorklogService,
    session_email: str | None,
    params: Mapping[str, Any],
    *,
    allowed_domains: Sequence[str] = (),
    progress: ProgressCallback | None = None,
) -> tuple[int, dict[str, Any]]:
    """Serve one worklog request.

    Parameters
    ----------
    service : WorklogService
        Pipeline bound to a Jira connection.
    session_email : str or None
        Verified email of the signed-in caller; None means unauthenticated.
    params : mapping
        ``email`` (optional) and either ``date`` or ``startDate``/``endDate``,
        all ``YYYY-MM-DD`` strings.
    allowed_domains : sequence of str
        When non-empty, only callers whose email ends with one of these
        domains are served.

    Returns
    -------
    tuple[int, dict]
        HTTP status and JSON-ready body (``{"error": ...}`` on failure).
    """
    caller = normalize_email(session_email)
    if caller is None:
        return 401, {"error": "Unauthorized"}
    if not email_allowed(caller, allowed_domains):
        logger.warning("Rejected caller outside allowed domains: %s", caller)
        return 403, {"error": "Forbidden"}

    requested = normalize_email(_param(params, "email"))
    single = _param(params, "date")
    start = single or _param(params, "startDate")
    end = single or _param(params, "endDate")

    try:
        result = service.aggregate(
            requested,
            start,
            end,
            user_email=requested or caller,
            progress=progress,
        )
    except WorklogError as exc:
        logger.error("Worklog request failed (%s): %s", exc.status_code, exc)
        return exc.status_code, {"error": exc.payload}
    except JIRAError as exc:
        status = exc.status_code or 500
        logger.error("Jira API error (%s): %s", status, exc.text)
        return status, {"error": exc.text or str(exc)}
    except requests.RequestException as exc:
        response = exc.response
        status = response.status_code if response is not None and response.status_code >= 400 else 500
        logger.error("Jira request failed (%s): %s", status, exc)
        return status, {"error": str(exc)}
    except Exception as exc:
        logger.exception("Unexpected failure serving worklog request")
        return 500, {"error": str(exc) or "Unknown error"}
    return 200, serialize_result(result)
