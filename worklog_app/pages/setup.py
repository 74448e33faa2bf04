"""Connection setup page: collect Jira credentials and initialize WorklogService."""

from __future__ import annotations

import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.config import (
    IDENTITY_CACHE_TTL_SECONDS,
    TIMEZONE,
    WORKLOG_FETCH_MAX_WORKERS,
    JiraSettings,
    normalize_server,
    parse_allowed_domains,
)
from worklog_app.core.errors import ConfigurationError
from worklog_app.core.identity import IdentityResolver, TTLCache
from worklog_app.core.jira_client import JiraAPI
from worklog_app.core.service import WorklogService


@st.cache_resource
def shared_identity_cache(server: str, ttl: float = IDENTITY_CACHE_TTL_SECONDS) -> TTLCache:
    """Process-wide identity cache for one Jira site, shared by every browser session."""
    return TTLCache(ttl_seconds=ttl)


def connect(
    settings: JiraSettings,
    *,
    ttl: float = IDENTITY_CACHE_TTL_SECONDS,
    max_workers: int = WORKLOG_FETCH_MAX_WORKERS,
) -> WorklogService:
    """Build a WorklogService and publish it (plus display settings) to session state."""
    api = JiraAPI(settings.server, settings.email, settings.token)
    service = WorklogService(
        api,
        IdentityResolver(api, shared_identity_cache(settings.server, float(ttl))),
        tz=settings.timezone,
        max_workers=max_workers,
    )
    st.session_state["jira_server"] = settings.server
    st.session_state["jira_email"] = settings.email.lower()
    st.session_state["allowed_domains"] = settings.allowed_domains
    st.session_state["worklog_service"] = service
    return service


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    jira_secrets = st.secrets.get("jira", {})
    secret_server = jira_secrets.get("JIRA_DOMAIN") or st.secrets.get("JIRA_DOMAIN")
    secret_email = jira_secrets.get("JIRA_USER_EMAIL") or st.secrets.get("JIRA_USER_EMAIL")

    server = st.text_input(
        "Jira Domain",
        value=st.session_state.get("jira_server") or secret_server or "",
        placeholder="your-company.atlassian.net",
    )
    email = st.text_input(
        "Jira Account Email",
        value=st.session_state.get("jira_email") or secret_email or "",
    )
    token = st.text_input("API Token", type="password")
    timezone = st.text_input("Viewer time zone", value=TIMEZONE)
    domains = st.text_input(
        "Allowed sign-in domains (comma separated, blank for any)",
        value=", ".join(st.session_state.get("allowed_domains", ())),
    )
    ttl = st.number_input(
        "Identity cache TTL (seconds)",
        min_value=30,
        max_value=3600,
        value=int(IDENTITY_CACHE_TTL_SECONDS),
    )
    workers = st.number_input(
        "Parallel worklog fetches",
        min_value=1,
        max_value=16,
        value=WORKLOG_FETCH_MAX_WORKERS,
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        try:
            if not (server and email and token):
                raise ConfigurationError("All fields required.")
            settings = JiraSettings(
                server=normalize_server(server),
                email=email.strip(),
                token=token.strip(),
                timezone=timezone.strip() or TIMEZONE,
                allowed_domains=parse_allowed_domains(domains),
            )
            connect(settings, ttl=float(ttl), max_workers=int(workers))
            st.success("Connection initialized.")
        except ConfigurationError as exc:
            st.error(str(exc))
            return
        except Exception as exc:  # pragma: no cover
            st.error(f"Failed to initialize Jira client: {exc}")

    if "worklog_service" in st.session_state:
        st.info("WorklogService ready.")
