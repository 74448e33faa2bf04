"""My Worklogs page - time logged in Jira for one identity, grouped by day.

The page is a thin front end over ``handle_worklog_request``: it collects the
date selection, forwards the signed-in email, and renders whatever status and
body the gateway returns.
"""

from __future__ import annotations

import logging
from datetime import date

import streamlit as st

from worklog_app.app import register_page
from worklog_app.core.gateway import handle_worklog_request
from worklog_app.core.service import WorklogService
from worklog_app.core.window import today_in
from worklog_app.features.worklog_view import build_worklog_context
from worklog_app.visual.charts import daily_hours_chart
from worklog_app.visual.progress import ProgressReporter
from worklog_app.visual.tables import render_table

logger = logging.getLogger(__name__)

PAGE_KEY = "worklogs"


def _auth_configured() -> bool:
    try:
        return "auth" in st.secrets
    except FileNotFoundError:
        return False


def _session_email() -> str | None:
    """Verified email of the signed-in user.

    Uses Streamlit's OIDC login when an ``[auth]`` secrets section exists;
    otherwise the Jira connection email stands in for a single-user setup.
    """
    if _auth_configured():
        user = st.user
        if not user.is_logged_in:
            return None
        email = user.get("email")
        return str(email).lower() if email else None
    return st.session_state.get("jira_email")


def _request_params(email: str | None, start: date, end: date, single: bool) -> dict[str, str]:
    params: dict[str, str] = {}
    if email:
        params["email"] = email
    if single:
        params["date"] = start.isoformat()
    else:
        params["startDate"] = start.isoformat()
        params["endDate"] = end.isoformat()
    return params


def _render_error(error) -> None:
    if isinstance(error, dict):
        messages = error.get("errorMessages") or []
        text = "; ".join(str(m) for m in messages) or str(error)
    else:
        text = str(error or "Failed to load")
    st.error(text)


@register_page("My Worklogs")
def worklogs_page():
    st.title("My Worklogs")
    service: WorklogService | None = st.session_state.get("worklog_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    session_email = _session_email()
    if session_email is None:
        st.info("Sign in to see your worklogs.")
        if st.button("Sign in", type="primary"):
            st.login()
        return

    header_left, header_right = st.columns([4, 1])
    header_left.caption(f"Signed in as {session_email}")
    if _auth_configured() and header_right.button("Sign out"):
        st.logout()

    today = today_in(service.tz)
    mode = st.radio("Period", ["Single day", "Date range"], horizontal=True, key=f"{PAGE_KEY}_mode")
    single = mode == "Single day"
    if single:
        start = end = st.date_input("Date", value=today, key=f"{PAGE_KEY}_date")
    else:
        col_start, col_end = st.columns(2)
        start = col_start.date_input("Start date", value=today, key=f"{PAGE_KEY}_start")
        end = col_end.date_input("End date", value=today, key=f"{PAGE_KEY}_end")
    email = st.text_input(
        "Jira user email",
        value=session_email,
        key=f"{PAGE_KEY}_email",
        help="Leave blank to load worklogs of the connected Jira account.",
    )

    state_key = f"{PAGE_KEY}_response"
    if st.button("Fetch Data", type="primary", key=f"{PAGE_KEY}_fetch"):
        reporter = ProgressReporter("Loading worklogs from Jira")
        status, body = handle_worklog_request(
            service,
            session_email,
            _request_params(email.strip() or None, start, end, single),
            allowed_domains=st.session_state.get("allowed_domains", ()),
            progress=reporter.callback,
        )
        st.session_state[state_key] = (status, body)
        if status == 200:
            reporter.complete(f"Loaded {len(body.get('worklogs', []))} worklog(s).")
        else:
            reporter.error(f"Request failed with status {status}.")

    response = st.session_state.get(state_key)
    if response is None:
        st.info("Pick a date and click 'Fetch Data'.")
        return
    status, body = response
    if status != 200:
        _render_error(body.get("error"))
        return

    ctx = build_worklog_context(body, service.tz)
    server = st.session_state.get("jira_server", "")
    st.metric("Total time", ctx.total_display, help=f"{ctx.total_seconds} seconds")
    if ctx.is_empty:
        st.info("No worklogs found for the selected period.")
        return

    if len(ctx.days) > 1 or not single:
        chart = daily_hours_chart(
            ctx.worklogs,
            date.fromisoformat(ctx.start_date),
            date.fromisoformat(ctx.end_date),
        )
        if chart is not None:
            st.altair_chart(chart, use_container_width=True)
        render_table(ctx.daily_totals, "daily")

    day_tabs = st.tabs([f"{g.day:%a %d %b} ({g.total_display})" for g in ctx.days])
    for tab, group in zip(day_tabs, ctx.days, strict=True):
        with tab:
            render_table(group.worklogs, "worklog", server)

    csv = ctx.worklogs.drop(columns=["started", "ended"]).to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download Worklogs CSV",
        data=csv,
        file_name=f"jira_worklogs_{ctx.start_date}_{ctx.end_date}.csv",
        mime="text/csv",
    )
