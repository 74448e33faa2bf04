"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``worklog_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from worklog_app.app import main
from worklog_app.core.config import load_settings
from worklog_app.core.errors import ConfigurationError
from worklog_app.pages.setup import connect

st.set_page_config(layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

PAGES_DIR = Path(__file__).parent / "worklog_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"worklog_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        print(f"Failed importing page {mod_name}: {e}")


def _auto_init_worklog_service():
    """Initialize the worklog service from Streamlit secrets or the environment."""
    if "worklog_service" in st.session_state:
        return
    try:
        secrets = dict(st.secrets)
    except FileNotFoundError:
        secrets = {}
    try:
        settings = load_settings(secrets)
    except ConfigurationError as exc:
        st.sidebar.warning(f"{exc}. Please use the Setup page.")
        return

    try:
        connect(settings)
        st.sidebar.success("Jira connection ready.")
    except Exception as e:
        st.sidebar.error(f"Jira connection failed: {e}")
        st.session_state.pop("worklog_service", None)


_auto_init_worklog_service()

if __name__ == "__main__":
    main()
