"""Elapsed time calculator page."""

from __future__ import annotations

import streamlit as st

from worklog_app.app import register_page
from worklog_app.features.worklog_view import elapsed_between


@register_page("Time Calculator")
def calculator_page():
    st.title("Worklog Time Calculator")
    st.caption("Accepts YYYY-MM-DD HH:MM or DD/MM/YYYY HH:MM (seconds optional).")
    col_start, col_end = st.columns(2)
    with col_start:
        start_text = st.text_input("Start", key="calc_start", placeholder="2024-06-01 09:00")
    with col_end:
        end_text = st.text_input("End", key="calc_end", placeholder="2024-06-01 10:30")
    st.metric("Elapsed", elapsed_between(start_text, end_text))
