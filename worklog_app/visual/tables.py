"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from worklog_app.core.column_config import get_columns
from worklog_app.visual.column_metadata import apply_column_metadata


def add_ticket_link(df: pd.DataFrame, server: str, key_col: str = "key", label: str = "Ticket"):
    if df.empty or key_col not in df.columns:
        return df, {}
    out = df.copy()
    base = server.rstrip("/")
    out[label] = out[key_col].astype(str).apply(lambda k: f"{base}/browse/{k}" if k and k != "nan" else "")
    cfg = {
        label: st.column_config.LinkColumn(
            "Issue Key",
            display_text=r"browse/(.*)$",
            help="Open in Jira",
            width="small",
        )
    }
    return out, cfg


def prepare_table(
    df: pd.DataFrame,
    set_name: str,
    server: str | None = None,
) -> tuple[pd.DataFrame, list[str], dict[str, object]]:
    if df.empty:
        return df, [], {}
    table, cfg = add_ticket_link(df, server) if server else (df, {})
    display_cols = [col for col in get_columns(set_name) if col in table.columns]
    if not display_cols:
        display_cols = [col for col in table.columns if col != "key"]
    return table, display_cols, cfg


def render_table(df: pd.DataFrame, set_name: str, server: str | None = None) -> None:
    prepared, cols, cfg = prepare_table(df, set_name, server)
    if not cols:
        return
    st.dataframe(
        prepared[cols],
        hide_index=True,
        width="stretch",
        column_config=apply_column_metadata(cols, cfg),
    )
