"""Chart builders (Altair) for logged time."""

from __future__ import annotations

from datetime import date

import altair as alt
import pandas as pd


def _format_issue_list(group: pd.DataFrame) -> str:
    seen: set[str] = set()
    items: list[str] = []
    for _, row in group.iterrows():
        key = str(row.get("key") or "").strip()
        if not key or key in seen:
            continue
        summary_val = row.get("summary")
        summary = str(summary_val).strip() if pd.notna(summary_val) else ""
        items.append(f"{key}: {summary}" if summary else key)
        seen.add(key)
    return "\n".join(items)


def daily_hours_frame(worklogs: pd.DataFrame, start: date, end: date) -> pd.DataFrame:
    """One row per calendar day in ``[start, end]`` with logged hours and issues.

    Days without worklogs are kept with zero hours so gaps stay visible.
    """
    all_dates = pd.date_range(start, end, freq="D")
    chart_df = pd.DataFrame({"date": all_dates})
    if worklogs.empty or end < start:
        chart_df["hours"] = 0.0
        chart_df["issues"] = ""
        return chart_df

    agg = (
        worklogs.groupby("day")
        .apply(
            lambda g: pd.Series(
                {
                    "hours": round(float(g["time_spent_seconds"].sum()) / 3600, 2),
                    "issues": _format_issue_list(g),
                }
            ),
            include_groups=False,
        )
        .reset_index()
        .rename(columns={"day": "date"})
    )
    agg["date"] = pd.to_datetime(agg["date"])
    chart_df = chart_df.merge(agg, on="date", how="left")
    chart_df["hours"] = chart_df["hours"].fillna(0.0).astype(float)
    chart_df["issues"] = chart_df["issues"].fillna("").astype(str)
    return chart_df


def daily_hours_chart(worklogs: pd.DataFrame, start: date, end: date):
    chart_df = daily_hours_frame(worklogs, start, end)
    if chart_df.empty:
        return None

    bars = (
        alt.Chart(chart_df)
        .mark_bar(color="#1f77b4")
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("hours:Q", title="Hours Logged"),
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("hours:Q", title="Hours", format=".2f"),
                alt.Tooltip("issues:N", title="Issues"),
            ],
        )
    )

    shading = alt.Chart(pd.DataFrame()).mark_rect()  # default empty rect
    weekend = chart_df[chart_df["date"].dt.weekday.isin([5, 6])][["date"]].copy()
    if not weekend.empty:
        weekend = weekend.assign(date_end=weekend["date"] + pd.Timedelta(days=1))
        shading = alt.Chart(weekend).mark_rect(color="#f2f2f2").encode(x="date:T", x2="date_end:T")

    return (shading + bars).properties(height=260)
