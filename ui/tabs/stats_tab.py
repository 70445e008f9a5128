from datetime import timedelta
from typing import List

import pandas as pd
import plotly.express as px
import streamlit as st

from core.models import HeatmapCell
from core.stats import ChartPeriod
from core.time_utils import now_in
from ui.runtime import call_or_stop

HEATMAP_COLORS = ["#e8f5e9", "#a5d6a7", "#43a047", "#1b5e20"]

def heatmap_grid(cells: List[HeatmapCell]) -> pd.DataFrame:
    """Levels pivoted to weekday rows (Mon=0) and calendar-week columns; days outside the window are NaN."""
    df = pd.DataFrame([{"date": c.date, "level": c.level} for c in cells])
    first_monday = df["date"].min() - timedelta(days=df["date"].min().weekday())
    df["week"] = df["date"].map(lambda d: (d - first_monday).days // 7)
    df["weekday"] = df["date"].map(lambda d: d.weekday())
    return df.pivot(index="weekday", columns="week", values="level").reindex(range(7))

def render_stats_tab(settings, tz, owner: str):
    st.header("📊 Statistics")
    period = st.segmented_control("Period", options=[p.value for p in ChartPeriod],
                                  default=ChartPeriod.WEEK.value, key="stats_period") or ChartPeriod.WEEK.value

    now = now_in(tz)
    dash = call_or_stop(settings, tz, lambda s: s.stats.get_dashboard(owner, period, now, settings.heatmap_days),
                        "Loading statistics failed")
    call_or_stop(settings, tz, lambda s: s.profiles.sync_streak(owner, dash.streak), "Saving streak failed")

    c1, c2, c3 = st.columns(3)
    with c1: st.metric("🔥 Current Streak", f"{dash.streak.current_streak} days")
    with c2: st.metric("🏆 Best Streak", f"{dash.streak.max_streak} days")
    with c3: st.metric("📅 This Month", f"{dash.monthly.rate}%", f"{dash.monthly.completed}/{dash.monthly.total}")

    st.subheader("Habit Heatmap")
    grid = heatmap_grid(dash.heatmap)
    fig_hm = px.imshow(grid, color_continuous_scale=HEATMAP_COLORS, zmin=0, zmax=3, aspect="equal")
    fig_hm.update_layout(height=260, coloraxis_showscale=False, xaxis_visible=False, yaxis_visible=False)
    st.plotly_chart(fig_hm, use_container_width=True)

    st.subheader("Focus Minutes")
    chart_df = pd.DataFrame([{"bucket": p.bucket_label, "minutes": p.value} for p in dash.chart])
    fig = px.area(chart_df, x="bucket", y="minutes", markers=True)
    fig.update_layout(height=320, xaxis_title="", yaxis_title="minutes")
    st.plotly_chart(fig, use_container_width=True)
