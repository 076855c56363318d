# src/soil_dashboard/report.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pandas as pd

from .config import COLUMNS, REPORT_WINDOW_DAYS
from .metrics import calculate_trends, compute_averages
from .rules import derive_achievements, derive_recommendations

logger = logging.getLogger(__name__)

UPCOMING_TASKS = [
    "Check soil moisture levels daily",
    "Apply organic compost to improve soil structure",
    "Monitor plant growth and health indicators",
    "Test soil pH levels mid-week",
    "Inspect for pest activity and plant diseases",
]


def week_window(df: pd.DataFrame, now: datetime) -> pd.DataFrame:
    """Rows dated within [now - 7 days, now], inclusive on both ends."""
    if df.empty:
        return pd.DataFrame(columns=list(COLUMNS))

    start = now - timedelta(days=REPORT_WINDOW_DAYS)
    dates = pd.to_datetime(df["date"])
    mask = (dates >= start) & (dates <= now)
    return df.loc[mask].reset_index(drop=True)


def build_weekly_report(df: pd.DataFrame, now: datetime | None = None) -> dict:
    """
    Summarizes the last week of readings:
      averages (baseline when the week is empty), per-metric trends,
      rule-based achievements and recommendations, and the task checklist.
    """
    now = now or datetime.now()
    week = week_window(df, now)

    summary = compute_averages(week)
    trends = calculate_trends(week)

    logger.debug("Weekly report over %d of %d rows", len(week), len(df))

    return {
        "id": f"report-{int(now.timestamp() * 1000)}",
        "period_start": now - timedelta(days=REPORT_WINDOW_DAYS),
        "period_end": now,
        "days_in_window": len(week),
        "summary": summary,
        "trends": trends,
        "achievements": derive_achievements(summary, trends),
        "recommendations": derive_recommendations(summary),
        "upcoming_tasks": UPCOMING_TASKS[:3],
    }
