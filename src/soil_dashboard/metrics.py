# src/soil_dashboard/metrics.py
from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .config import BASELINE, METRICS, TREND_STABLE_PCT

logger = logging.getLogger(__name__)

TIME_PERIODS = {
    "7days": 7,
    "30days": 30,
    "90days": 90,
}


def _stable(delta: float = 0.0) -> dict:
    return {"kind": "stable", "delta": float(delta), "percentage": 0.0}


def analyze_trend(values) -> dict:
    """
    Compares the mean of the newer half of `values` against the older half.

    The split point is len // 2, so on odd lengths the older half is the
    smaller one. Returns {kind, delta, percentage} where percentage is the
    relative change rounded to one decimal. kind is "stable" while the
    unrounded change is inside +/- TREND_STABLE_PCT, otherwise "improving"
    or "declining".
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size < 2:
        return _stable()

    mid = arr.size // 2
    first_avg = float(arr[:mid].mean())
    second_avg = float(arr[mid:].mean())
    delta = second_avg - first_avg

    if first_avg == 0:
        logger.debug("Trend baseline mean is zero; reporting stable")
        return _stable(delta)

    raw_pct = delta / first_avg * 100

    # classify before rounding: 1.96% is still stable
    if abs(raw_pct) < TREND_STABLE_PCT:
        kind = "stable"
    elif raw_pct > 0:
        kind = "improving"
    else:
        kind = "declining"

    return {"kind": kind, "delta": delta, "percentage": round(raw_pct, 1)}


def calculate_trends(df: pd.DataFrame) -> dict:
    """One trend per metric column, each computed on its own values."""
    return {m: analyze_trend(df[m]) if m in df.columns else _stable() for m in METRICS}


def compute_averages(df: pd.DataFrame) -> dict:
    """Per-metric mean over the frame. Falls back to the baseline when there are no rows."""
    if df.empty:
        return dict(BASELINE)
    return {m: float(df[m].mean()) for m in METRICS}


def latest_reading(df: pd.DataFrame) -> dict:
    """Newest row as a {metric: value} reading, or the baseline for an empty series."""
    if df.empty:
        return dict(BASELINE)
    last = df.iloc[-1]
    return {m: float(last[m]) for m in METRICS}


def slice_period(df: pd.DataFrame, period: str) -> pd.DataFrame:
    """Newest N days for a chart period ("7days", "30days", "90days")."""
    if period not in TIME_PERIODS:
        raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(TIME_PERIODS)}")
    return df.tail(TIME_PERIODS[period]).reset_index(drop=True)


def build_data_lineage() -> list[dict]:
    """
    Static lineage map for the readings schema (shown in the PDF report).
    """
    return [
        {
            "metric": "Average Moisture",
            "formula": "mean(moisture) over last 7 days",
            "source_columns": "date, moisture",
        },
        {
            "metric": "Average pH",
            "formula": "mean(ph) over last 7 days",
            "source_columns": "date, ph",
        },
        {
            "metric": "Average Temperature",
            "formula": "mean(temperature) over last 7 days",
            "source_columns": "date, temperature",
        },
        {
            "metric": "Average Nutrients",
            "formula": "mean(nutrients) over last 7 days",
            "source_columns": "date, nutrients",
        },
        {
            "metric": "Trend",
            "formula": "(mean(newer half) - mean(older half)) / mean(older half)",
            "source_columns": "one metric column, split at len // 2",
        },
    ]
