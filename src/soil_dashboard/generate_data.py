# src/soil_dashboard/generate_data.py
from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pandas as pd

from .config import BASELINE, COLUMNS, DAILY_STEP, GENERATION_BOUNDS, METRICS, SEASONAL_AMPLITUDE, Config

logger = logging.getLogger(__name__)


def seasonal_factor(day: date) -> float:
    """sin(2*pi*day_of_year/365): positive in the first half of the year, negative in the second."""
    return float(np.sin(2 * np.pi * day.timetuple().tm_yday / 365.0))


def _clamp(metric: str, value: float) -> float:
    lo, hi = GENERATION_BOUNDS[metric]
    return float(np.clip(value, lo, hi))


def _step(state: dict, day: date) -> dict:
    """
    Advances the random walk by one day.
    Each metric moves by a uniform delta, gets clamped, then the seasonal
    term is layered on (warmer and drier when the factor is positive).
    """
    sf = seasonal_factor(day)
    nxt = {}
    for metric in METRICS:
        step = DAILY_STEP[metric]
        value = _clamp(metric, state[metric] + random.uniform(-step, step))
        value += SEASONAL_AMPLITUDE.get(metric, 0.0) * sf
        nxt[metric] = _clamp(metric, value)
    return nxt


def generate_soil_data(days: int = 90, end_date: date | None = None) -> pd.DataFrame:
    """
    Generates `days` consecutive daily soil readings ending at `end_date` (default today),
    oldest first. Values are rounded to one decimal and stay within GENERATION_BOUNDS.

    Output is a fresh random walk on every call.
    """
    if days <= 0:
        return pd.DataFrame(columns=list(COLUMNS))

    end_date = end_date or date.today()
    start_date = end_date - timedelta(days=days - 1)

    state = dict(BASELINE)
    rows = []
    for i in range(days):
        day = start_date + timedelta(days=i)
        state = _step(state, day)

        row = {"date": str(day)}
        row.update({m: round(state[m], 1) for m in METRICS})
        rows.append(row)

    logger.debug("Generated %d soil readings (%s -> %s)", days, start_date, end_date)
    return pd.DataFrame(rows, columns=list(COLUMNS))


def load_readings(path) -> pd.DataFrame:
    """Reads a readings CSV written by main(), sorted oldest first."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(
            f"Missing data file: {path}\n"
            f"Generate one with: python -m soil_dashboard.generate_data"
        )

    df = pd.read_csv(path)
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path} is missing columns: {', '.join(missing)}")

    df["date"] = df["date"].astype(str)
    return df.sort_values("date").reset_index(drop=True)[list(COLUMNS)]


def main():
    from .logging_config import configure_logging

    configure_logging()

    df = generate_soil_data(days=90)

    out_path = Config.DATA_PATH
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)

    logger.info("Synthetic soil readings generated: %s", out_path)
    logger.info("Date range: %s -> %s (%d days)", df["date"].iloc[0], df["date"].iloc[-1], len(df))


if __name__ == "__main__":
    main()
