"""Tests for report.py: weekly window, averages, trends and narrative."""

from datetime import datetime

import pandas as pd
import pytest

from soil_dashboard.config import BASELINE, METRICS
from soil_dashboard.generate_data import generate_soil_data
from soil_dashboard.metrics import analyze_trend
from soil_dashboard.report import UPCOMING_TASKS, build_weekly_report, week_window
from soil_dashboard.rules import DEFAULT_RECOMMENDATION


class TestWeekWindow:
    def test_keeps_last_seven_days_at_noon(self, week_series, now):
        window = week_window(week_series, now)
        assert list(window["date"]) == [f"2024-06-{d:02d}" for d in range(9, 16)]

    def test_window_start_is_inclusive(self, week_series):
        midnight = datetime(2024, 6, 15)
        window = week_window(week_series, midnight)
        assert window["date"].iloc[0] == "2024-06-08"
        assert len(window) == 8

    def test_future_rows_excluded(self, week_series):
        window = week_window(week_series, datetime(2024, 6, 12, 12))
        assert window["date"].iloc[-1] == "2024-06-12"


class TestBuildWeeklyReport:
    def test_empty_series_uses_baseline(self):
        report = build_weekly_report(pd.DataFrame())
        assert report["summary"] == BASELINE
        # baseline pH and temperature already earn their achievements
        assert report["achievements"] == [
            "pH Perfect - Balanced soil chemistry!",
            "Temperature Keeper - Ideal growing conditions!",
        ]
        assert report["recommendations"] == [DEFAULT_RECOMMENDATION]
        assert all(t["kind"] == "stable" for t in report["trends"].values())

    def test_stale_series_falls_back_to_baseline(self, week_series):
        report = build_weekly_report(week_series, now=datetime(2025, 1, 1))
        assert report["summary"] == BASELINE
        assert report["days_in_window"] == 0

    def test_averages_over_window(self, week_series, now):
        report = build_weekly_report(week_series, now=now)
        assert report["days_in_window"] == 7
        assert report["summary"]["moisture"] == pytest.approx(494 / 7)
        assert report["summary"]["ph"] == pytest.approx(6.5)

    def test_trends_match_per_metric_analysis(self, week_series, now):
        report = build_weekly_report(week_series, now=now)
        window = week_window(week_series, now)
        for m in METRICS:
            assert report["trends"][m] == analyze_trend(window[m])

    def test_narrative(self, week_series, now):
        report = build_weekly_report(week_series, now=now)
        assert report["achievements"] == [
            "Water Master - Kept soil perfectly moist!",
            "pH Perfect - Balanced soil chemistry!",
            "Temperature Keeper - Ideal growing conditions!",
            "Plant Feeder - Well-nourished garden!",
            "Improvement Expert - Moisture levels getting better!",
        ]
        assert report["recommendations"] == [DEFAULT_RECOMMENDATION]

    def test_period_and_tasks(self, week_series, now):
        report = build_weekly_report(week_series, now=now)
        assert report["period_end"] == now
        assert (report["period_end"] - report["period_start"]).days == 7
        assert report["upcoming_tasks"] == UPCOMING_TASKS[:3]
        assert report["id"] == f"report-{int(now.timestamp() * 1000)}"

    def test_generated_series(self):
        df = generate_soil_data(90)
        report = build_weekly_report(df)
        assert 7 <= report["days_in_window"] <= 8
        window = week_window(df, report["period_end"])
        for m in METRICS:
            assert report["trends"][m] == analyze_trend(window[m])
