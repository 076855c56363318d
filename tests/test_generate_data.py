"""Tests for generate_data.py: synthetic random-walk readings."""

from datetime import date, timedelta

import pandas as pd
import pytest

from soil_dashboard.config import COLUMNS, GENERATION_BOUNDS, METRICS
from soil_dashboard.generate_data import generate_soil_data, load_readings, seasonal_factor


class TestGenerateSoilData:
    @pytest.mark.parametrize("days", [1, 7, 90])
    def test_row_count(self, days):
        assert len(generate_soil_data(days)) == days

    @pytest.mark.parametrize("days", [0, -3])
    def test_non_positive_days_is_empty(self, days):
        df = generate_soil_data(days)
        assert df.empty
        assert list(df.columns) == list(COLUMNS)

    def test_dates_ascending_and_end_today(self):
        df = generate_soil_data(30)
        dates = pd.to_datetime(df["date"])
        assert dates.is_monotonic_increasing
        assert dates.is_unique
        assert (dates.diff().dropna() == pd.Timedelta(days=1)).all()
        assert df["date"].iloc[-1] == str(date.today())

    def test_custom_end_date(self):
        end = date(2024, 1, 10)
        df = generate_soil_data(10, end_date=end)
        assert df["date"].iloc[0] == "2024-01-01"
        assert df["date"].iloc[-1] == "2024-01-10"

    def test_values_within_bounds(self):
        # A full year exercises both seasonal extremes
        df = generate_soil_data(365)
        for metric in METRICS:
            lo, hi = GENERATION_BOUNDS[metric]
            assert df[metric].min() >= lo
            assert df[metric].max() <= hi

    def test_values_rounded_to_one_decimal(self):
        df = generate_soil_data(20)
        for metric in METRICS:
            assert ((df[metric] * 10).round() - df[metric] * 10).abs().max() < 1e-6

    def test_walk_moves_in_small_steps(self):
        df = generate_soil_data(60)
        # no seasonal term on these two; one decimal of rounding slack
        assert df["ph"].diff().abs().max() <= 0.15 + 0.1 + 1e-9
        assert df["nutrients"].diff().abs().max() <= 4 + 0.1 + 1e-9


class TestSeasonalFactor:
    def test_peaks_near_spring_and_autumn(self):
        assert seasonal_factor(date(2023, 4, 1)) > 0.99
        assert seasonal_factor(date(2023, 10, 1)) < -0.99

    def test_near_zero_at_new_year(self):
        assert abs(seasonal_factor(date(2023, 1, 1))) < 0.02


class TestLoadReadings:
    def test_round_trip_through_csv(self, tmp_path):
        df = generate_soil_data(5)
        path = tmp_path / "readings.csv"
        df.sample(frac=1).to_csv(path, index=False)

        loaded = load_readings(path)
        assert list(loaded["date"]) == list(df["date"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_readings(tmp_path / "nope.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"date": ["2024-01-01"], "moisture": [50]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="ph"):
            load_readings(path)
