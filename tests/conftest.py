"""
Pytest configuration and shared fixtures for soil dashboard tests.
"""

import os
from datetime import date, datetime

import pandas as pd
import pytest

# Headless chart rendering and no real API calls
os.environ.setdefault("MPLBACKEND", "Agg")
os.environ["GEMINI_API_KEY"] = ""

from soil_dashboard.config import Config  # noqa: E402


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.setattr(Config, "GEMINI_API_KEY", None)


@pytest.fixture
def nominal_reading():
    return {"moisture": 65, "ph": 6.8, "temperature": 22, "nutrients": 75}


@pytest.fixture
def now():
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def week_series():
    """Ten days ending 2024-06-15; only the last seven fall in the report window at noon."""
    days = pd.date_range(end=date(2024, 6, 15), periods=10, freq="D")
    return pd.DataFrame(
        {
            "date": [str(d.date()) for d in days],
            "moisture": [40, 40, 40, 60, 62, 64, 74, 76, 78, 80],
            "ph": [6.5] * 10,
            "temperature": [20, 20, 20, 21, 21, 21, 22, 22, 22, 22],
            "nutrients": [80, 80, 80, 80, 80, 80, 80, 80, 80, 80],
        }
    )
