# src/soil_dashboard/config.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Repo-relative paths
PROJECT_ROOT = Path(__file__).resolve().parents[2]

METRICS = ("moisture", "ph", "temperature", "nutrients")
COLUMNS = ("date",) + METRICS

# Starting point of the random walk, also the fallback for empty windows
BASELINE = {
    "moisture": 65.0,
    "ph": 6.8,
    "temperature": 22.0,
    "nutrients": 75.0,
}

# Max absolute daily change per metric
DAILY_STEP = {
    "moisture": 5.0,
    "ph": 0.15,
    "temperature": 2.0,
    "nutrients": 4.0,
}

# Clamp bounds used while generating
GENERATION_BOUNDS = {
    "moisture": (20.0, 100.0),
    "ph": (5.0, 8.0),
    "temperature": (10.0, 35.0),
    "nutrients": (30.0, 100.0),
}

# Seasonal amplitude applied as amplitude * sin(2*pi*day_of_year/365)
SEASONAL_AMPLITUDE = {
    "moisture": -10.0,
    "temperature": 5.0,
}

TREND_STABLE_PCT = 2.0
REPORT_WINDOW_DAYS = 7


class Config:
    # Chat assistant (Gemini via its OpenAI-compatible endpoint)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_BASE_URL = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
    )
    CHAT_RATE_LIMIT = int(os.getenv("CHAT_RATE_LIMIT", "10"))  # requests per window
    CHAT_RATE_WINDOW = float(os.getenv("CHAT_RATE_WINDOW", "60"))  # seconds
    CHAT_HISTORY_TURNS = int(os.getenv("CHAT_HISTORY_TURNS", "6"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Outputs
    DATA_PATH = Path(os.getenv("SOIL_DATA_PATH", str(PROJECT_ROOT / "data" / "soil_readings.csv")))
    REPORT_PATH = Path(os.getenv("SOIL_REPORT_PATH", str(PROJECT_ROOT / "reports" / "Weekly_Soil_Report.pdf")))
