# src/soil_dashboard/display.py
"""
Presentation lookups shared by the console dashboard and the PDF report.

One table per concept (metric, alert kind, severity, trend) so the child
and elder views read from the same place.
"""
from __future__ import annotations

PERSONAS = ("child", "elder")

METRICS = {
    "moisture": {
        "unit": "%",
        "color": "#3B82F6",
        "emoji": "💧",
        "labels": {"child": "Water Level", "elder": "Soil Moisture"},
    },
    "ph": {
        "unit": "",
        "color": "#8B5CF6",
        "emoji": "🧪",
        "labels": {"child": "Soil Happiness", "elder": "Soil pH"},
    },
    "temperature": {
        "unit": "°C",
        "color": "#F97316",
        "emoji": "🌡️",
        "labels": {"child": "Warmth", "elder": "Soil Temperature"},
    },
    "nutrients": {
        "unit": "%",
        "color": "#10B981",
        "emoji": "🍎",
        "labels": {"child": "Plant Food", "elder": "Nutrient Level"},
    },
}

# Child view introduces each alert through a mascot
ALERT_MASCOTS = {
    "lowMoisture": {"emoji": "💧", "name": "Dewey"},
    "phImbalance": {"emoji": "🪱", "name": "Soily"},
    "tempExtreme": {"emoji": "🌡️", "name": "Temp"},
    "lowNutrients": {"emoji": "🍎", "name": "Nutri"},
}
DEFAULT_MASCOT = {"emoji": "🌱", "name": "Garden"}

SEVERITY_STYLES = {
    "high": {"style": "bold red", "rgb": (1.00, 0.80, 0.80)},
    "medium": {"style": "yellow", "rgb": (1.00, 0.96, 0.70)},
    "low": {"style": "cyan", "rgb": (0.80, 0.93, 0.80)},
}

TREND_STYLES = {
    "improving": {"arrow": "↑", "style": "green"},
    "stable": {"arrow": "→", "style": "white"},
    "declining": {"arrow": "↓", "style": "red"},
}


def check_persona(persona: str) -> str:
    if persona not in PERSONAS:
        raise ValueError(f"Unknown persona {persona!r}; expected one of {', '.join(PERSONAS)}")
    return persona


def metric_label(metric: str, persona: str) -> str:
    """e.g. metric_label("ph", "child") -> "🧪 Soil Happiness"."""
    info = METRICS[metric]
    label = info["labels"][check_persona(persona)]
    if persona == "child":
        return f"{info['emoji']} {label}"
    return label


def format_value(metric: str, value: float) -> str:
    return f"{float(value):.1f}{METRICS[metric]['unit']}"


def format_trend(trend: dict) -> str:
    arrow = TREND_STYLES[trend["kind"]]["arrow"]
    return f"{arrow} {trend['percentage']:+.1f}%"


def alert_mascot(kind: str) -> dict:
    return ALERT_MASCOTS.get(kind, DEFAULT_MASCOT)
