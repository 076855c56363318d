# src/soil_dashboard/rules.py
from __future__ import annotations

from datetime import datetime, timedelta

# -------------------------
# Alert thresholds
# -------------------------
MOISTURE_LOW = 50
MOISTURE_CRITICAL = 30
PH_LOW = 6.0
PH_HIGH = 7.5
PH_CRITICAL_LOW = 5.5
PH_CRITICAL_HIGH = 8.0
TEMP_LOW = 15
TEMP_HIGH = 30
TEMP_CRITICAL_LOW = 10
TEMP_CRITICAL_HIGH = 35
NUTRIENTS_LOW = 60
NUTRIENTS_CRITICAL = 40
NUTRIENTS_SOFT = 50  # above this a nutrients alert starts acknowledged

ALERT_ACTIONS = {
    "lowMoisture": "Water Garden",
    "phImbalance": "Adjust pH",
    "tempExtreme": "Monitor Temperature",
    "lowNutrients": "Apply Fertilizer",
}


def _alert(alert_id, kind, severity, title, message, timestamp, acknowledged=False) -> dict:
    return {
        "id": alert_id,
        "kind": kind,
        "severity": severity,
        "title": title,
        "message": message,
        "action": ALERT_ACTIONS[kind],
        "timestamp": timestamp,
        "acknowledged": acknowledged,
    }


def evaluate_alerts(reading: dict, now: datetime | None = None) -> list[dict]:
    """
    Threshold checks against a single reading.
    Input: {moisture, ph, temperature, nutrients}
    Output: fresh list of alerts (at most one per metric), in metric order:
      {id, kind, severity, title, message, action, timestamp, acknowledged}

    Timestamps are display offsets from `now`, not measurement times.
    """
    now = now or datetime.now()
    alerts: list[dict] = []

    moisture = float(reading["moisture"])
    ph = float(reading["ph"])
    temperature = float(reading["temperature"])
    nutrients = float(reading["nutrients"])

    # -------------------------
    # MOISTURE
    # -------------------------
    if moisture < MOISTURE_LOW:
        alerts.append(_alert(
            "alert-moisture",
            "lowMoisture",
            "high" if moisture < MOISTURE_CRITICAL else "medium",
            "Low Moisture Alert",
            "Soil moisture is below optimal levels",
            now - timedelta(hours=1),
        ))

    # -------------------------
    # pH
    # -------------------------
    if ph < PH_LOW or ph > PH_HIGH:
        alerts.append(_alert(
            "alert-ph",
            "phImbalance",
            "high" if (ph < PH_CRITICAL_LOW or ph > PH_CRITICAL_HIGH) else "medium",
            "pH Imbalance",
            "Soil pH is outside optimal range",
            now - timedelta(hours=3),
        ))

    # -------------------------
    # TEMPERATURE
    # -------------------------
    if temperature < TEMP_LOW or temperature > TEMP_HIGH:
        alerts.append(_alert(
            "alert-temp",
            "tempExtreme",
            "high" if (temperature < TEMP_CRITICAL_LOW or temperature > TEMP_CRITICAL_HIGH) else "medium",
            "Temperature Alert",
            "Soil temperature is outside optimal range",
            now - timedelta(minutes=30),
        ))

    # -------------------------
    # NUTRIENTS (soft alert above NUTRIENTS_SOFT)
    # -------------------------
    if nutrients < NUTRIENTS_LOW:
        alerts.append(_alert(
            "alert-nutrients",
            "lowNutrients",
            "high" if nutrients < NUTRIENTS_CRITICAL else "low",
            "Low Nutrients",
            "Nutrient levels are below recommended values",
            now - timedelta(hours=6),
            acknowledged=nutrients > NUTRIENTS_SOFT,
        ))

    return alerts


def acknowledge_alert(alerts: list[dict], alert_id: str) -> bool:
    """Marks the alert with `alert_id` as acknowledged. Returns False if it isn't in the list."""
    for a in alerts:
        if a["id"] == alert_id:
            a["acknowledged"] = True
            return True
    return False


def unacknowledged(alerts: list[dict]) -> list[dict]:
    return [a for a in alerts if not a["acknowledged"]]


# -------------------------
# Weekly report rules
# -------------------------
DEFAULT_ACHIEVEMENT = "Garden Explorer - Learning every day!"
DEFAULT_RECOMMENDATION = "Your garden is performing well! Keep up the great work."


def derive_achievements(summary: dict, trends: dict) -> list[str]:
    """
    Recognition strings earned by the week's averages and the moisture trend.
    Falls back to DEFAULT_ACHIEVEMENT when nothing qualifies.
    """
    achievements: list[str] = []

    if summary["moisture"] > 70:
        achievements.append("Water Master - Kept soil perfectly moist!")
    if 6.0 <= summary["ph"] <= 7.0:
        achievements.append("pH Perfect - Balanced soil chemistry!")
    if 18 <= summary["temperature"] <= 25:
        achievements.append("Temperature Keeper - Ideal growing conditions!")
    if summary["nutrients"] > 75:
        achievements.append("Plant Feeder - Well-nourished garden!")
    if trends["moisture"]["kind"] == "improving":
        achievements.append("Improvement Expert - Moisture levels getting better!")

    return achievements or [DEFAULT_ACHIEVEMENT]


def derive_recommendations(summary: dict) -> list[str]:
    recommendations: list[str] = []

    if summary["moisture"] < 50:
        recommendations.append("Increase watering frequency to maintain optimal soil moisture levels.")

    if summary["ph"] < 6.0:
        recommendations.append("Consider adding lime to raise soil pH to optimal range (6.0-7.0).")
    elif summary["ph"] > 7.5:
        recommendations.append("Consider adding organic matter to lower soil pH to optimal range.")

    if summary["nutrients"] < 60:
        recommendations.append("Apply balanced organic fertilizer to boost nutrient levels.")

    if summary["temperature"] < 15:
        recommendations.append("Consider using mulch to help regulate soil temperature.")

    return recommendations or [DEFAULT_RECOMMENDATION]
