# src/soil_dashboard/main.py
from __future__ import annotations

import argparse
import logging
import sys

import pandas as pd
from rich.console import Console
from rich.table import Table

from .chat import GardenAssistant
from .config import METRICS
from .display import PERSONAS, TREND_STYLES, SEVERITY_STYLES, alert_mascot, format_trend, format_value, metric_label
from .generate_data import generate_soil_data, load_readings
from .learning import relevant_facts
from .logging_config import configure_logging
from .metrics import TIME_PERIODS, calculate_trends, latest_reading, slice_period
from .report import build_weekly_report
from .rules import evaluate_alerts, unacknowledged

logger = logging.getLogger(__name__)


def _make_kv_table(title: str, rows: list[tuple[str, str]]) -> Table:
    t = Table(title=title, show_lines=True)
    t.add_column("Field")
    t.add_column("Value", overflow="fold")
    for k, v in rows:
        t.add_row(k, v)
    return t


def reading_table(reading: dict, persona: str) -> Table:
    title = "How Is My Garden Feeling? 🌱" if persona == "child" else "Current Soil Conditions"
    return _make_kv_table(
        title,
        [(metric_label(m, persona), format_value(m, reading[m])) for m in METRICS],
    )


def trends_table(df: pd.DataFrame, period: str, persona: str) -> Table:
    window = slice_period(df, period)
    trends = calculate_trends(window)

    t = Table(title=f"Soil Trends ({TIME_PERIODS[period]} days)", show_lines=True)
    t.add_column("Metric")
    t.add_column("Trend", no_wrap=True)
    t.add_column("Change", justify="right", no_wrap=True)
    t.add_column("Min", justify="right", no_wrap=True)
    t.add_column("Max", justify="right", no_wrap=True)

    for m in METRICS:
        trend = trends[m]
        style = TREND_STYLES[trend["kind"]]["style"]
        low = format_value(m, window[m].min()) if not window.empty else "N/A"
        high = format_value(m, window[m].max()) if not window.empty else "N/A"
        t.add_row(
            metric_label(m, persona),
            f"[{style}]{trend['kind']}[/{style}]",
            format_trend(trend),
            low,
            high,
        )
    return t


def alerts_table(alerts: list[dict], persona: str) -> Table:
    new_count = len(unacknowledged(alerts))
    t = Table(title=f"Alerts ({new_count} new)", show_lines=True, expand=True)
    t.add_column("Sev", no_wrap=True, width=8)
    t.add_column("Alert", overflow="fold", ratio=3)
    t.add_column("Action", overflow="fold", ratio=2)
    t.add_column("When", no_wrap=True)
    t.add_column("Status", no_wrap=True)

    for a in alerts:
        style = SEVERITY_STYLES[a["severity"]]["style"]
        title = a["title"]
        if persona == "child":
            mascot = alert_mascot(a["kind"])
            title = f"{mascot['emoji']} {mascot['name']} says: {a['title']}"
        t.add_row(
            f"[{style}]{a['severity'].upper()}[/{style}]",
            f"{title}\n{a['message']}",
            a["action"],
            a["timestamp"].strftime("%H:%M"),
            "seen" if a["acknowledged"] else "NEW",
        )

    if not alerts:
        msg = "Your garden is happy and healthy! Keep up the great work! 🌱" if persona == "child" else "All readings within healthy ranges."
        t.add_row("-", msg, "-", "-", "-")
    return t


def weekly_report_table(report: dict, persona: str) -> Table:
    t = Table(title="Weekly Report", show_lines=True, expand=True)
    t.add_column("Section", no_wrap=True, width=16)
    t.add_column("Details", overflow="fold")

    t.add_row("Period", f"{report['period_start']:%Y-%m-%d} → {report['period_end']:%Y-%m-%d}")
    t.add_row(
        "Averages",
        "\n".join(f"{metric_label(m, persona)}: {format_value(m, report['summary'][m])}" for m in METRICS),
    )
    t.add_row("Achievements", "\n".join(report["achievements"]))
    t.add_row("Recommendations", "\n".join(report["recommendations"]))
    t.add_row("Upcoming Tasks", "\n".join(report["upcoming_tasks"]))
    return t


def fun_facts_table(reading: dict) -> Table:
    t = Table(title="Did You Know? 🌻", show_lines=True, expand=True)
    t.add_column("Topic", no_wrap=True, width=18)
    t.add_column("Fact", overflow="fold")
    for fact in relevant_facts(reading):
        t.add_row(fact["category"], fact["fact"])
    return t


def render_dashboard(console: Console, df: pd.DataFrame, persona: str = "elder", period: str = "30days") -> dict:
    """Prints every dashboard panel. Returns the computed pieces for callers that want them."""
    reading = latest_reading(df)
    alerts = evaluate_alerts(reading)
    report = build_weekly_report(df)

    console.print(reading_table(reading, persona))
    console.print()
    console.print(trends_table(df, period, persona))
    console.print()
    console.print(alerts_table(alerts, persona))
    console.print()
    console.print(weekly_report_table(report, persona))

    if persona == "child":
        console.print()
        console.print(fun_facts_table(reading))

    return {"reading": reading, "alerts": alerts, "report": report}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Soil sensor dashboard: trends, alerts and weekly report.")
    parser.add_argument("--persona", choices=PERSONAS, default="elder", help="Dashboard voice (child or elder).")
    parser.add_argument("--days", type=int, default=90, help="Days of synthetic history to generate.")
    parser.add_argument("--period", choices=list(TIME_PERIODS), default="30days", help="Trend window.")
    parser.add_argument("--csv", help="Load readings from a CSV instead of generating them.")
    parser.add_argument("--pdf", nargs="?", const="", default=None, help="Export the weekly report to PDF.")
    parser.add_argument("--ask", help="Ask the garden assistant a question about the current soil.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    console = Console()

    try:
        df = load_readings(args.csv) if args.csv else generate_soil_data(days=args.days)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 2

    header = _make_kv_table(
        "Soil Dashboard – Report Header",
        [
            ("Data", args.csv or "synthetic readings"),
            ("Rows analyzed (days)", str(len(df))),
            ("Date range", f"{df['date'].iloc[0]} → {df['date'].iloc[-1]}" if len(df) else "N/A"),
            ("Persona", args.persona),
        ],
    )
    console.print(header)
    console.print()

    result = render_dashboard(console, df, persona=args.persona, period=args.period)

    if args.pdf is not None:
        from .export_pdf import export_weekly_report

        path = export_weekly_report(
            df,
            report=result["report"],
            alerts=result["alerts"],
            out_path=args.pdf or None,
            persona=args.persona,
        )
        console.print(f"PDF generated: {path}")

    if args.ask:
        reply = GardenAssistant().send_message(args.ask, result["reading"], persona=args.persona)
        console.print()
        console.print(_make_kv_table("Garden Assistant", [("You", args.ask), ("Assistant", reply["message"])]))

    return 0


if __name__ == "__main__":
    sys.exit(main())
