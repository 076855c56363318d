# src/soil_dashboard/export_pdf.py
from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
from PIL import Image as PILImage
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    Image,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from .config import METRICS, Config
from .display import METRICS as METRIC_DISPLAY
from .display import SEVERITY_STYLES, check_persona, format_value, metric_label
from .metrics import build_data_lineage, latest_reading
from .report import build_weekly_report
from .rules import evaluate_alerts

logger = logging.getLogger(__name__)

CHART_DAYS = 30

# Healthy ranges used for the traffic-light coloring of the averages table
OK_RANGES = {
    "moisture": (50, 80),
    "ph": (6.0, 7.5),
    "temperature": (15, 30),
    "nutrients": (60, 100),
}

GREEN = colors.Color(0.80, 0.93, 0.80)
YELLOW = colors.Color(1.00, 0.96, 0.70)
RED = colors.Color(1.00, 0.80, 0.80)


# Body cells longer than this become wrapping Paragraphs
WRAP_MIN_CHARS = 18

CELL_STYLE = ParagraphStyle(
    "SoilCell",
    parent=getSampleStyleSheet()["BodyText"],
    fontSize=8.5,
    leading=10.5,
    splitLongWords=False,
)


def _cell(value, wrap: bool):
    text = "" if value is None else str(value)
    if wrap and len(text) > WRAP_MIN_CHARS:
        return Paragraph(text.replace("\n", "<br/>"), CELL_STYLE)
    return text


def _table_cells(rows, wrap_cells=True):
    """Header row stays plain text; long body cells wrap inside their column."""
    header, *body = rows
    return [[_cell(v, False) for v in header]] + [[_cell(v, wrap_cells) for v in row] for row in body]


def make_table(data, doc_width, col_fracs, repeat_header=True, wrap_cells=True):
    total = sum(col_fracs) if col_fracs else 1.0
    col_widths = [doc_width * c / total for c in col_fracs]

    t = Table(
        _table_cells(data, wrap_cells=wrap_cells),
        colWidths=col_widths,
        hAlign="LEFT",
        repeatRows=1 if repeat_header else 0,
        splitByRow=1,
    )
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.Color(0.86, 0.92, 0.86)),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8.5),
                ("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), 4),
                ("RIGHTPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return t


def average_color(metric: str, value: float):
    """GREEN inside the healthy range, YELLOW within 10% of it, RED beyond."""
    lo, hi = OK_RANGES[metric]
    if lo <= value <= hi:
        return GREEN
    margin = (hi - lo) * 0.10
    if lo - margin <= value <= hi + margin:
        return YELLOW
    return RED


def apply_average_colors(table_obj, summary: dict):
    """Colors the Average column (col 1) row by row, in METRICS order."""
    styles = []
    for row, metric in enumerate(METRICS, start=1):
        fill = average_color(metric, float(summary[metric]))
        styles.append(("BACKGROUND", (1, row), (1, row), fill))
    table_obj.setStyle(TableStyle(styles))


def _save_line_chart(df, metric, title, out_path: Path):
    plt.figure(figsize=(10, 3.2))
    plt.plot(pd.to_datetime(df["date"]), df[metric], color=METRIC_DISPLAY[metric]["color"])
    plt.title(title, fontsize=11)
    plt.xlabel("Date")
    plt.ylabel(metric)
    plt.xticks(rotation=25, ha="right")
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()


def build_charts(df: pd.DataFrame, chart_dir: Path) -> dict:
    """One PNG per metric over the last CHART_DAYS rows. Returns {metric: path}."""
    chart_dir.mkdir(exist_ok=True, parents=True)
    d = df.tail(CHART_DAYS)

    paths = {}
    if d.empty:
        return paths

    for metric in METRICS:
        path = chart_dir / f"chart_{metric}.png"
        title = f"{metric_label(metric, 'elder')} (last {CHART_DAYS} days)"
        _save_line_chart(d, metric, title, path)
        paths[metric] = path
    return paths


def add_chart(story, img_path: Path, width):
    if not img_path.exists():
        return
    with PILImage.open(img_path) as im:
        w, h = im.size
    story.append(Image(str(img_path), width=width, height=width * h / float(w)))


def export_weekly_report(
    df: pd.DataFrame,
    report: dict | None = None,
    alerts: list[dict] | None = None,
    out_path: Path | None = None,
    persona: str = "elder",
) -> Path:
    """
    Renders the weekly report (plus current alerts and trend charts) to PDF.
    Missing report/alerts are derived from `df`. Returns the PDF path.
    """
    check_persona(persona)

    out_path = Path(out_path or Config.REPORT_PATH)
    out_path.parent.mkdir(exist_ok=True, parents=True)
    chart_dir = out_path.parent / "charts"

    report = report or build_weekly_report(df)
    if alerts is None:
        alerts = evaluate_alerts(latest_reading(df))

    chart_paths = build_charts(df, chart_dir)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("Title", parent=styles["Heading1"], fontSize=16, spaceAfter=10)
    h_style = ParagraphStyle("H", parent=styles["Heading2"], fontSize=12, spaceBefore=12, spaceAfter=6)
    body = ParagraphStyle("Body", parent=styles["BodyText"], fontSize=9, leading=12)

    doc = SimpleDocTemplate(
        str(out_path),
        pagesize=letter,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title="Weekly Soil Report",
    )

    story = []
    W = doc.width

    # Page 1: Summary
    story.append(Paragraph("Weekly Soil Report", title_style))
    ctx = [
        ["Field", "Value"],
        ["Report", report["id"]],
        ["Period", f"{report['period_start']:%Y-%m-%d} → {report['period_end']:%Y-%m-%d}"],
        ["Days in window", str(report.get("days_in_window", ""))],
        ["Readings on file", str(len(df))],
    ]
    story.append(make_table(ctx, W, col_fracs=[0.28, 0.72]))

    story.append(Paragraph("Weekly Averages and Trends", h_style))
    avg_rows = [["Metric", "Average", "Trend", "Change"]]
    for metric in METRICS:
        trend = report["trends"][metric]
        avg_rows.append(
            [
                metric_label(metric, "elder"),
                format_value(metric, report["summary"][metric]),
                trend["kind"].capitalize(),
                f"{trend['percentage']:+.1f}%",
            ]
        )
    avg_table = make_table(avg_rows, W, col_fracs=[0.34, 0.22, 0.22, 0.22], wrap_cells=False)
    apply_average_colors(avg_table, report["summary"])
    story.append(avg_table)

    story.append(Paragraph("Alerts", h_style))
    if alerts:
        alert_rows = [["Severity", "Alert", "Action", "Status"]]
        for a in alerts:
            alert_rows.append(
                [a["severity"].upper(), a["title"], a["action"], "Seen" if a["acknowledged"] else "New"]
            )
        alert_table = make_table(alert_rows, W, col_fracs=[0.16, 0.38, 0.30, 0.16])
        fills = [
            ("BACKGROUND", (0, i), (0, i), colors.Color(*SEVERITY_STYLES[a["severity"]]["rgb"]))
            for i, a in enumerate(alerts, start=1)
        ]
        alert_table.setStyle(TableStyle(fills))
        story.append(alert_table)
    else:
        story.append(Paragraph("No active alerts. All readings are within their healthy ranges.", body))

    for heading, key in [
        ("Achievements", "achievements"),
        ("Recommendations", "recommendations"),
        ("Upcoming Tasks", "upcoming_tasks"),
    ]:
        story.append(Paragraph(heading, h_style))
        for line in report[key]:
            story.append(Paragraph(f"• {line}", body))

    story.append(Paragraph("How These Figures Are Calculated", h_style))
    lineage_rows = [["Figure", "Formula", "Source Columns"]]
    for item in build_data_lineage():
        lineage_rows.append([item["metric"], item["formula"], item["source_columns"]])
    story.append(make_table(lineage_rows, W, col_fracs=[0.26, 0.44, 0.30]))

    # Page 2: Charts
    if chart_paths:
        story.append(PageBreak())
        story.append(Paragraph(f"Soil Trends (last {CHART_DAYS} days)", h_style))
        for metric in METRICS:
            p = chart_paths.get(metric)
            if p:
                story.append(Paragraph(METRIC_DISPLAY[metric]["labels"][persona], ParagraphStyle(f"Chart_{metric}", parent=styles["Heading3"], fontSize=10)))
                add_chart(story, p, W)
                story.append(Spacer(1, 10))

    doc.build(story)
    logger.info("PDF generated: %s", out_path)
    return out_path
