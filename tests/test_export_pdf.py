"""Tests for export_pdf.py: weekly report PDF with charts."""

import pandas as pd
import pytest
from reportlab.platypus import Paragraph

from soil_dashboard.export_pdf import (
    GREEN,
    RED,
    YELLOW,
    _table_cells,
    average_color,
    build_charts,
    export_weekly_report,
)
from soil_dashboard.generate_data import generate_soil_data
from soil_dashboard.report import build_weekly_report
from soil_dashboard.rules import evaluate_alerts


class TestAverageColor:
    def test_in_range(self):
        assert average_color("ph", 6.8) == GREEN

    def test_near_range(self):
        assert average_color("moisture", 47) == YELLOW

    def test_far_out_of_range(self):
        assert average_color("temperature", 5) == RED


def test_table_cells_wrap_long_body_text_only():
    long_text = "Soil moisture is below optimal levels"
    cells = _table_cells([["Alert", long_text], ["short", long_text], [None, 3]])
    assert cells[0] == ["Alert", long_text]
    assert cells[1][0] == "short"
    assert isinstance(cells[1][1], Paragraph)
    assert cells[2] == ["", "3"]


def test_table_cells_without_wrapping():
    cells = _table_cells([["h"], ["x" * 40]], wrap_cells=False)
    assert cells[1] == ["x" * 40]


def test_build_charts_one_per_metric(tmp_path):
    paths = build_charts(generate_soil_data(40), tmp_path / "charts")
    assert set(paths) == {"moisture", "ph", "temperature", "nutrients"}
    assert all(p.exists() for p in paths.values())


def test_build_charts_empty_series(tmp_path):
    assert build_charts(pd.DataFrame(), tmp_path / "charts") == {}


def test_export_writes_pdf(tmp_path):
    df = generate_soil_data(30)
    out = export_weekly_report(df, out_path=tmp_path / "out" / "weekly.pdf")
    assert out.exists()
    assert out.read_bytes().startswith(b"%PDF")
    assert (tmp_path / "out" / "charts" / "chart_moisture.png").exists()


def test_export_with_precomputed_pieces(tmp_path):
    df = generate_soil_data(10)
    report = build_weekly_report(df)
    alerts = evaluate_alerts({"moisture": 20, "ph": 9, "temperature": 40, "nutrients": 55})
    out = export_weekly_report(df, report=report, alerts=alerts, out_path=tmp_path / "r.pdf", persona="child")
    assert out.stat().st_size > 0


def test_export_empty_series(tmp_path):
    out = export_weekly_report(pd.DataFrame(), out_path=tmp_path / "empty.pdf")
    assert out.exists()


def test_export_unknown_persona(tmp_path):
    with pytest.raises(ValueError):
        export_weekly_report(generate_soil_data(5), out_path=tmp_path / "x.pdf", persona="pirate")
