# Project: weather-trends
# Owner: GreenUnicorn
"""Tests for chart.py — figure building and terminal renderers."""

from conftest import make_response
from weather_trends.chart import (
    build_figure,
    render_legend,
    render_regression_table,
    write_html,
)
from weather_trends.metrics import Category
from weather_trends.models import LegendEntry
from weather_trends.organize import organize
from weather_trends.traces import TraceAssembler


def _organized():
    return organize([
        make_response("Boston", metrics=("AVERAGE_TEMPERATURE", "SNOWFALL")),
        make_response("Denver", metrics=("AVERAGE_TEMPERATURE", "SNOWFALL"), regressions={}),
    ])


# ---------------------------------------------------------------------------
# build_figure
# ---------------------------------------------------------------------------

def test_figure_has_one_scatter_per_trace():
    traces = TraceAssembler(horizon_days=60).build_traces(_organized(), Category.TEMPERATURE)
    fig = build_figure(traces)
    assert len(fig.data) == len(traces)
    assert [s.name for s in fig.data] == [t.label for t in traces]


def test_figure_styles_follow_stroke_weight():
    traces = TraceAssembler(horizon_days=60).build_traces(_organized(), Category.TEMPERATURE)
    observed, regression = build_figure(traces).data[:2]
    assert observed.mode == "lines+markers"
    assert observed.line.width == 2
    assert regression.mode == "lines"
    assert regression.line.width == 3
    assert observed.line.color == regression.line.color == traces[0].color


def test_figure_title_and_hidden_legend():
    fig = build_figure([], title="Wind")
    assert fig.layout.title.text == "Wind"
    assert fig.layout.showlegend is False
    assert fig.layout.xaxis.type == "date"


def test_write_html(tmp_path):
    traces = TraceAssembler(horizon_days=0).build_traces(_organized(), Category.TEMPERATURE)
    path = write_html(build_figure(traces), tmp_path / "out" / "chart.html")
    assert path.exists()
    assert "plotly" in path.read_text()


# ---------------------------------------------------------------------------
# Text renderers
# ---------------------------------------------------------------------------

def test_render_legend_lines():
    text = render_legend([LegendEntry("a", "#111111"), LegendEntry("b", "#222222")])
    lines = text.splitlines()
    assert len(lines) == 2
    assert "#111111" in lines[0] and lines[0].endswith("a")


def test_render_legend_empty():
    assert render_legend([]) == "(no series in this category)"


def test_regression_table_rows():
    table = render_regression_table(_organized(), Category.TEMPERATURE)
    assert table.splitlines()[0] == "Temperature regressions"
    boston = next(line for line in table.splitlines() if line.startswith("Boston"))
    denver = next(line for line in table.splitlines() if line.startswith("Denver"))
    assert "linear" in boston and "0.42" in boston and "yes" in boston
    assert "10 Apr 2020" in boston
    assert "error" in denver


def test_regression_table_only_category_rows():
    table = render_regression_table(_organized(), Category.PRECIPITATION_OR_SNOW)
    assert "SNOWFALL" in table
    assert "AVERAGE_TEMPERATURE" not in table


def test_regression_table_empty_category():
    table = render_regression_table(_organized(), Category.WIND)
    assert table.splitlines()[0] == "Wind regressions"
    assert "Location" in table
