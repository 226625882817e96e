# Project: weather-trends
# Owner: GreenUnicorn
"""
chart.py — Draw traces with plotly and render text summaries for the terminal.

build_figure() is the rendering surface: it receives the ordered trace list
and owns axis scaling and interaction. The text helpers return strings
ready to print.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import plotly.graph_objects as go

from weather_trends.metrics import Category, classify, degree_text, to_nearest_thousandth
from weather_trends.models import LegendEntry, OrganizedDataset, StrokeWeight, Trace
from weather_trends.utils import fmt_day

CATEGORY_TITLES = {
    Category.TEMPERATURE: "Temperature",
    Category.PRECIPITATION_OR_SNOW: "Precipitation & Snow",
    Category.WIND: "Wind",
    Category.UNCLASSIFIED: "Other",
}

PLOTLY_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(
        family="-apple-system, BlinkMacSystemFont, 'SF Pro Display', sans-serif",
        color="#8e8e93",
        size=12,
    ),
    margin=dict(l=8, r=8, t=32, b=8),
    xaxis=dict(type="date", title="Date", showgrid=False, zeroline=False,
               tickfont=dict(color="#636366")),
    yaxis=dict(title="Value", gridcolor="#2c2c2e", zeroline=False,
               tickfont=dict(color="#636366")),
    showlegend=False,
    hovermode="closest",
)

STROKES = {
    StrokeWeight.THIN:  dict(width=2, mode="lines+markers", marker_size=4),
    StrokeWeight.THICK: dict(width=3, mode="lines", marker_size=0),
}


def build_figure(traces: Sequence[Trace], title: str | None = None) -> go.Figure:
    """Draw one Scatter per trace, in order.

    The figure's own legend is hidden; the dashboard shows the legend built
    from the figure by legend.build_legend.
    """
    fig = go.Figure()
    for trace in traces:
        stroke = STROKES[trace.stroke_weight]
        fig.add_trace(
            go.Scatter(
                x=[x for x, _ in trace.points],
                y=[y for _, y in trace.points],
                name=trace.label,
                mode=stroke["mode"],
                line=dict(color=trace.color, width=stroke["width"]),
                marker=dict(color=trace.color, size=stroke["marker_size"]),
            )
        )
    layout = dict(PLOTLY_LAYOUT)
    if title:
        layout["title"] = dict(text=title)
    fig.update_layout(**layout)
    return fig


def write_html(figure: go.Figure, path: Path) -> Path:
    """Write a standalone interactive HTML chart."""
    path.parent.mkdir(parents=True, exist_ok=True)
    figure.write_html(str(path), include_plotlyjs="cdn")
    return path


def render_legend(entries: Sequence[LegendEntry]) -> str:
    """Render legend entries one per line: '  #1F77B4  name'."""
    if not entries:
        return "(no series in this category)"
    return "\n".join(f"  {e.color or '—':<8} {e.name}" for e in entries)


def render_regression_table(organized: OrganizedDataset, category: Category) -> str:
    """Render a fixed-width table of the regression fits in one category.

    Returns:
        Multi-line string with one row per (location, metric) pair.
    """
    headers = ["Location", "Metric", "Fit", "R²", "P-Value", "Signif.", "Last obs."]
    rows = []
    for location in organized:
        for series in location.metrics.values():
            if classify(series.metric) != category:
                continue
            reg = series.regression
            if reg is None:
                fit = "error" if series.error else "—"
                rows.append([location.location, series.metric, fit, "—", "—", "—",
                             fmt_day(series.last_observed)])
                continue
            rows.append([
                location.location,
                series.metric,
                degree_text(reg.degree),
                f"{to_nearest_thousandth(reg.r_squared)}",
                f"{to_nearest_thousandth(reg.test_results.p_value)}",
                "yes" if reg.test_results.significant else "no",
                fmt_day(series.last_observed),
            ])

    widths = [max(len(h), *(len(r[i]) for r in rows)) if rows else len(h)
              for i, h in enumerate(headers)]
    sep = "─" * (sum(widths) + 2 * (len(widths) - 1))

    def fmt_row(cells: list[str]) -> str:
        return "  ".join(f"{c:<{w}}" for c, w in zip(cells, widths))

    lines = [f"{CATEGORY_TITLES[category]} regressions", sep, fmt_row(headers), sep]
    lines.extend(fmt_row(r) for r in rows)
    lines.append(sep)
    return "\n".join(lines)
