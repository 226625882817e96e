# Project: weather-trends
# Owner: GreenUnicorn
"""
legend.py — Legend entries (name + colour) for a rendered chart.

The legend must describe what was actually drawn. When a plotly figure is
available we read the entries back from it; otherwise we fall back to the
traces we asked it to draw.
"""

from __future__ import annotations

import html
from collections.abc import Sequence

import plotly.graph_objects as go

from weather_trends.models import LegendEntry, Trace


def legend_from_figure(figure: go.Figure) -> list[LegendEntry]:
    """Read one entry per figure trace, in drawing order."""
    entries = []
    for trace in figure.data:
        line = getattr(trace, "line", None)
        color = line.color if line is not None and line.color else ""
        entries.append(LegendEntry(name=trace.name or "", color=color))
    return entries


def build_legend(
    traces: Sequence[Trace],
    rendered: go.Figure | None = None,
) -> list[LegendEntry]:
    """Legend entries, 1:1 with the traces and in the same order.

    Args:
        traces: Output of TraceAssembler.build_traces.
        rendered: The figure the traces were drawn into, if any.
    """
    if rendered is not None:
        return legend_from_figure(rendered)
    return [LegendEntry(name=t.label, color=t.color) for t in traces]


def legend_html(entries: Sequence[LegendEntry]) -> str:
    """Render legend entries as the dashboard's swatch + name markup.

    Names come from service data (location names), so they are escaped.
    """
    items = "".join(
        f'<div class="legend-item"><div class="legend-color" '
        f'style="background-color: {html.escape(e.color)}"></div>'
        f"<span>{html.escape(e.name)}</span></div>"
        for e in entries
    )
    return f'<div class="custom-legend">{items}</div>'
