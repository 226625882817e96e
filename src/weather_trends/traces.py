# Project: weather-trends
# Owner: GreenUnicorn
"""
traces.py — Turn organized series into the ordered traces a chart draws.

Each visible (location, metric) pair yields two traces: the observed values
(thin) and the regression curve over the observed days plus a forward
projection (thick). Both share one colour, and that colour stays with the
pair for the lifetime of the TraceAssembler so re-renders and re-fetches do
not reshuffle the chart.
"""

from __future__ import annotations

import random

from plotly.colors import qualitative

from weather_trends.metrics import Category, classify, metric_label
from weather_trends.models import (
    MetricSeries,
    OrganizedDataset,
    StrokeWeight,
    Trace,
)
from weather_trends.regression import (
    DEFAULT_HORIZON_DAYS,
    DEFAULT_STEP_DAYS,
    curve_over_observed,
    project_forward,
)

REGRESSION_SUFFIX = " (Regression)"

# plotly's qualitative sequences, upper-cased and de-duplicated in order
PALETTE: list[str] = list(dict.fromkeys(
    c.upper() for c in (qualitative.Plotly + qualitative.D3 + qualitative.Dark24)
    if c.startswith("#")
))


class ColorRegistry:
    """First-seen colour assignment per key.

    Palette colours are handed out in order; once they run out, colours come
    from a seeded generator and never repeat one already assigned.
    """

    def __init__(self, palette: list[str] | None = None, seed: int = 0):
        self._palette = list(palette) if palette is not None else list(PALETTE)
        self._rng = random.Random(seed)
        self._colors: dict[tuple[str, str], str] = {}

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._colors

    def color_for(self, key: tuple[str, str]) -> str:
        if key not in self._colors:
            self._colors[key] = self._next_color()
        return self._colors[key]

    def _next_color(self) -> str:
        used = set(self._colors.values())
        for color in self._palette:
            if color not in used:
                return color
        while True:
            color = f"#{self._rng.randrange(0x1000000):06X}"
            if color not in used:
                return color


class TraceAssembler:
    """Builds traces for one chart instance.

    Owns its ColorRegistry: two assemblers never share colour identity.
    """

    def __init__(
        self,
        average_years: int = 1,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        step_days: int = DEFAULT_STEP_DAYS,
        colors: ColorRegistry | None = None,
    ):
        self.average_years = average_years
        self.horizon_days = horizon_days
        self.step_days = step_days
        self.colors = colors if colors is not None else ColorRegistry()

    def build_traces(self, organized: OrganizedDataset, active_category: Category) -> list[Trace]:
        """Observed + regression traces for every pair in active_category.

        Order: locations as organized, then metrics in discovery order,
        observed before regression.
        """
        traces: list[Trace] = []
        for location in organized:
            for series in location.metrics.values():
                if classify(series.metric) != active_category:
                    continue
                traces.extend(self._series_traces(location.location, series))
        return traces

    def _series_traces(self, location: str, series: MetricSeries) -> list[Trace]:
        if not series.observed_points:
            return []

        color = self.colors.color_for((location, series.metric))
        label = metric_label(series.metric, location, self.average_years)
        observed = Trace(
            label=label,
            points=tuple((p.date, p.value) for p in series.observed_points),
            color=color,
            stroke_weight=StrokeWeight.THIN,
            location=location,
            metric=series.metric,
            kind="observed",
        )
        if series.regression is None or series.base_date is None:
            return [observed]

        coefficients = series.regression.coefficients
        curve = curve_over_observed(series.observed_points, series.base_date, coefficients)
        projection = project_forward(
            series.last_observed,
            series.base_date,
            coefficients,
            horizon_days=self.horizon_days,
            step_days=self.step_days,
        )
        regression = Trace(
            label=label + REGRESSION_SUFFIX,
            points=tuple(curve + projection),
            color=color,
            stroke_weight=StrokeWeight.THICK,
            location=location,
            metric=series.metric,
            kind="regression",
        )
        return [observed, regression]
