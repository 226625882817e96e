# Project: weather-trends
# Owner: GreenUnicorn
"""
models.py — Data types shared by the client, the organizer and the charts.

Wire types (HistoricalMetricData, RegressionResult, ...) mirror the
analytics service payload. Series types (HistoricalPoint, MetricSeries,
LocationSeries) are what the organizer produces for the charts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


# ─────────────────────────────────────────────────────────────
# Analytics service payload
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HistoricalMetricData:
    metric: str
    value: float
    date: str


@dataclass(frozen=True)
class TestResults:
    __test__ = False  # not a pytest class

    p_value: float
    significant: bool
    f_statistic: float


@dataclass(frozen=True)
class RegressionResult:
    """A pre-computed polynomial fit.

    coefficients[i] multiplies day_offset**i, where day_offset counts whole
    days since base_date (index 0 is the intercept).
    """

    coefficients: tuple[float, ...]
    r_squared: float
    test_results: TestResults
    base_date: str

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1


@dataclass(frozen=True)
class MetricRegression:
    metric: str
    results: RegressionResult


@dataclass(frozen=True)
class APIResponse:
    historical_data: list[HistoricalMetricData]
    regression: list[MetricRegression]
    location_name: str


# ─────────────────────────────────────────────────────────────
# Organized series
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class HistoricalPoint:
    metric: str
    date: date
    value: float


@dataclass(frozen=True)
class MetricSeries:
    """Observed points and regression fit for one (location, metric) pair.

    regression is None when the location did not report the metric, or when
    the series failed an integrity check; in the latter case error explains
    why and only the observed points may be drawn.
    """

    metric: str
    observed_points: tuple[HistoricalPoint, ...]
    regression: RegressionResult | None = None
    base_date: date | None = None
    error: str | None = None

    @property
    def last_observed(self) -> date | None:
        return self.observed_points[-1].date if self.observed_points else None


@dataclass(frozen=True)
class LocationSeries:
    location: str
    metrics: dict[str, MetricSeries] = field(default_factory=dict)


OrganizedDataset = tuple[LocationSeries, ...]


# ─────────────────────────────────────────────────────────────
# Chart output
# ─────────────────────────────────────────────────────────────

class StrokeWeight(Enum):
    THIN = "thin"
    THICK = "thick"


@dataclass(frozen=True)
class Trace:
    label: str
    points: tuple[tuple[date, float], ...]
    color: str
    stroke_weight: StrokeWeight
    location: str = ""
    metric: str = ""
    kind: str = "observed"  # "observed" | "regression"


@dataclass(frozen=True)
class LegendEntry:
    name: str
    color: str
