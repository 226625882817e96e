# Project: weather-trends
# Owner: GreenUnicorn
"""
organize.py — Reshape per-location API responses into chart-ready series.

The output is location → metric → {observed points, regression}. Locations
keep the order they were requested in; metrics keep the order they first
appear in the first location's data.

Every requested location is assumed to report the same metric set. The
first location's metrics define the universe: a location missing one of
them gets an empty series, and metrics only other locations report are not
shown. find_metric_mismatches() reports both cases so callers can warn.
"""

from __future__ import annotations

from collections.abc import Sequence

from weather_trends.dates import as_date
from weather_trends.models import (
    APIResponse,
    HistoricalPoint,
    LocationSeries,
    MetricSeries,
    OrganizedDataset,
)
from weather_trends.utils import log_event


class DataIntegrityError(ValueError):
    """The service payload breaks a guarantee the charts depend on."""


def metric_universe(response: APIResponse) -> list[str]:
    """Distinct metric identifiers of a response, in first-seen order."""
    return list(dict.fromkeys(d.metric for d in response.historical_data))


def find_metric_mismatches(responses: Sequence[APIResponse]) -> list[dict]:
    """Compare every location's metric set against the first location's.

    Returns:
        One dict per divergent location with keys location, missing
        (metrics the first location has and this one lacks) and extra
        (metrics only this location has). Empty when all sets agree.
    """
    if not responses:
        return []
    universe = metric_universe(responses[0])
    mismatches = []
    for response in responses[1:]:
        metrics = metric_universe(response)
        missing = [m for m in universe if m not in metrics]
        extra = [m for m in metrics if m not in universe]
        if missing or extra:
            mismatches.append({
                "location": response.location_name,
                "missing":  missing,
                "extra":    extra,
            })
    return mismatches


def _observed_points(response: APIResponse, metric: str) -> tuple[HistoricalPoint, ...]:
    """One metric's points from one response, chronological, invalid dates dropped."""
    points = []
    for raw in response.historical_data:
        if raw.metric != metric:
            continue
        day = as_date(raw.date)
        if day is None:
            log_event(
                "WARNING",
                f"Skipping {metric} value for {response.location_name}: "
                f"invalid date {raw.date!r}",
            )
            continue
        points.append(HistoricalPoint(metric=metric, date=day, value=raw.value))
    points.sort(key=lambda p: p.date)
    return tuple(points)


def _check_regression(response: APIResponse, metric: str) -> tuple:
    """Find the single usable regression entry for a metric.

    Returns:
        (RegressionResult, normalized base date)

    Raises:
        DataIntegrityError: If there is not exactly one entry, or it has no
            coefficients or an unparseable base date.
    """
    where = f"{metric} in {response.location_name}"
    matches = [r for r in response.regression if r.metric == metric]
    if not matches:
        raise DataIntegrityError(f"No regression result for {where}")
    if len(matches) > 1:
        raise DataIntegrityError(f"{len(matches)} regression results for {where}")

    regression = matches[0].results
    if not regression.coefficients:
        raise DataIntegrityError(f"Empty regression coefficients for {where}")
    base_date = as_date(regression.base_date)
    if base_date is None:
        raise DataIntegrityError(
            f"Invalid regression base date {regression.base_date!r} for {where}"
        )
    return regression, base_date


def _build_series(response: APIResponse, metric: str, strict: bool) -> MetricSeries:
    points = _observed_points(response, metric)
    has_regression = any(r.metric == metric for r in response.regression)
    if not points and not has_regression:
        # Location did not report this metric at all
        return MetricSeries(metric=metric, observed_points=())

    try:
        regression, base_date = _check_regression(response, metric)
    except DataIntegrityError as exc:
        if strict:
            raise
        log_event("ERROR", str(exc))
        return MetricSeries(metric=metric, observed_points=points, error=str(exc))

    return MetricSeries(
        metric=metric,
        observed_points=points,
        regression=regression,
        base_date=base_date,
    )


def organize(responses: Sequence[APIResponse], strict: bool = False) -> OrganizedDataset:
    """Organize responses without memoization.

    Args:
        responses: One response per requested location, in request order.
        strict: If True, any DataIntegrityError aborts the whole call.
            Otherwise the failing series keeps its observed points, gets no
            regression and records the error.

    Returns:
        Tuple of LocationSeries, index-aligned with responses.
    """
    if not responses:
        return ()

    universe = metric_universe(responses[0])
    for mismatch in find_metric_mismatches(responses):
        log_event(
            "WARNING",
            f"Metric set for {mismatch['location']} differs from "
            f"{responses[0].location_name}: missing={mismatch['missing']} "
            f"extra={mismatch['extra']}",
        )

    organized = []
    for response in responses:
        metrics: dict[str, MetricSeries] = {}
        for metric in universe:
            metrics[metric] = _build_series(response, metric, strict)
        organized.append(LocationSeries(location=response.location_name, metrics=metrics))
    return tuple(organized)


class SeriesOrganizer:
    """Memoized organize(): recomputes only when given a different list object.

    The cache is keyed on identity, not equality. Passing the same list
    again returns the very same OrganizedDataset; an equal but distinct list
    triggers a fresh computation.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._last_input: Sequence[APIResponse] | None = None
        self._last_output: OrganizedDataset | None = None

    def organize(self, responses: Sequence[APIResponse]) -> OrganizedDataset:
        if self._last_output is not None and responses is self._last_input:
            return self._last_output
        output = organize(responses, strict=self.strict)
        self._last_input = responses
        self._last_output = output
        return output

    def clear(self) -> None:
        self._last_input = None
        self._last_output = None
