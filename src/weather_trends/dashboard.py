# Project: weather-trends
# Owner: GreenUnicorn
"""
dashboard.py — One chart instance: submit a request, then render by category.

A WeatherDashboard owns its organizer memo and its colour assignments, so
re-rendering the same data (or switching category) is cheap and every
series keeps its colour across re-fetches. Distinct dashboards never share
colours.

Submissions: the latest one wins. If a submission finishes after a newer
one has started, its results are dropped and StaleSubmission is raised to
its caller.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import plotly.graph_objects as go

from weather_trends.chart import CATEGORY_TITLES, build_figure
from weather_trends.client import AnalysisRequest, fetch_all
from weather_trends.legend import build_legend
from weather_trends.metrics import Category, classify, describe_regression
from weather_trends.models import APIResponse, LegendEntry, OrganizedDataset, Trace
from weather_trends.organize import SeriesOrganizer
from weather_trends.regression import DEFAULT_HORIZON_DAYS, DEFAULT_STEP_DAYS
from weather_trends.traces import TraceAssembler


class StaleSubmission(RuntimeError):
    """A newer submission replaced this one before it finished."""


@dataclass
class RenderResult:
    traces: list[Trace]
    figure: go.Figure
    legend: list[LegendEntry]


Fetcher = Callable[[AnalysisRequest], list[APIResponse]]


class WeatherDashboard:
    """Holds the fetched responses and renders them one category at a time.

    Args:
        api_url: Analytics service base URL (used by the default fetcher).
        timeout: Per-request timeout in seconds.
        horizon_days / step_days: Forward projection settings.
        strict: Abort on any data integrity problem instead of isolating it
            to the affected series.
        fetcher: Replacement for client.fetch_all (tests, offline data).
    """

    def __init__(
        self,
        api_url: str = "",
        timeout: float = 30,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        step_days: int = DEFAULT_STEP_DAYS,
        strict: bool = False,
        fetcher: Fetcher | None = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self._fetcher = fetcher
        self.organizer = SeriesOrganizer(strict=strict)
        self.assembler = TraceAssembler(horizon_days=horizon_days, step_days=step_days)
        self.request: AnalysisRequest | None = None
        self.responses: list[APIResponse] = []
        self._generation = 0
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: dict, **kwargs) -> "WeatherDashboard":
        return cls(
            api_url=config["service"]["url"],
            timeout=config["service"]["timeout"],
            horizon_days=config["chart"]["horizon_days"],
            step_days=config["chart"]["step_days"],
            **kwargs,
        )

    def _fetch(self, request: AnalysisRequest) -> list[APIResponse]:
        if self._fetcher is not None:
            return self._fetcher(request)
        return fetch_all(request, self.api_url, timeout=self.timeout)

    def submit(self, request: AnalysisRequest) -> OrganizedDataset:
        """Validate, fetch every location and organize the results.

        Raises:
            ValueError: If the request is invalid.
            FetchFailure: If any location could not be fetched.
            DataIntegrityError: On malformed payloads (or any integrity
                problem when strict).
            StaleSubmission: If a newer submission started meanwhile.
        """
        request.validate()
        with self._lock:
            self._generation += 1
            generation = self._generation

        responses = self._fetch(request)

        with self._lock:
            if generation != self._generation:
                raise StaleSubmission("A newer submission replaced this one")
            self.request = request
            self.responses = responses
            self.assembler.average_years = request.average_years
        return self.organized()

    def load(self, responses: list[APIResponse], average_years: int = 1) -> OrganizedDataset:
        """Use already-fetched responses instead of calling the service."""
        with self._lock:
            self._generation += 1
            self.responses = responses
            self.assembler.average_years = average_years
        return self.organized()

    def organized(self) -> OrganizedDataset:
        return self.organizer.organize(self.responses)

    def render(self, category: Category) -> RenderResult:
        """Build traces for one category, draw them and read the legend back."""
        traces = self.assembler.build_traces(self.organized(), category)
        figure = build_figure(traces, title=CATEGORY_TITLES[category])
        return RenderResult(traces=traces, figure=figure, legend=build_legend(traces, figure))

    def summaries(self, category: Category) -> list[str]:
        """Readable regression summaries for every fitted series in a category."""
        lines = []
        for location in self.organized():
            for series in location.metrics.values():
                if series.regression is None or classify(series.metric) != category:
                    continue
                lines.append(describe_regression(
                    series.metric,
                    location.location,
                    self.assembler.average_years,
                    series.regression,
                ))
        return lines
