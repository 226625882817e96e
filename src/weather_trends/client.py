# Project: weather-trends
# Owner: GreenUnicorn
"""
client.py — Request historical metrics and regression fits from the
analytics service's GraphQL endpoint.

One request is sent per location. fetch_all() sends them concurrently and
is all-or-nothing: if any location fails, the whole submission fails and no
partial results are returned.
"""

from __future__ import annotations

import json
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import requests

from weather_trends.models import (
    APIResponse,
    HistoricalMetricData,
    MetricRegression,
    RegressionResult,
    TestResults,
)
from weather_trends.organize import DataIntegrityError
from weather_trends.utils import with_retry

DEFAULT_TIMEOUT = 30
MIN_START_YEAR = 1950
DEFAULT_HISTORY_YEARS = 30
MAX_AVERAGE_YEARS = 10

_ENUM_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


class FetchFailure(RuntimeError):
    """The analytics service could not be reached or rejected the request."""


def default_end_year() -> int:
    """The last full calendar year."""
    return date.today().year - 1


@dataclass
class AnalysisRequest:
    """Parameters of one dashboard submission."""

    locations: list[str]
    metrics: list[str]
    average_years: int = 1
    start_year: int = field(default_factory=lambda: default_end_year() - DEFAULT_HISTORY_YEARS)
    end_year: int = field(default_factory=default_end_year)
    regression_degree: int = 1

    def validate(self) -> None:
        """Check the request before anything is sent.

        Raises:
            ValueError: Describing the first problem found.
        """
        if not self.locations or not all(loc.strip() for loc in self.locations):
            raise ValueError("At least one non-empty location is required")
        if not self.metrics:
            raise ValueError("At least one metric is required")
        for metric in self.metrics:
            if not _ENUM_NAME.match(metric):
                raise ValueError(f"Invalid metric identifier: {metric!r}")
        if not 1 <= self.average_years <= MAX_AVERAGE_YEARS:
            raise ValueError(f"average_years must be between 1 and {MAX_AVERAGE_YEARS}")
        last_year = default_end_year()
        if not MIN_START_YEAR <= self.start_year < self.end_year <= last_year:
            raise ValueError(
                f"Years must satisfy {MIN_START_YEAR} <= start < end <= {last_year}, "
                f"got {self.start_year}-{self.end_year}"
            )
        if self.regression_degree < 1:
            raise ValueError("regression_degree must be at least 1")


def build_query(request: AnalysisRequest, location: str) -> str:
    """Build the weatherAnalysis GraphQL query for one location.

    Metric identifiers are GraphQL enum values, so they are written
    unquoted; the location is a JSON-escaped string literal.
    """
    metrics = ", ".join(request.metrics)
    return (
        "query { weatherAnalysis(input: {"
        f"location: {json.dumps(location)}, "
        f"startYear: {request.start_year}, "
        f"endYear: {request.end_year}, "
        f"averageYears: {request.average_years}, "
        f"regressionDegree: {request.regression_degree}, "
        f"metrics: [{metrics}]"
        "}) { "
        "historicalData { date metric value } "
        "regression { metric results { coefficients rSquared baseDate "
        "testResults { fStatistic pValue significant } } } "
        "locationName "
        "} }"
    )


def parse_response(payload: dict) -> APIResponse:
    """Convert a weatherAnalysis payload into an APIResponse.

    Raises:
        DataIntegrityError: If required fields are missing or mistyped.
    """
    try:
        historical = [
            HistoricalMetricData(
                metric=str(d["metric"]),
                value=float(d["value"]),
                date=str(d["date"]),
            )
            for d in payload["historicalData"]
        ]
        regression = []
        for r in payload["regression"]:
            results = r["results"]
            tests = results["testResults"]
            regression.append(MetricRegression(
                metric=str(r["metric"]),
                results=RegressionResult(
                    coefficients=tuple(float(c) for c in results["coefficients"]),
                    r_squared=float(results["rSquared"]),
                    test_results=TestResults(
                        p_value=float(tests["pValue"]),
                        significant=bool(tests["significant"]),
                        f_statistic=float(tests["fStatistic"]),
                    ),
                    base_date=str(results["baseDate"]),
                ),
            ))
        location_name = str(payload["locationName"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DataIntegrityError(f"Malformed weatherAnalysis response: {exc!r}") from exc

    return APIResponse(
        historical_data=historical,
        regression=regression,
        location_name=location_name,
    )


def fetch_analysis(
    request: AnalysisRequest,
    location: str,
    api_url: str,
    timeout: float = DEFAULT_TIMEOUT,
    log_path: Path | None = None,
) -> APIResponse:
    """Fetch one location's metrics and regressions.

    Raises:
        FetchFailure: If every retry failed or the service returned errors.
        DataIntegrityError: If the body or payload has the wrong shape.
    """
    url = f"{api_url.rstrip('/')}/graphql"
    body = {"query": build_query(request, location)}

    def _call() -> dict:
        r = requests.post(url, json=body, timeout=timeout)
        r.raise_for_status()
        return r.json()

    try:
        data = with_retry(_call, label=f"weatherAnalysis for '{location}'", log_path=log_path)
    except RuntimeError as exc:
        raise FetchFailure(f"Failed to fetch weather data for '{location}'.") from exc

    if not isinstance(data, dict):
        raise DataIntegrityError(
            f"Response for '{location}' is not a JSON object: {type(data).__name__}"
        )
    if data.get("errors"):
        errors = data["errors"] if isinstance(data["errors"], list) else [data["errors"]]
        messages = "; ".join(
            str(e.get("message", e) if isinstance(e, dict) else e) for e in errors
        )
        raise FetchFailure(f"Service error for '{location}': {messages}")

    try:
        payload = data["data"]["weatherAnalysis"]
    except (KeyError, TypeError) as exc:
        raise DataIntegrityError(f"Response for '{location}' has no weatherAnalysis") from exc
    return parse_response(payload)


def fetch_all(
    request: AnalysisRequest,
    api_url: str,
    timeout: float = DEFAULT_TIMEOUT,
    log_path: Path | None = None,
) -> list[APIResponse]:
    """Fetch every requested location concurrently.

    Returns:
        Responses in the same order as request.locations.

    Raises:
        FetchFailure / DataIntegrityError: From the first failing location
            (in request order); no partial results are returned.
    """
    with ThreadPoolExecutor(max_workers=len(request.locations) or 1) as pool:
        futures = [
            pool.submit(fetch_analysis, request, location, api_url, timeout, log_path)
            for location in request.locations
        ]
        return [f.result() for f in futures]
