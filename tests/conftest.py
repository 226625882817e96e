# Project: weather-trends
# Owner: GreenUnicorn
"""Shared fixtures: log redirection and in-memory service responses."""

import pytest

from weather_trends.models import (
    APIResponse,
    HistoricalMetricData,
    MetricRegression,
    RegressionResult,
    TestResults,
)

BASE_DATE = "2020-01-01T00:00:00.000Z"

SAMPLE_DAYS = [
    "2020-01-01T00:00:00.000Z",
    "2020-02-01T00:00:00.000Z",
    "2020-03-01T00:00:00.000Z",
    "2020-04-10T00:00:00.000Z",
]


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path, monkeypatch):
    """Keep log_event writes out of the working directory."""
    log_path = tmp_path / "logs" / "weather_trends.log"
    monkeypatch.setattr("weather_trends.utils._log_path", log_path)
    return log_path


def make_regression(coefficients=(50.0, 0.01), base_date=BASE_DATE,
                    r_squared=0.42, p_value=0.01, significant=True) -> RegressionResult:
    return RegressionResult(
        coefficients=tuple(coefficients),
        r_squared=r_squared,
        test_results=TestResults(p_value=p_value, significant=significant, f_statistic=12.5),
        base_date=base_date,
    )


def make_response(location="Boston", metrics=("TEMPERATURE_MAX",), days=SAMPLE_DAYS,
                  regressions=None) -> APIResponse:
    """Build an APIResponse with one value per (metric, day).

    regressions maps metric -> RegressionResult; by default every metric gets
    make_regression(). Pass an explicit dict to leave some out.
    """
    historical = [
        HistoricalMetricData(metric=m, value=float(10 * i + j), date=d)
        for i, m in enumerate(metrics)
        for j, d in enumerate(days)
    ]
    if regressions is None:
        regressions = {m: make_regression() for m in metrics}
    return APIResponse(
        historical_data=historical,
        regression=[MetricRegression(metric=m, results=r) for m, r in regressions.items()],
        location_name=location,
    )


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def regression_factory():
    return make_regression
