# Project: weather-trends
# Owner: GreenUnicorn
"""
regression.py — Evaluate pre-computed polynomial fits over calendar days.

The analytics service fits the regression; we only evaluate it. x is the
number of whole days since the fit's base date, so a fit can be drawn over
the observed history and projected forward past the last observation.

All calculations use the Python standard library only.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from weather_trends.dates import days_between
from weather_trends.models import HistoricalPoint

DEFAULT_HORIZON_DAYS = 365 * 20
DEFAULT_STEP_DAYS = 30


def evaluate(coefficients: Sequence[float], day_offset: float) -> float:
    """Evaluate sum(coefficients[i] * day_offset**i) using Horner's rule.

    Args:
        coefficients: Polynomial coefficients, index 0 is the intercept.
        day_offset: Days since the fit's base date.

    Returns:
        The fitted value; 0.0 for an empty coefficient list.
    """
    result = 0.0
    for coefficient in reversed(coefficients):
        result = result * day_offset + coefficient
    return float(result)


def day_offset_of(day: date, base_date: date) -> int:
    """Whole days from base_date to day."""
    return days_between(base_date, day)


def project_forward(
    last_observed: date,
    base_date: date,
    coefficients: Sequence[float],
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    step_days: int = DEFAULT_STEP_DAYS,
) -> list[tuple[date, float]]:
    """Extend a fit past the last observed day.

    Produces horizon_days // step_days points, the first one step after
    last_observed, each evaluated against the same fit.

    Raises:
        ValueError: If step_days is not positive.
    """
    if step_days <= 0:
        raise ValueError(f"step_days must be positive, got {step_days}")

    points = []
    for i in range(1, horizon_days // step_days + 1):
        day = last_observed + timedelta(days=i * step_days)
        points.append((day, evaluate(coefficients, day_offset_of(day, base_date))))
    return points


def curve_over_observed(
    observed_points: Sequence[HistoricalPoint],
    base_date: date,
    coefficients: Sequence[float],
) -> list[tuple[date, float]]:
    """Evaluate a fit at each observed day, in the same order."""
    return [
        (p.date, evaluate(coefficients, day_offset_of(p.date, base_date)))
        for p in observed_points
    ]


def trend_direction(coefficients: Sequence[float]) -> str:
    """'increasing' if the leading coefficient is positive, else 'decreasing'."""
    leading = coefficients[-1] if coefficients else 0.0
    return "increasing" if leading > 0 else "decreasing"
