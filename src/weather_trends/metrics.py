# Project: weather-trends
# Owner: GreenUnicorn
"""
metrics.py — Metric identifiers, display categories, units and labels.

Classification is a plain substring lookup against the exact identifier
sent by the analytics service (case-sensitive, no normalization). New
metrics are supported by adding identifiers here, not by changing the
matching rules.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING

from weather_trends.regression import trend_direction

if TYPE_CHECKING:
    from weather_trends.models import RegressionResult


# Identifiers accepted by the analytics service, with display names.
METRICS: dict[str, str] = {
    "AVERAGE_TEMPERATURE":          "Average Temperature",
    "AVERAGE_APPARENT_TEMPERATURE": "Average Apparent Temperature",
    "PRECIPITATION":                "Precipitation",
    "SNOWFALL":                     "Snowfall",
    "MAX_WIND_SPEED":               "Max Wind Speed",
}

DEGREE_NAMES = {
    1: "linear",
    2: "quadratic",
    3: "cubic",
    4: "quartic",
    5: "quintic",
}


class Category(Enum):
    """Chart category a metric is displayed under."""

    TEMPERATURE = "temp"
    PRECIPITATION_OR_SNOW = "precip"
    WIND = "wind"
    UNCLASSIFIED = "unclassified"

    @classmethod
    def from_value(cls, value: str) -> "Category":
        """Parse a selector value such as 'temp' or 'precip'.

        Raises:
            ValueError: If value names no category.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown category '{value}'. Choose one of: {choices}") from None


def classify(metric_id: str) -> Category:
    """Map a metric identifier to the chart category it belongs to."""
    if "TEMP" in metric_id:
        return Category.TEMPERATURE
    if "PRECIP" in metric_id or "SNOW" in metric_id:
        return Category.PRECIPITATION_OR_SNOW
    if "WIND" in metric_id:
        return Category.WIND
    return Category.UNCLASSIFIED


def unit_for(metric_id: str) -> str:
    """Return the unit label for a metric: '°F', 'in' or 'mph'."""
    if "TEMPERATURE" in metric_id:
        return "°F"
    if "PRECIPITATION" in metric_id or "SNOWFALL" in metric_id:
        return "in"
    return "mph"


def metric_label(metric_id: str, location: str, average_years: int) -> str:
    """Build the human-readable series name.

    Example:
        >>> metric_label("AVERAGE_TEMPERATURE", "Boston", 5)
        'daily average temperature in Boston (5-year average) (°F)'
    """
    name = metric_id.replace("_", " ").lower()
    return f"daily {name} in {location} ({average_years}-year average) ({unit_for(metric_id)})"


def degree_text(degree: int) -> str:
    """Name a polynomial degree: 'linear', 'quadratic', ... 'quintic'."""
    return DEGREE_NAMES.get(degree, f"{degree}-th degree polynomial")


def to_nearest_thousandth(value: float) -> float:
    """Round to three decimal places, halves rounding up."""
    # round() would round halves to even
    return math.floor(value * 1000 + 0.5) / 1000


def describe_regression(
    metric_id: str,
    location: str,
    average_years: int,
    regression: RegressionResult,
) -> str:
    """Summarise a regression fit as one readable paragraph.

    The direction comes from the sign of the leading coefficient. Linear fits
    also report their rate of change; every fit reports significance and the
    share of variation explained.
    """
    label = metric_label(metric_id, location, average_years)
    coefficients = regression.coefficients
    direction = trend_direction(coefficients)

    rate = ""
    if len(coefficients) == 2:
        rate = f" at a rate of {coefficients[1]:.4g}{unit_for(metric_id)} per day"

    tests = regression.test_results
    significance = "" if tests.significant else "not "
    explained = to_nearest_thousandth(regression.r_squared * 100)

    return (
        f"The {label} is {direction}{rate}. "
        f"This trend is {significance}statistically significant with a P-Value of "
        f"{to_nearest_thousandth(tests.p_value)}. "
        f"{explained}% of the variation in {label} can be explained by the "
        f"{degree_text(regression.degree)} relationship with the date."
    )
