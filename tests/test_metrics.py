# Project: weather-trends
# Owner: GreenUnicorn
"""Tests for metrics.py — classification, units, labels and summaries."""

import pytest

from weather_trends.metrics import (
    METRICS,
    Category,
    classify,
    degree_text,
    describe_regression,
    metric_label,
    to_nearest_thousandth,
    unit_for,
)


# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

class TestClassify:

    @pytest.mark.parametrize("metric", ["TEMPERATURE_MAX", "AVERAGE_TEMPERATURE",
                                        "AVERAGE_APPARENT_TEMPERATURE"])
    def test_temperature(self, metric):
        assert classify(metric) == Category.TEMPERATURE

    @pytest.mark.parametrize("metric", ["PRECIPITATION", "SNOWFALL", "SNOWFALL_TOTAL"])
    def test_precipitation_or_snow(self, metric):
        assert classify(metric) == Category.PRECIPITATION_OR_SNOW

    def test_wind(self):
        assert classify("MAX_WIND_SPEED") == Category.WIND

    def test_unknown_is_unclassified(self):
        assert classify("HUMIDITY") == Category.UNCLASSIFIED

    def test_matching_is_case_sensitive(self):
        """Identifiers are matched exactly as sent; no normalization."""
        assert classify("average_temperature") == Category.UNCLASSIFIED

    def test_every_known_metric_is_classified(self):
        for metric in METRICS:
            assert classify(metric) != Category.UNCLASSIFIED


class TestCategoryFromValue:

    def test_parses_selector_values(self):
        assert Category.from_value("temp") == Category.TEMPERATURE
        assert Category.from_value("precip") == Category.PRECIPITATION_OR_SNOW
        assert Category.from_value(" Wind ") == Category.WIND

    def test_unknown_value_raises(self):
        with pytest.raises(ValueError, match="Unknown category"):
            Category.from_value("humidity")


# ---------------------------------------------------------------------------
# unit_for / metric_label
# ---------------------------------------------------------------------------

class TestUnitFor:

    def test_temperature_is_fahrenheit(self):
        assert unit_for("AVERAGE_TEMPERATURE") == "°F"

    def test_snowfall_total_is_inches(self):
        assert unit_for("SNOWFALL_TOTAL") == "in"

    def test_precipitation_is_inches(self):
        assert unit_for("PRECIPITATION") == "in"

    def test_everything_else_is_mph(self):
        assert unit_for("MAX_WIND_SPEED") == "mph"
        assert unit_for("HUMIDITY") == "mph"

    def test_temp_without_full_word_is_not_fahrenheit(self):
        """Units need 'TEMPERATURE'; classification only needs 'TEMP'."""
        assert classify("TEMP_MAX") == Category.TEMPERATURE
        assert unit_for("TEMP_MAX") == "mph"


class TestMetricLabel:

    def test_average_temperature_boston(self):
        assert (metric_label("AVERAGE_TEMPERATURE", "Boston", 5)
                == "daily average temperature in Boston (5-year average) (°F)")

    def test_snowfall_label(self):
        assert (metric_label("SNOWFALL_TOTAL", "Denver", 1)
                == "daily snowfall total in Denver (1-year average) (in)")


# ---------------------------------------------------------------------------
# degree_text / to_nearest_thousandth
# ---------------------------------------------------------------------------

class TestDegreeText:

    @pytest.mark.parametrize("degree, name", [
        (1, "linear"), (2, "quadratic"), (3, "cubic"), (4, "quartic"), (5, "quintic"),
    ])
    def test_named_degrees(self, degree, name):
        assert degree_text(degree) == name

    def test_higher_degree_is_generic(self):
        assert degree_text(7) == "7-th degree polynomial"


class TestToNearestThousandth:

    def test_rounds_down(self):
        assert to_nearest_thousandth(0.12344) == 0.123

    def test_rounds_up(self):
        assert to_nearest_thousandth(0.12367) == 0.124

    def test_negative(self):
        assert to_nearest_thousandth(-1.23449) == -1.234


# ---------------------------------------------------------------------------
# describe_regression
# ---------------------------------------------------------------------------

class TestDescribeRegression:

    def test_linear_increasing_significant(self, regression_factory):
        reg = regression_factory(coefficients=(50.0, 0.01), r_squared=0.42,
                                 p_value=0.003, significant=True)
        text = describe_regression("AVERAGE_TEMPERATURE", "Boston", 5, reg)
        assert text.startswith(
            "The daily average temperature in Boston (5-year average) (°F) is increasing"
        )
        assert "at a rate of 0.01°F per day" in text
        assert "is statistically significant with a P-Value of 0.003" in text
        assert "42.0% of the variation" in text
        assert "linear relationship with the date" in text

    def test_quadratic_decreasing_not_significant(self, regression_factory):
        reg = regression_factory(coefficients=(3.0, 0.2, -0.001), r_squared=0.1,
                                 p_value=0.4, significant=False)
        text = describe_regression("PRECIPITATION", "Denver", 1, reg)
        assert "is decreasing." in text
        assert "rate of" not in text
        assert "not statistically significant" in text
        assert "quadratic relationship" in text
