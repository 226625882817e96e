# Project: weather-trends
# Owner: GreenUnicorn
"""
dashboard.py — Streamlit dashboard: historical metrics with regression trends.

Run with:
    streamlit run app/dashboard.py
    streamlit run app/dashboard.py -- --location Boston --location Denver

Requires: pip install -e ".[ui]"
Data source: the weather analytics GraphQL service ([service].url in
config.toml, or WEATHER_TRENDS_API_URL).
"""

import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import argparse
import html
import os

import streamlit as st

from weather_trends.client import (
    DEFAULT_HISTORY_YEARS,
    MAX_AVERAGE_YEARS,
    MIN_START_YEAR,
    AnalysisRequest,
    FetchFailure,
    default_end_year,
)
from weather_trends.config import API_URL_ENV_VAR, DEFAULT_CONFIG_PATH, default_config, load_config
from weather_trends.dashboard import StaleSubmission, WeatherDashboard
from weather_trends.legend import legend_html
from weather_trends.metrics import METRICS, Category, classify, degree_text, to_nearest_thousandth
from weather_trends.organize import DataIntegrityError, find_metric_mismatches
from weather_trends.utils import fmt_day, set_log_path


# ─────────────────────────────────────────────────────────────
# Page config (must be the first Streamlit call)
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Weather Trends",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# ─────────────────────────────────────────────────────────────
# CSS injection (dark theme)
# ─────────────────────────────────────────────────────────────

DARK_CSS = """
<style>
  #MainMenu, footer, header { visibility: hidden; }
  .block-container { padding-top: 2rem; padding-bottom: 4rem; max-width: 1100px; }

  html, body, [class*="css"] {
    font-family: -apple-system, BlinkMacSystemFont, "SF Pro Display",
                 "SF Pro Text", "Segoe UI", Roboto, sans-serif;
    background-color: #0a0a0a;
    color: #f5f5f7;
  }

  .stButton > button {
    background: #0a84ff !important;
    color: #ffffff !important;
    border: none !important;
    border-radius: 980px !important;
    font-weight: 600 !important;
    padding: 0.6rem 2rem !important;
  }
  .stButton > button:hover { opacity: 0.85; }

  .error-card {
    background: rgba(255, 69, 58, 0.1);
    border: 1px solid rgba(255, 69, 58, 0.3);
    border-radius: 12px;
    color: #ff453a;
    padding: 20px 24px;
    text-align: center;
    margin: 1rem 0;
  }
  .warning-card {
    background: rgba(255, 159, 10, 0.1);
    border: 1px solid rgba(255, 159, 10, 0.3);
    border-radius: 12px;
    color: #ff9f0a;
    padding: 12px 18px;
    margin: 0.5rem 0;
  }

  .section-label {
    font-size: 0.72rem;
    text-transform: uppercase;
    letter-spacing: 0.1em;
    color: #636366;
    font-weight: 600;
    margin-bottom: 0.75rem;
  }

  .custom-legend { display: flex; flex-wrap: wrap; gap: 1em; font-size: 0.9em; }
  .legend-item { display: flex; align-items: center; color: #f5f5f7; }
  .legend-color { width: 12px; height: 12px; border-radius: 2px; margin-right: 6px; }

  .summary { color: #c7c7cc; font-size: 0.95rem; line-height: 1.5; margin-bottom: 0.75rem; }

  .fine-print { color: #636366; font-size: 0.8rem; }
</style>
"""

st.markdown(DARK_CSS, unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# CLI arg parsing (supports: streamlit run app/dashboard.py -- --location X)
# ─────────────────────────────────────────────────────────────


def _parse_cli_args() -> argparse.Namespace:
    """Parse --location (repeatable) and --config after the '--' separator."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--location", action="append", default=[])
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH))

    # Streamlit forwards argv after '--'; gracefully ignore unknown flags
    try:
        sep = sys.argv.index("--")
        script_args = sys.argv[sep + 1:]
    except ValueError:
        script_args = []

    args, _ = parser.parse_known_args(script_args)
    return args


CLI_ARGS = _parse_cli_args()


def _load_config() -> dict:
    path = Path(CLI_ARGS.config)
    if not path.exists() and os.environ.get(API_URL_ENV_VAR):
        config = default_config(os.environ[API_URL_ENV_VAR])
    else:
        config = load_config(path)
    set_log_path(Path(config["log"]["path"]))
    return config


def _get_dashboard(config: dict) -> WeatherDashboard:
    """One WeatherDashboard per browser session, so colours stay put across reruns."""
    if "dashboard" not in st.session_state:
        st.session_state["dashboard"] = WeatherDashboard.from_config(config)
    return st.session_state["dashboard"]


def regression_rows(organized, category: Category) -> list[dict]:
    rows = []
    for location in organized:
        for series in location.metrics.values():
            if classify(series.metric) != category:
                continue
            reg = series.regression
            rows.append({
                "Location": location.location,
                "Metric": METRICS.get(series.metric, series.metric),
                "Fit": degree_text(reg.degree) if reg else ("error" if series.error else "—"),
                "R²": to_nearest_thousandth(reg.r_squared) if reg else None,
                "P-Value": to_nearest_thousandth(reg.test_results.p_value) if reg else None,
                "Significant": reg.test_results.significant if reg else None,
                "Last observed": fmt_day(series.last_observed),
            })
    return rows


CATEGORY_LABELS = {
    "Temperature": Category.TEMPERATURE,
    "Precipitation & Snow": Category.PRECIPITATION_OR_SNOW,
    "Wind": Category.WIND,
}


# ─────────────────────────────────────────────────────────────
# Main dashboard
# ─────────────────────────────────────────────────────────────


def main() -> None:
    """Render the form, then the chart, legend and regression summaries."""
    try:
        config = _load_config()
    except (FileNotFoundError, ValueError) as exc:
        st.markdown(
            f'<div class="error-card">⚠️ {html.escape(str(exc))}</div>',
            unsafe_allow_html=True,
        )
        return

    dashboard = _get_dashboard(config)
    defaults = config["defaults"]
    end_default = default_end_year()

    # ── SECTION 1: Request form ──────────────────────────────

    with st.form("request"):
        locations_input = st.text_input(
            "Locations (comma separated)",
            value=", ".join(CLI_ARGS.location),
            placeholder="Boston, Denver",
        )
        metrics_input = st.multiselect(
            "Metrics",
            options=list(METRICS),
            default=defaults.get("metrics", ["AVERAGE_TEMPERATURE"]),
            format_func=lambda m: METRICS.get(m, m),
        )
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            average_years = st.number_input(
                "Years in moving average", min_value=1, max_value=MAX_AVERAGE_YEARS,
                value=defaults.get("average_years", 1), step=1,
            )
        with c2:
            start_year = st.number_input(
                "Start year", min_value=MIN_START_YEAR, max_value=end_default - 1,
                value=end_default - DEFAULT_HISTORY_YEARS, step=1,
            )
        with c3:
            end_year = st.number_input(
                "End year", min_value=MIN_START_YEAR + 1, max_value=end_default,
                value=end_default, step=1,
            )
        with c4:
            degree = st.selectbox(
                "Regression", options=[1, 2, 3, 4, 5],
                index=defaults.get("regression_degree", 1) - 1,
                format_func=degree_text,
            )
        submitted = st.form_submit_button("Submit")
        st.markdown(
            '<div class="fine-print">All metrics are calculated per-day, and each day '
            "in the specified moving average range in years will be averaged to "
            "produce the final result.</div>",
            unsafe_allow_html=True,
        )

    if submitted:
        request = AnalysisRequest(
            locations=[loc.strip() for loc in locations_input.split(",") if loc.strip()],
            metrics=list(metrics_input),
            average_years=int(average_years),
            start_year=int(start_year),
            end_year=int(end_year),
            regression_degree=int(degree),
        )
        try:
            with st.spinner(f"Loading {', '.join(request.locations) or '…'}"):
                dashboard.submit(request)
        except ValueError as exc:
            if isinstance(exc, DataIntegrityError):
                message = f"The analytics service returned inconsistent data: {exc}"
            else:
                message = str(exc)
            st.markdown(
                f'<div class="error-card">⚠️ {html.escape(message)}</div>',
                unsafe_allow_html=True,
            )
            return
        except FetchFailure:
            st.markdown(
                '<div class="error-card">⚠️ Failed to fetch weather data. '
                "Please try again later.</div>",
                unsafe_allow_html=True,
            )
            return
        except StaleSubmission:
            return

    if not dashboard.responses:
        return

    # ── SECTION 2: Category selector + chart ─────────────────

    for mismatch in find_metric_mismatches(dashboard.responses):
        st.markdown(
            f'<div class="warning-card">{html.escape(mismatch["location"])} reports a different '
            f"metric set than the first location; missing series are left empty.</div>",
            unsafe_allow_html=True,
        )

    label = st.radio("Category", list(CATEGORY_LABELS), horizontal=True,
                     label_visibility="collapsed")
    category = CATEGORY_LABELS[label]

    result = dashboard.render(category)
    if not result.traces:
        st.markdown(
            '<div class="warning-card">No series in this category.</div>',
            unsafe_allow_html=True,
        )
        return

    st.plotly_chart(result.figure, use_container_width=True, config={"displayModeBar": False})
    st.markdown(legend_html(result.legend), unsafe_allow_html=True)

    # ── SECTION 3: Regression summaries ──────────────────────

    st.markdown("<div style='height:1.5rem'></div>", unsafe_allow_html=True)
    st.markdown('<div class="section-label">Regression</div>', unsafe_allow_html=True)
    for summary in dashboard.summaries(category):
        st.markdown(f'<div class="summary">{html.escape(summary)}</div>', unsafe_allow_html=True)

    import pandas as pd  # only the table needs it

    organized = dashboard.organized()
    st.dataframe(
        pd.DataFrame(regression_rows(organized, category)),
        use_container_width=True,
        hide_index=True,
    )
    for location in organized:
        for series in location.metrics.values():
            if series.error and classify(series.metric) == category:
                st.markdown(
                    f'<div class="warning-card">{html.escape(location.location)}: '
                    f"{html.escape(series.error)}. "
                    "Showing observed values only.</div>",
                    unsafe_allow_html=True,
                )


main()
