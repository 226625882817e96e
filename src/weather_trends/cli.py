# Project: weather-trends
# Owner: GreenUnicorn
"""
cli.py — Command-line interface for weather-trends.

argparse (stdlib) covers our three subcommands without extra dependencies.

Commands:
  weather-trends analyse   — fetch, print regression summaries, write a chart
  weather-trends metrics   — list known metric identifiers
  weather-trends log       — show recent warnings and errors
"""

import argparse
import os
from pathlib import Path

from weather_trends.chart import render_legend, render_regression_table, write_html
from weather_trends.client import (
    DEFAULT_HISTORY_YEARS,
    AnalysisRequest,
    FetchFailure,
    default_end_year,
)
from weather_trends.config import (
    API_URL_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    default_config,
    load_config,
)
from weather_trends.dashboard import WeatherDashboard
from weather_trends.metrics import METRICS, Category, classify, unit_for
from weather_trends.organize import DataIntegrityError, find_metric_mismatches
from weather_trends.utils import LOG_TAG, read_log, set_log_path


def _resolve_config(args) -> dict:
    """Load the config file, or fall back to defaults when only a URL is known."""
    path = Path(args.config)
    if path.exists():
        config = load_config(path)
        if args.api_url:
            config["service"]["url"] = args.api_url
    else:
        url = args.api_url or os.environ.get(API_URL_ENV_VAR)
        if not url:
            # Let load_config produce the usual "config not found" message
            return load_config(path)
        config = default_config(url)
    set_log_path(Path(config["log"]["path"]))
    return config


def _given(value, fallback):
    """An explicit flag value, even 0, wins over the fallback."""
    return fallback if value is None else value


def cmd_analyse(args) -> None:
    """Fetch every location, print legend + regressions, optionally write HTML."""
    try:
        config = _resolve_config(args)
        category = Category.from_value(args.category)
    except (FileNotFoundError, ValueError) as e:
        print(f"[error] {e}")
        raise SystemExit(1)

    defaults = config["defaults"]
    end_year = _given(args.end_year, default_end_year())
    request = AnalysisRequest(
        locations=args.location,
        metrics=args.metric or defaults.get("metrics", ["AVERAGE_TEMPERATURE"]),
        average_years=_given(args.average_years, defaults.get("average_years", 1)),
        start_year=_given(args.start_year, end_year - DEFAULT_HISTORY_YEARS),
        end_year=end_year,
        regression_degree=_given(args.degree, defaults.get("regression_degree", 1)),
    )

    dashboard = WeatherDashboard.from_config(config, strict=args.strict)
    print(f"{LOG_TAG} Fetching {', '.join(request.locations)} "
          f"({request.start_year}–{request.end_year})...")
    try:
        organized = dashboard.submit(request)
    except ValueError as e:
        if isinstance(e, DataIntegrityError):
            print(f"[error] The analytics service returned inconsistent data: {e}")
        else:
            print(f"[error] {e}")
        raise SystemExit(1)
    except FetchFailure as e:
        print(f"[error] {e} Please try again later.")
        raise SystemExit(1)

    for mismatch in find_metric_mismatches(dashboard.responses):
        print(f"⚠️  {mismatch['location']} reports a different metric set "
              f"(missing: {mismatch['missing'] or '—'}, extra: {mismatch['extra'] or '—'})")

    result = dashboard.render(category)
    print()
    print(render_regression_table(organized, category))
    print()
    print("Legend")
    print(render_legend(result.legend))
    print()
    for summary in dashboard.summaries(category):
        print(f"• {summary}")

    for location in organized:
        for series in location.metrics.values():
            if series.error and classify(series.metric) == category:
                print(f"⚠️  {location.location}: {series.error} (observed values only)")

    if args.output:
        path = write_html(result.figure, Path(args.output))
        print(f"\n📈 Chart written to {path}")


def cmd_metrics(args) -> None:
    """Print the known metric identifiers with category and unit."""
    width = max(len(m) for m in METRICS)
    for metric, name in METRICS.items():
        print(f"  {metric:<{width}}  {classify(metric).value:<7} {unit_for(metric):<4} {name}")


def cmd_log(args) -> None:
    """Show the most recent logged warnings and errors."""
    try:
        config = _resolve_config(args)
        log_path = Path(config["log"]["path"])
    except (FileNotFoundError, ValueError):
        log_path = None
    events = read_log(log_path)
    if not events:
        print("No events logged.")
        return
    for event in events[-args.lines:]:
        print(f"{event['timestamp']}  {event['level']:<7}  {event['message']}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="weather-trends",
        description="Historical weather metrics with regression trend projections",
    )
    parser.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), metavar="PATH",
                        help="TOML config file (default: config.toml)")
    parser.add_argument("--api-url", default=None, metavar="URL",
                        help=f"Analytics service URL (overrides config and ${API_URL_ENV_VAR})")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    p_analyse = subparsers.add_parser("analyse", help="Fetch and chart regression trends")
    p_analyse.add_argument("--location", metavar="PLACE", action="append", required=True,
                           help="Location to analyse; repeat for several")
    p_analyse.add_argument("--metric", metavar="METRIC", action="append", default=None,
                           help="Metric identifier, e.g. AVERAGE_TEMPERATURE; repeatable")
    p_analyse.add_argument("--category", default="temp",
                           help="Chart category: temp, precip or wind (default: temp)")
    p_analyse.add_argument("--average-years", type=int, default=None, metavar="N",
                           help="Years in the moving average (1-10)")
    p_analyse.add_argument("--start-year", type=int, default=None, metavar="YEAR")
    p_analyse.add_argument("--end-year", type=int, default=None, metavar="YEAR")
    p_analyse.add_argument("--degree", type=int, default=None, metavar="D",
                           help="Regression polynomial degree")
    p_analyse.add_argument("--output", default=None, metavar="FILE",
                           help="Write the interactive chart to an HTML file")
    p_analyse.add_argument("--strict", action="store_true",
                           help="Abort on any data integrity problem")

    subparsers.add_parser("metrics", help="List known metric identifiers")

    p_log = subparsers.add_parser("log", help="Show recent warnings and errors")
    p_log.add_argument("--lines", type=int, default=20, metavar="N")

    args = parser.parse_args(argv)

    commands = {
        "analyse": cmd_analyse,
        "metrics": cmd_metrics,
        "log": cmd_log,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
