# Project: weather-trends
# Owner: GreenUnicorn
"""
test_cli.py — Tests for the command-line interface.

fetch_all is patched so no request leaves the test process.
"""

import pytest

from conftest import make_response
from weather_trends.cli import main
from weather_trends.client import FetchFailure
from weather_trends.config import API_URL_ENV_VAR
from weather_trends.utils import log_event


CONFIG_TOML = """
[service]
url = "http://svc.local"

[defaults]
metrics = ["AVERAGE_TEMPERATURE", "MAX_WIND_SPEED"]

[chart]
horizon_days = 60
step_days = 30

[log]
path = "{log_path}"
"""


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML.format(log_path=(tmp_path / "cli.log").as_posix()))
    return path


@pytest.fixture
def fake_fetch(monkeypatch):
    calls = []

    def fetch_all(request, api_url, timeout=30, log_path=None):
        calls.append((request, api_url))
        return [make_response(loc, metrics=tuple(request.metrics)) for loc in request.locations]

    monkeypatch.setattr("weather_trends.dashboard.fetch_all", fetch_all)
    return calls


def _analyse(config_file, *extra):
    main(["--config", str(config_file), "analyse", "--start-year", "1990",
          "--end-year", "2020", *extra])


def test_metrics_lists_known_identifiers(capsys):
    main(["metrics"])
    out = capsys.readouterr().out
    assert "AVERAGE_TEMPERATURE" in out
    assert "MAX_WIND_SPEED" in out
    assert "mph" in out


def test_analyse_prints_table_legend_and_summary(config_file, fake_fetch, capsys):
    _analyse(config_file, "--location", "Boston", "--location", "Denver")
    out = capsys.readouterr().out

    assert "Temperature regressions" in out
    assert "Legend" in out
    assert "daily average temperature in Boston (1-year average) (°F) (Regression)" in out
    assert "The daily average temperature in Denver" in out
    request, api_url = fake_fetch[0]
    assert api_url == "http://svc.local"
    assert request.metrics == ["AVERAGE_TEMPERATURE", "MAX_WIND_SPEED"]


def test_analyse_category_and_metric_flags(config_file, fake_fetch, capsys):
    _analyse(config_file, "--location", "Boston", "--metric", "MAX_WIND_SPEED",
             "--category", "wind")
    out = capsys.readouterr().out
    assert "Wind regressions" in out
    assert "max wind speed in Boston" in out
    assert fake_fetch[0][0].metrics == ["MAX_WIND_SPEED"]


def test_analyse_writes_html(config_file, fake_fetch, tmp_path, capsys):
    output = tmp_path / "charts" / "boston.html"
    _analyse(config_file, "--location", "Boston", "--output", str(output))
    assert output.exists()
    assert "Chart written to" in capsys.readouterr().out


def test_analyse_unknown_category_exits(config_file, fake_fetch, capsys):
    with pytest.raises(SystemExit) as exc:
        _analyse(config_file, "--location", "Boston", "--category", "humidity")
    assert exc.value.code == 1
    assert "Unknown category" in capsys.readouterr().out
    assert fake_fetch == []


def test_analyse_invalid_request_exits(config_file, fake_fetch, capsys):
    with pytest.raises(SystemExit):
        _analyse(config_file, "--location", "Boston", "--average-years", "11")
    assert "average_years" in capsys.readouterr().out


@pytest.mark.parametrize("flag, match", [
    ("--average-years", "average_years"),
    ("--degree", "regression_degree"),
])
def test_analyse_explicit_zero_is_validated(config_file, fake_fetch, capsys, flag, match):
    with pytest.raises(SystemExit):
        _analyse(config_file, "--location", "Boston", flag, "0")
    assert match in capsys.readouterr().out
    assert fake_fetch == []


def test_analyse_fetch_failure_exits(config_file, monkeypatch, capsys):
    def failing(request, api_url, timeout=30, log_path=None):
        raise FetchFailure("Failed to fetch weather data for 'Boston'.")

    monkeypatch.setattr("weather_trends.dashboard.fetch_all", failing)
    with pytest.raises(SystemExit):
        _analyse(config_file, "--location", "Boston")
    assert "Please try again later." in capsys.readouterr().out


def test_analyse_reports_isolated_series_errors(config_file, monkeypatch, capsys):
    def partial(request, api_url, timeout=30, log_path=None):
        return [make_response("Boston", metrics=("AVERAGE_TEMPERATURE",), regressions={})]

    monkeypatch.setattr("weather_trends.dashboard.fetch_all", partial)
    _analyse(config_file, "--location", "Boston", "--metric", "AVERAGE_TEMPERATURE")
    out = capsys.readouterr().out
    assert "No regression result for AVERAGE_TEMPERATURE in Boston" in out
    assert "observed values only" in out


def test_analyse_strict_aborts_on_integrity_error(config_file, monkeypatch, capsys):
    def partial(request, api_url, timeout=30, log_path=None):
        return [make_response("Boston", metrics=("AVERAGE_TEMPERATURE",), regressions={})]

    monkeypatch.setattr("weather_trends.dashboard.fetch_all", partial)
    with pytest.raises(SystemExit):
        _analyse(config_file, "--location", "Boston", "--metric", "AVERAGE_TEMPERATURE",
                 "--strict")
    assert "inconsistent data" in capsys.readouterr().out


def test_analyse_without_config_uses_api_url(tmp_path, fake_fetch, monkeypatch, capsys):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    main(["--config", str(tmp_path / "missing.toml"), "--api-url", "http://flag.local",
          "analyse", "--location", "Boston", "--start-year", "1990", "--end-year", "2020"])
    assert fake_fetch[0][1] == "http://flag.local"


def test_analyse_missing_config_and_url_exits(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)
    with pytest.raises(SystemExit):
        main(["--config", str(tmp_path / "missing.toml"), "analyse", "--location", "Boston"])
    assert "Config file not found" in capsys.readouterr().out


def test_log_command_shows_recent_events(config_file, tmp_path, capsys):
    log_path = tmp_path / "cli.log"
    for i in range(5):
        log_event("WARNING", f"event {i}", log_path=log_path)
    main(["--config", str(config_file), "log", "--lines", "2"])
    out = capsys.readouterr().out
    assert "event 4" in out and "event 3" in out
    assert "event 2" not in out


def test_log_command_empty(config_file, capsys):
    main(["--config", str(config_file), "log"])
    assert "No events logged." in capsys.readouterr().out
