# Project: weather-trends
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing. WEATHER_TRENDS_API_URL, when set,
replaces [service].url so the same file works against several deployments.
"""

import os
import tomllib
from pathlib import Path

from weather_trends.regression import DEFAULT_HORIZON_DAYS, DEFAULT_STEP_DAYS

DEFAULT_CONFIG_PATH = Path("config.toml")
API_URL_ENV_VAR = "WEATHER_TRENDS_API_URL"

DEFAULTS = {
    "service": {"timeout": 30},
    "defaults": {},
    "chart": {"horizon_days": DEFAULT_HORIZON_DAYS, "step_days": DEFAULT_STEP_DAYS},
    "log": {"path": "logs/weather_trends.log"},
}


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Optional sections and keys are filled in from DEFAULTS.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys are missing or values are invalid.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and set [service].url."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    for section, values in DEFAULTS.items():
        merged = dict(values)
        merged.update(config.get(section, {}))
        config[section] = merged

    env_url = os.environ.get(API_URL_ENV_VAR)
    if env_url:
        config["service"]["url"] = env_url

    _validate(config)
    return config


def _validate(config: dict) -> None:
    """Validate required keys and value ranges.

    Expected config schema::

        [service]
        url     = <str>   # analytics service base URL (required)
        timeout = <int>   # seconds per request

        [defaults]
        average_years     = <int>        # 1-10
        regression_degree = <int>        # >= 1
        metrics           = [<str>, ...] # e.g. ["AVERAGE_TEMPERATURE"]

        [chart]
        horizon_days = <int>   # projection span past the last observation
        step_days    = <int>   # spacing of projected points

        [log]
        path = <str>     # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If anything required is absent or out of range.
    """
    if not config["service"].get("url"):
        raise ValueError(
            f"Missing required config key: [service].url (or set {API_URL_ENV_VAR})"
        )
    _check_number(config["service"]["timeout"], "[service].timeout")
    if config["service"]["timeout"] <= 0:
        raise ValueError("[service].timeout must be positive")

    defaults = config["defaults"]
    for key in ("average_years", "regression_degree"):
        if key in defaults:
            _check_number(defaults[key], f"[defaults].{key}", integer=True)
    if "average_years" in defaults and not 1 <= defaults["average_years"] <= 10:
        raise ValueError("[defaults].average_years must be between 1 and 10")
    if "regression_degree" in defaults and defaults["regression_degree"] < 1:
        raise ValueError("[defaults].regression_degree must be at least 1")
    metrics = defaults.get("metrics", [])
    if not isinstance(metrics, list) or not all(isinstance(m, str) and m for m in metrics):
        raise ValueError("[defaults].metrics must be a list of metric identifiers")

    chart = config["chart"]
    _check_number(chart["step_days"], "[chart].step_days", integer=True)
    _check_number(chart["horizon_days"], "[chart].horizon_days", integer=True)
    if chart["step_days"] <= 0:
        raise ValueError("[chart].step_days must be positive")
    if chart["horizon_days"] < 0:
        raise ValueError("[chart].horizon_days must not be negative")


def _check_number(value, key: str, integer: bool = False) -> None:
    """Raise ValueError unless value is a number (an int when integer=True)."""
    allowed = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, allowed):
        kind = "an integer" if integer else "a number"
        raise ValueError(f"{key} must be {kind}, got {value!r}")


def default_config(url: str) -> dict:
    """Build a validated config without a file, for a known service URL."""
    config = {section: dict(values) for section, values in DEFAULTS.items()}
    config["service"]["url"] = url
    _validate(config)
    return config
