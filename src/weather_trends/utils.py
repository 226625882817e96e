# Project: weather-trends
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: retry logic, event logging and date labels.
"""

import time
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

DEFAULT_LOG_PATH = Path("logs/weather_trends.log")
MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 2
LOG_TAG = "[weather-trends]"

_log_path = DEFAULT_LOG_PATH


def fmt_day(day: date | None) -> str:
    """Format a calendar day as a short human-readable label.

    Args:
        day: The date to format, or None for an unknown date.

    Returns:
        Formatted string like '24 Feb 2021', or '—' for None.
    """
    if day is None:
        return "—"
    return day.strftime("%d %b %Y")


def with_retry(
    fn: Callable[..., Any],
    *args: Any,
    label: str = "API call",
    log_path: Path | None = None,
    **kwargs: Any,
) -> Any:
    """Call a function up to MAX_ATTEMPTS times, retrying on any exception.

    Args:
        fn: Callable to invoke.
        *args: Positional arguments forwarded to fn.
        label: Human-readable name for the call, used in warning messages.
        log_path: Log file for recording the final failure. Defaults to
            DEFAULT_LOG_PATH.
        **kwargs: Keyword arguments forwarded to fn.

    Returns:
        The return value of fn on success.

    Raises:
        RuntimeError: If all MAX_ATTEMPTS attempts raise exceptions.
    """
    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            if attempt < MAX_ATTEMPTS:
                print(
                    f"{LOG_TAG} {label} failed (attempt {attempt}/{MAX_ATTEMPTS}): "
                    f"{e}. Retrying in {RETRY_DELAY_SECONDS}s..."
                )
                time.sleep(RETRY_DELAY_SECONDS)
            else:
                msg = f"All {MAX_ATTEMPTS} attempts failed for {label}."
                print(f"{LOG_TAG} {msg}")
                log_event("ERROR", f"{msg} Last error: {e}", log_path=log_path)
                raise RuntimeError(msg) from e


def set_log_path(path: Path) -> None:
    """Send log_event and read_log to path instead of DEFAULT_LOG_PATH."""
    global _log_path
    _log_path = Path(path)


def log_event(level: str, message: str, log_path: Path | None = None) -> None:
    """Append a timestamped line to the log file.

    Format: ``2026-02-23 20:00:01 [WARNING] message``

    Args:
        level: Severity tag, e.g. 'ERROR' or 'WARNING'.
        message: Event description.
        log_path: Destination log file. Defaults to the path set by
            set_log_path (DEFAULT_LOG_PATH).
    """
    path = log_path if log_path is not None else _log_path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(path, "a") as f:
            f.write(f"{timestamp} [{level}] {message}\n")
    except OSError:
        pass  # Never crash on logging failure


def read_log(log_path: Path | None = None) -> list[dict]:
    """Read back every event written by log_event.

    Returns:
        List of dicts with keys timestamp, level, message — empty if the
        file is missing.
    """
    path = log_path if log_path is not None else _log_path
    if not path.exists():
        return []
    events = []
    try:
        with open(path) as f:
            for line in f:
                line = line.rstrip("\n")
                # "YYYY-mm-dd HH:MM:SS [LEVEL] message"
                stamp, _, rest = line.partition(" [")
                level, sep, message = rest.partition("] ")
                if not sep:
                    continue
                events.append({"timestamp": stamp, "level": level, "message": message})
    except OSError:
        return []
    return events
