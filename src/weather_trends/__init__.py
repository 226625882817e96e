# Project: weather-trends
# Owner: GreenUnicorn
"""weather-trends — historical weather metrics with regression trend charts."""

__version__ = "0.1.0"
