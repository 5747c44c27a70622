"""
Configuration for the client & contract service.

All settings are loaded from environment variables, with defaults suitable
for local development. The CLI can override the server host and port.
"""

import os
from datetime import date
from typing import Optional

# --- Application ---
APP_NAME = "Client & Contract Service"
APP_VERSION = "1.0.0"

# --- Server ---
HOST = os.environ.get("CONTRACTS_HOST", "127.0.0.1")
PORT = int(os.environ.get("CONTRACTS_PORT", "8000"))

# --- Logging ---
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_LEVEL_RAW = os.environ.get("CONTRACTS_LOG_LEVEL", "INFO").upper()
LOG_LEVEL = LOG_LEVEL_RAW if LOG_LEVEL_RAW in _VALID_LOG_LEVELS else "INFO"
LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# --- Clock ---
# ISO date (YYYY-MM-DD). When set, the service runs on a pinned "today"
# instead of the system date.
TODAY_RAW = os.environ.get("CONTRACTS_TODAY", "")


def pinned_today() -> Optional[date]:
    """Return the pinned reference date, or None when the system date is used."""
    if not TODAY_RAW:
        return None
    return date.fromisoformat(TODAY_RAW)


def validate_config() -> list[str]:
    """
    Validate configuration.
    Returns list of error messages (empty if valid).
    """
    errors = []

    if LOG_LEVEL_RAW not in _VALID_LOG_LEVELS:
        errors.append(f"CONTRACTS_LOG_LEVEL must be one of {', '.join(_VALID_LOG_LEVELS)}")

    if not 0 < PORT < 65536:
        errors.append(f"CONTRACTS_PORT out of range: {PORT}")

    if TODAY_RAW:
        try:
            date.fromisoformat(TODAY_RAW)
        except ValueError:
            errors.append(f"CONTRACTS_TODAY is not an ISO date: {TODAY_RAW!r}")

    return errors
