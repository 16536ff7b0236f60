"""
Centralized deployment configuration for ThreadSense.

Values that vary by environment belong here. Override via environment
variables. Analysis tunables (keyword lists, thresholds) live in the
YAML profile loaded by threadsense.settings instead.
"""

import os

# ============================================================
# Analysis profile
# ============================================================

CONFIG_PATH: str | None = os.environ.get("THREADSENSE_CONFIG") or None
"""Path to a YAML analysis profile. Unset means built-in defaults."""

# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("THREADSENSE_LOG_LEVEL", "INFO").upper()
"""Root log level: DEBUG, INFO, WARNING, ERROR or CRITICAL."""

LOG_FORMAT: str = os.environ.get("THREADSENSE_LOG_FORMAT", "auto").lower()
"""json, human, or auto (JSON when stderr is not a terminal)."""


def log_format_as_json() -> bool | None:
    """LOG_FORMAT as the json_format flag of configure_logging (None = auto)."""
    if LOG_FORMAT == "json":
        return True
    if LOG_FORMAT == "human":
        return False
    return None
