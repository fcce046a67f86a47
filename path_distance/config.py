"""Central configuration for the GPS path distance tool.

All values are constants imported by the rest of the package. Each can be
overridden through environment variables (optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip().lower()


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Simplification
# ---------------------------------------------------------------------------
# Douglas-Peucker tolerance in metres, measured in the projected plane. Points
# closer than this to the simplified chord are dropped.
SIMPLIFY_EPSILON_M = _env_float("PATH_DISTANCE_SIMPLIFY_EPSILON_M", 1.0)

# Which paths feed their simplified form into the metrics: "none", "track",
# "reference" or "both". The location-weighted average always simplifies the
# comparison track regardless of this setting.
SIMPLIFY_TARGET = _env_str("PATH_DISTANCE_SIMPLIFY_TARGET", "none")


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Worker threads used to compare tracks against the reference in parallel.
MAX_WORKERS = max(1, _env_int("PATH_DISTANCE_MAX_WORKERS", 4))

# Fréchet tables above this many cells switch to the rolling two-row variant.
FRECHET_LOW_MEMORY_CELLS = _env_int(
    "PATH_DISTANCE_FRECHET_LOW_MEMORY_CELLS", 25_000_000
)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
# Default logging level for the command line entry point.
LOG_LEVEL = _env_str("PATH_DISTANCE_LOG_LEVEL", "info").upper()

# Suffix inserted before ".gpx" when exporting simplified tracks.
EXPORT_SUFFIX = ".modified"

# Label used when a GPX track carries no name.
UNNAMED_LABEL = "-- Unnamed --"

# Column widths (characters) used when autosizing Excel report columns.
EXCEL_AUTOSIZE_MAX_WIDTH = 50
EXCEL_AUTOSIZE_MIN_WIDTH = 6
EXCEL_AUTOSIZE_PADDING = 2
