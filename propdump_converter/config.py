"""Configuration constants, buffer sizes, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Buffer sizes and default output formats are plain
data — not buried in the parser — so they can be tuned without touching
decoding logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level and read from environment variables with defaults.

RULES:
- LINE_BUFFER_SIZE bounds one logical line (longer lines are truncated)
- BLOB_SCRATCH_SIZE bounds one trailing blob (larger indicators are rejected)
- HEADER_BUFFER_SIZE is fixed; the header line is always short
- All other defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            "{} must be a positive integer, got {!r}".format(name, raw)
        ) from None
    if value <= 0:
        raise ValueError("{} must be a positive integer, got {}".format(name, value))
    return value


# ---------------------------------------------------------------------------
# Buffer sizes
# ---------------------------------------------------------------------------

LINE_BUFFER_SIZE = _env_int("PROPDUMP_LINE_BUFFER_SIZE", 65536)
"""Capacity of the reusable logical-line buffer (bytes)."""

BLOB_SCRATCH_SIZE = _env_int("PROPDUMP_BLOB_SCRATCH_SIZE", 131072)
"""Largest length indicator accepted for a single trailing blob (bytes)."""

HEADER_BUFFER_SIZE = 255
"""Capacity of the buffer the "propdump version N" header is read into."""

# ---------------------------------------------------------------------------
# Output and logging defaults
# ---------------------------------------------------------------------------

DEFAULT_FORMATS = os.getenv("PROPDUMP_DEFAULT_FORMATS", "json,csv,summary")
LOG_LEVEL = os.getenv("PROPDUMP_LOG_LEVEL", "WARNING").upper()


def parse_format_list(value: str | None) -> list[str]:
    """Split a comma-separated list of formatter keys.

    RULES:
    - Whitespace around keys is ignored
    - Empty entries are dropped ("json,,csv" → ["json", "csv"])
    - None or empty string returns []
    """
    if not value:
        return []
    return [key.strip() for key in value.split(",") if key.strip()]
