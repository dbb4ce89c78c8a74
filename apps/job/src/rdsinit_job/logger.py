"""
Structured JSON Logging for the Initialization Job.

The function runtime ships stdout to the log service line by line, so every
record is a single compact JSON object. Each record is enriched with the
service name, environment and version, which is what makes it possible to tell
which job version ran a given script.

Never pass a credential, a password, or an unmasked connection URL as a field.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import UTC, datetime
from typing import Any

from . import SERVICE_NAME, __version__

_ENV = os.getenv("RDSINIT_ENV", "local")
_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _normalize_level(level: str) -> str:
    """Returns the uppercase level, or `INFO` if the level is not recognized."""
    level_upper = level.upper()
    return level_upper if level_upper in _VALID_LEVELS else "INFO"


def log_event(level: str, msg: str, **fields: Any) -> None:
    """
    Emits a structured, single-line JSON log entry to standard output.

    Example Usage:
    ```python
    log_event("INFO", "init_script_applied", database="rds_init_pg_db", seed_rows=1)
    ```

    Args:
        level: The severity level of the log (e.g., "INFO", "ERROR").
        msg: A short, machine-friendly event name.
        **fields: Extra key-value pairs added to the root of the record.
    """
    record = {
        "ts": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "env": _ENV,
        "version": __version__,
        "level": _normalize_level(level),
        "msg": msg,
    }
    record.update(fields)
    print(json.dumps(record, separators=(",", ":"), default=str), file=sys.stdout, flush=True)
