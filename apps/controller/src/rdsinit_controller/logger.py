"""
Structured JSON Logging for the Trigger Controller.

Every decision the controller makes (invoke, skip, no-op) and every invocation
outcome is logged as one JSON object per line, tagged with the physical
resource id so a deployment's history can be followed across re-evaluations.
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
    level_upper = level.upper()
    return level_upper if level_upper in _VALID_LEVELS else "INFO"


def log_event(level: str, msg: str, **fields: Any) -> None:
    """
    Emits a structured, single-line JSON log entry to standard output.

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
