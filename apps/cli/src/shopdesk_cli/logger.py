"""
Structured JSON Logging for the Shopdesk CLI.

Every record is one compact JSON object per line, enriched with the service
context (`service`, `env`, `version`) so that the application's logs can be
searched and filtered by field.

Records go to stderr: stdout is the operator's surface (prompts, menus and
result tables) and must not be interleaved with log lines. Records below the
configured level are dropped.
"""

from __future__ import annotations

import json
import os
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

from . import SERVICE_NAME, __version__

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_LEVEL_ORDER = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}

_ENV = os.getenv("SHOPDESK_ENV", "local")
_THRESHOLD = os.getenv("SHOPDESK_LOG_LEVEL", "INFO").upper()
_STREAM: TextIO | None = None


def _normalize_level(level: str) -> str:
    """Returns the uppercase level, or `INFO` if it is not a known level."""
    level_upper = level.upper()
    return level_upper if level_upper in _VALID_LEVELS else "INFO"


def configure_logging(
    environment: str | None = None, level: str | None = None, stream: TextIO | None = None
) -> None:
    """
    Overrides the environment name, minimum level or output stream.

    The application calls this once at startup with the values from its
    configuration; tests use it to capture records.
    """
    global _ENV, _THRESHOLD, _STREAM
    if environment is not None:
        _ENV = environment
    if level is not None:
        _THRESHOLD = _normalize_level(level)
    if stream is not None:
        _STREAM = stream


def log_event(level: str, msg: str, **fields: Any) -> None:
    """
    Emits a structured, single-line JSON log entry to standard error.

    Standard fields:
    - `ts`: ISO 8601 timestamp in UTC.
    - `service`: The name of this service ("cli").
    - `env`: The deployment environment ("local", "prod", etc.).
    - `version`: The version of the running application.
    - `level`: The normalized log severity.
    - `msg`: The event name.

    Example:
    ```python
    log_event("INFO", "workflow_completed", operation="add_customer", key=7)
    ```

    Args:
        level: The severity level of the log (e.g., "INFO", "ERROR").
        msg: The event name.
        **fields: Extra key-value pairs added to the root of the JSON object.
    """
    normalized = _normalize_level(level)
    if _LEVEL_ORDER[normalized] < _LEVEL_ORDER.get(_THRESHOLD, 20):
        return
    record = {
        "ts": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
        "env": _ENV,
        "version": __version__,
        "level": normalized,
        "msg": msg,
    }
    record.update(fields)
    print(
        json.dumps(record, separators=(",", ":"), default=str),
        file=_STREAM or sys.stderr,
        flush=True,
    )
