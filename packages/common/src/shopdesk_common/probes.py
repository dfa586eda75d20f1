"""
Resilient Store Connectivity Probe.

Before the menu is shown, the application checks that the relational store
answers. A single failed attempt is not conclusive: the probe retries with a
jittered exponential backoff, so a store that is still starting up (or a
momentary network glitch) does not stop the application.

Every failed attempt is logged as a structured JSON object through the
module's stdlib logger, on stderr so that stdout stays free for the operator.
"""

from __future__ import annotations

import json
import logging
import random
import sys
import time
from datetime import UTC, datetime
from typing import TypedDict

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


class StoreProbeResult(TypedDict):
    """
    The result of probing the store.

    Attributes:
        ok: True if the store answered `SELECT 1` within the timeout.
        latency_ms: Duration of the successful attempt, or the mean duration
            of all attempts when every one failed.
        attempts: Number of attempts made.
        reason: A short, machine-readable failure cause, or None on success.
    """

    ok: bool
    latency_ms: float
    attempts: int
    reason: str | None


def _jittered_backoff(attempt: int, base_ms: int = 100, max_ms: int = 200) -> None:
    """
    Sleeps for an exponentially growing, jittered delay.

    Args:
        attempt: The retry number, starting at 0.
    """
    delay_ms = min(base_ms * (2**attempt), max_ms)
    jitter = random.uniform(0.8, 1.2)  # 20% jitter
    time.sleep((delay_ms * jitter) / 1000)


def _probe_once(engine: Engine, timeout_ms: int) -> tuple[bool, float, str | None]:
    """Performs a single `SELECT 1` round trip through the engine."""
    start = time.perf_counter()
    try:
        with engine.connect() as conn:
            value = conn.execute(text("SELECT 1")).scalar()
    except OperationalError as e:
        reason = "timeout" if "timeout" in str(e).lower() else "connection_error"
        return False, (time.perf_counter() - start) * 1000, reason
    except SQLAlchemyError as e:
        return False, (time.perf_counter() - start) * 1000, f"exception:{type(e).__name__}"

    elapsed_ms = (time.perf_counter() - start) * 1000
    if value != 1:
        return False, elapsed_ms, "unexpected_result"
    if elapsed_ms > timeout_ms:
        return False, elapsed_ms, "timeout"
    return True, elapsed_ms, None


def probe_store(engine: Engine, timeout_ms: int = 300, retries: int = 2) -> StoreProbeResult:
    """
    Probes the store, retrying failed attempts.

    Args:
        engine: The engine the application will use.
        timeout_ms: An attempt slower than this counts as failed.
        retries: How many times to retry after the first failed attempt.

    Returns:
        The final `StoreProbeResult` after all attempts.
    """
    last_error, total_latency = None, 0.0
    for attempt in range(retries + 1):
        success, latency_ms, error = _probe_once(engine, timeout_ms)
        total_latency += latency_ms
        if success:
            return {
                "ok": True, "latency_ms": round(latency_ms, 2),
                "attempts": attempt + 1, "reason": None,
            }
        last_error = error
        logger.warning(json.dumps({
            "ts": datetime.now(UTC).isoformat(), "level": "WARNING", "msg": "probe_attempt_failed",
            "dep": engine.dialect.name, "attempt": attempt + 1, "max_attempts": retries + 1,
            "elapsed_ms": round(latency_ms, 2), "reason": error,
        }, separators=(",", ":")))
        if attempt < retries:
            _jittered_backoff(attempt)
    return {
        "ok": False, "latency_ms": round(total_latency / (retries + 1), 2),
        "attempts": retries + 1, "reason": last_error,
    }
