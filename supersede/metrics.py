"""
Prometheus metrics for instrumented operations.

Counts every attempt of an instrumented operation, including attempts whose
outcome is later suppressed as stale.

Environment Variables:
    SUPERSEDE_METRICS_ENABLED: Enable metrics server (true/false) - default: false
    SUPERSEDE_METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from supersede.metrics import start_metrics_server, track_call, observe_call_duration

    start_metrics_server(enabled=True, port=8080)

    track_call("search")
    observe_call_duration("search", 0.042)
"""

import logging
import threading
from typing import Optional

from prometheus_client import Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

CALLS_TOTAL: Optional[Counter] = None
CALL_FAILURES_TOTAL: Optional[Counter] = None
CALL_DURATION: Optional[Histogram] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Safe to call repeatedly; metrics are registered only once.
    """
    global CALLS_TOTAL, CALL_FAILURES_TOTAL, CALL_DURATION
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        CALLS_TOTAL = Counter(
            "supersede_calls_total",
            "Total number of instrumented operation attempts",
            labelnames=["operation"],
        )

        CALL_FAILURES_TOTAL = Counter(
            "supersede_call_failures_total",
            "Total number of instrumented operation attempts that raised",
            labelnames=["operation"],
        )

        CALL_DURATION = Histogram(
            "supersede_call_duration_seconds",
            "Duration of instrumented operation attempts in seconds",
            labelnames=["operation"],
            buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (from SUPERSEDE_METRICS_ENABLED)
        port: HTTP port for /metrics endpoint (from SUPERSEDE_METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (SUPERSEDE_METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_call(operation: str) -> None:
    """Count one attempt of operation."""
    if CALLS_TOTAL is not None:
        CALLS_TOTAL.labels(operation=operation).inc()


def track_failure(operation: str) -> None:
    """Count one failed attempt of operation."""
    if CALL_FAILURES_TOTAL is not None:
        CALL_FAILURES_TOTAL.labels(operation=operation).inc()


def observe_call_duration(operation: str, seconds: float) -> None:
    """Record how long one attempt of operation took to settle."""
    if CALL_DURATION is not None:
        CALL_DURATION.labels(operation=operation).observe(seconds)
