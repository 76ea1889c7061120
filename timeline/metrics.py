"""
Prometheus metrics for the timeline engine.

Tracks data quality of ingested logs (dropped and clamped entries) and replay
cost. Metrics are created once by init_metrics(); until then every helper is
a no-op, so library callers pay nothing unless they opt in.

Environment Variables:
    TIMELINE_METRICS_ENABLED: Enable metrics server (true/false) - default: false
    TIMELINE_METRICS_PORT: HTTP port for /metrics endpoint - default: 8080

Usage:
    from timeline.metrics import start_metrics_server, track_dropped_entry

    start_metrics_server(enabled=True, port=8080)
    track_dropped_entry("missing_text")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

ENTRIES_DROPPED: Optional[Counter] = None
OPERATIONS_NORMALIZED: Optional[Counter] = None
DELETES_CLAMPED: Optional[Counter] = None
REPLAY_DURATION: Optional[Histogram] = None
LOG_LOAD_FAILURES: Optional[Counter] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics(registry: Optional[CollectorRegistry] = None) -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Args:
        registry: Registry to register with (default: prometheus global registry)
    """
    global ENTRIES_DROPPED, OPERATIONS_NORMALIZED, DELETES_CLAMPED
    global REPLAY_DURATION, LOG_LOAD_FAILURES, _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        kwargs = {"registry": registry} if registry is not None else {}

        # Raw entries the normalizer or loader discarded (labels: reason)
        ENTRIES_DROPPED = Counter(
            "timeline_entries_dropped_total",
            "Raw log entries dropped as malformed",
            labelnames=["reason"],
            **kwargs,
        )

        OPERATIONS_NORMALIZED = Counter(
            "timeline_operations_normalized_total",
            "Operations produced by the normalizer",
            labelnames=["kind"],
            **kwargs,
        )

        DELETES_CLAMPED = Counter(
            "timeline_deletes_clamped_total",
            "Delete entries with end < start whose length was clamped to zero",
            **kwargs,
        )

        REPLAY_DURATION = Histogram(
            "timeline_replay_duration_seconds",
            "Duration of document state reconstruction in seconds",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            **kwargs,
        )

        LOG_LOAD_FAILURES = Counter(
            "timeline_log_load_failures_total",
            "Document log sources that failed to load or decode",
            **kwargs,
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def reset_metrics() -> None:
    """Forget initialized metrics so init_metrics() can run again (tests)."""
    global ENTRIES_DROPPED, OPERATIONS_NORMALIZED, DELETES_CLAMPED
    global REPLAY_DURATION, LOG_LOAD_FAILURES, _metrics_initialized

    with _metrics_lock:
        ENTRIES_DROPPED = None
        OPERATIONS_NORMALIZED = None
        DELETES_CLAMPED = None
        REPLAY_DURATION = None
        LOG_LOAD_FAILURES = None
        _metrics_initialized = False


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in a background thread.

    Args:
        enabled: Whether to start the server (TIMELINE_METRICS_ENABLED)
        port: HTTP port for /metrics (TIMELINE_METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (TIMELINE_METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_dropped_entry(reason: str) -> None:
    if ENTRIES_DROPPED is not None:
        ENTRIES_DROPPED.labels(reason=reason).inc()


def track_normalized(kind: str, count: int = 1) -> None:
    if OPERATIONS_NORMALIZED is not None and count:
        OPERATIONS_NORMALIZED.labels(kind=kind).inc(count)


def track_clamped_delete() -> None:
    if DELETES_CLAMPED is not None:
        DELETES_CLAMPED.inc()


def track_load_failure() -> None:
    if LOG_LOAD_FAILURES is not None:
        LOG_LOAD_FAILURES.inc()


@contextmanager
def track_replay_duration() -> Generator[None, None, None]:
    """
    Context manager timing a reconstruction.

    Usage:
        with track_replay_duration():
            state = timeline.state_at(index)
    """
    if REPLAY_DURATION is None:
        yield
        return

    with REPLAY_DURATION.time():
        yield
