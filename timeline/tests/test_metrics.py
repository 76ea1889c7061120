"""
Tests for Prometheus metrics helpers.
"""

from prometheus_client import CollectorRegistry

from timeline import metrics
from timeline.core.operations import Operation, OperationKind
from timeline.replay import Timeline


def test_helpers_noop_before_init():
    """Tracking before init_metrics() must not raise."""
    assert metrics.ENTRIES_DROPPED is None

    metrics.track_dropped_entry("missing_text")
    metrics.track_normalized("insert", 3)
    metrics.track_clamped_delete()
    metrics.track_load_failure()
    with metrics.track_replay_duration():
        pass


def test_init_is_idempotent():
    registry = CollectorRegistry()

    metrics.init_metrics(registry=registry)
    counter = metrics.ENTRIES_DROPPED
    metrics.init_metrics(registry=registry)

    assert metrics.ENTRIES_DROPPED is counter


def test_counters_registered():
    registry = CollectorRegistry()
    metrics.init_metrics(registry=registry)

    metrics.track_load_failure()
    metrics.track_load_failure()
    metrics.track_normalized("delete", 0)

    assert registry.get_sample_value("timeline_log_load_failures_total") == 2.0
    assert registry.get_sample_value("timeline_operations_normalized_total", {"kind": "delete"}) is None


def test_replay_duration_observed():
    registry = CollectorRegistry()
    metrics.init_metrics(registry=registry)
    op = Operation(kind=OperationKind.INSERT, text="a", length=1, position=0, timestamp=1)

    timeline = Timeline([op])
    timeline.state_at(0)
    timeline.state_at(0)

    assert registry.get_sample_value("timeline_replay_duration_seconds_count") == 2.0


def test_server_disabled():
    """A disabled server does not initialize metrics."""
    metrics.start_metrics_server(enabled=False, port=0)

    assert metrics.ENTRIES_DROPPED is None
