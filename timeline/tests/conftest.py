import logging

import pytest

from timeline.metrics import reset_metrics


@pytest.fixture(autouse=True)
def restore_logging_and_metrics():
    """CLI tests reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_metrics()
