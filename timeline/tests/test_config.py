"""
Tests for environment-driven settings and logging setup.
"""

import importlib
import json
import logging
import warnings

from pythonjsonlogger import jsonlogger

from timeline.config import DEFAULT_CHECKPOINT_INTERVAL, DEFAULT_SOURCE, Settings
from timeline.logging_config import get_logger, setup_logging

ENV_KEYS = [
    "TIMELINE_SOURCE",
    "TIMELINE_LOG_LEVEL",
    "TIMELINE_LOG_FORMAT",
    "TIMELINE_METRICS_ENABLED",
    "TIMELINE_METRICS_PORT",
    "TIMELINE_PLAYBACK_SPEED",
    "TIMELINE_CHECKPOINT_INTERVAL",
]


def clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)

    settings = Settings.from_env()

    assert settings.source == DEFAULT_SOURCE
    assert settings.log_level == "INFO"
    assert settings.log_format == "text"
    assert settings.metrics_enabled is False
    assert settings.metrics_port == 8080
    assert settings.playback_speed == 1.0
    assert settings.checkpoint_interval == DEFAULT_CHECKPOINT_INTERVAL


def test_from_env(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("TIMELINE_SOURCE", "https://example.com/doc.json")
    monkeypatch.setenv("TIMELINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("TIMELINE_LOG_FORMAT", "JSON")
    monkeypatch.setenv("TIMELINE_METRICS_ENABLED", "true")
    monkeypatch.setenv("TIMELINE_METRICS_PORT", "9100")
    monkeypatch.setenv("TIMELINE_PLAYBACK_SPEED", "2.5")
    monkeypatch.setenv("TIMELINE_CHECKPOINT_INTERVAL", "25")

    settings = Settings.from_env()

    assert settings.source == "https://example.com/doc.json"
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.metrics_enabled is True
    assert settings.metrics_port == 9100
    assert settings.playback_speed == 2.5
    assert settings.checkpoint_interval == 25


def test_invalid_values_fall_back(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("TIMELINE_LOG_FORMAT", "yaml")
    monkeypatch.setenv("TIMELINE_METRICS_PORT", "not-a-port")
    monkeypatch.setenv("TIMELINE_PLAYBACK_SPEED", "-3")
    monkeypatch.setenv("TIMELINE_CHECKPOINT_INTERVAL", "0")

    settings = Settings.from_env()

    assert settings.log_format == "text"
    assert settings.metrics_port == 8080
    assert settings.playback_speed == 1.0
    assert settings.checkpoint_interval == DEFAULT_CHECKPOINT_INTERVAL


def test_json_log_format(capsys):
    setup_logging("INFO", "json")

    get_logger("timeline.test", source="data.json").info("Loaded document log")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Loaded document log"
    assert record["level"] == "INFO"
    assert record["logger"] == "timeline.test"
    assert record["source"] == "data.json"


def test_text_log_format_without_source(capsys):
    setup_logging("WARNING", "text")

    logging.getLogger("timeline.test").info("hidden")
    logging.getLogger("timeline.test").warning("shown")

    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err
    assert "[source=N/A]" in err


def test_json_formatter_import_not_deprecated():
    """The installed python-json-logger still serves the jsonlogger module."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        importlib.reload(jsonlogger)
