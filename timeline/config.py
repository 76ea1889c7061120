"""
Environment-driven settings.

Environment Variables:
    TIMELINE_SOURCE: Path or http(s) URL of the document log - default: data.json
    TIMELINE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    TIMELINE_LOG_FORMAT: json or text - default: text
    TIMELINE_METRICS_ENABLED: Start the /metrics endpoint - default: false
    TIMELINE_METRICS_PORT: Port for /metrics - default: 8080
    TIMELINE_PLAYBACK_SPEED: Playback speed multiplier - default: 1.0
    TIMELINE_CHECKPOINT_INTERVAL: Operations between replay checkpoints - default: 100

Invalid values fall back to the default.
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_SOURCE = "data.json"
DEFAULT_CHECKPOINT_INTERVAL = 100


def _env_int(key: str) -> Optional[int]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _env_float(key: str) -> Optional[float]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = float(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _env_bool(key: str, default: bool = False) -> bool:
    val = os.getenv(key)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    source: str = DEFAULT_SOURCE
    log_level: str = "INFO"
    log_format: str = "text"
    metrics_enabled: bool = False
    metrics_port: int = 8080
    playback_speed: float = 1.0
    checkpoint_interval: int = DEFAULT_CHECKPOINT_INTERVAL

    @staticmethod
    def from_env() -> "Settings":
        log_format = os.getenv("TIMELINE_LOG_FORMAT", "text").strip().lower()
        if log_format not in ("json", "text"):
            log_format = "text"

        return Settings(
            source=os.getenv("TIMELINE_SOURCE") or DEFAULT_SOURCE,
            log_level=os.getenv("TIMELINE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            log_format=log_format,
            metrics_enabled=_env_bool("TIMELINE_METRICS_ENABLED"),
            metrics_port=_env_int("TIMELINE_METRICS_PORT") or 8080,
            playback_speed=_env_float("TIMELINE_PLAYBACK_SPEED") or 1.0,
            checkpoint_interval=_env_int("TIMELINE_CHECKPOINT_INTERVAL") or DEFAULT_CHECKPOINT_INTERVAL,
        )
