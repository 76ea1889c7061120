"""
Animated playback of a document timeline.

- machine: pure state machine {Idle, Animating, Paused} driven by events
- scheduler: Player, which feeds timed Tick events to the machine
"""

from .machine import (
    Animating,
    Frame,
    Highlight,
    Idle,
    JumpToEnd,
    JumpToStart,
    Pause,
    Paused,
    Phase,
    Play,
    PlaybackEvent,
    PlaybackState,
    Seek,
    StepBack,
    StepForward,
    Tick,
    hold_ms,
    initial_state,
    render,
    transition,
)
from .scheduler import Player

__all__ = [
    "Animating",
    "Frame",
    "Highlight",
    "Idle",
    "JumpToEnd",
    "JumpToStart",
    "Pause",
    "Paused",
    "Phase",
    "Play",
    "PlaybackEvent",
    "PlaybackState",
    "Player",
    "Seek",
    "StepBack",
    "StepForward",
    "Tick",
    "hold_ms",
    "initial_state",
    "render",
    "transition",
]
