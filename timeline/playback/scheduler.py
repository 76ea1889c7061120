"""
Playback scheduler: drives the state machine with timed ticks.
"""

import logging
import time
from typing import Callable, Optional

from ..replay.runner import Timeline
from .machine import (
    Frame,
    Pause,
    Play,
    PlaybackEvent,
    PlaybackState,
    Seek,
    Tick,
    hold_ms,
    initial_state,
    render,
    transition,
)

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Frame, PlaybackState], None]


class Player:
    """
    Owns the current playback state and the playback speed.

    Usage:
        player = Player(timeline, speed=2.0, on_frame=draw)
        player.dispatch(Seek(10))
        player.dispatch(Play())
        player.run()   # blocks until playback comes to rest
    """

    def __init__(
        self,
        timeline: Timeline,
        speed: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        on_frame: Optional[FrameCallback] = None,
    ) -> None:
        self.timeline = timeline
        self.state: PlaybackState = initial_state()
        self.speed = 1.0
        self.set_speed(speed)
        self._sleep = sleep
        self.on_frame = on_frame

    def set_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"playback speed must be > 0, got {speed}")
        self.speed = speed

    def frame(self) -> Frame:
        return render(self.timeline, self.state)

    def dispatch(self, event: PlaybackEvent) -> PlaybackState:
        """Apply an event and emit the resulting frame."""
        self.state = transition(self.timeline, self.state, event)
        if self.on_frame is not None:
            self.on_frame(self.frame(), self.state)
        return self.state

    def next_delay(self) -> Optional[float]:
        """Seconds until the next Tick, or None when at rest."""
        hold = hold_ms(self.timeline, self.state)
        if hold is None:
            return None
        return hold / 1000.0 / self.speed

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Sleep and tick until the machine comes to rest.

        Args:
            max_ticks: Stop after this many ticks (None = no limit)

        Returns:
            Number of ticks dispatched
        """
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            delay = self.next_delay()
            if delay is None:
                break
            self._sleep(delay)
            self.dispatch(Tick())
            ticks += 1
        return ticks

    def play_from(self, index: int = 0) -> int:
        """Animate ops[index] and keep playing to the end of the timeline."""
        self.dispatch(Seek(index))
        self.dispatch(Play())
        ticks = self.run()
        logger.debug(f"Playback finished at index {self.state.index} after {ticks} ticks")
        return ticks

    def pause(self) -> PlaybackState:
        return self.dispatch(Pause())
