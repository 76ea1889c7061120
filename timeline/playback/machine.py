"""
Playback state machine.

Playback is a pure transition function (timeline, state, event) -> state,
in the same shape as a reducer: one handler per event type, no side effects,
no clock. The scheduler owns time: it asks hold_ms() how long the current
state should stay on screen and feeds a Tick when that time has passed.

States:
    Idle(index): at rest on the document after ops[index]
    Animating(index, phase, step, playing): showing ops[index] being applied
    Paused(animation): a frozen Animating state

Every animation ends on exactly the Reconstructor's state for its index.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional, Type, Union

from ..core.errors import InvalidEventError
from ..core.operations import LARGE_DELETION_THRESHOLD, Operation, OperationKind
from ..replay.runner import Timeline

# Base hold times in milliseconds, divided by playback speed by the scheduler.
ADVANCE_MS = 500
TYPE_MS = 30
PASTE_TYPE_MS = 10
INSERT_CUE_MS = 500
INSERT_REVEAL_MS = 2000
SETTLE_MS = 1000
LARGE_DELETE_CUE_MS = 1500
SMALL_DELETE_CUE_MS = 500
ERASE_MS = 50


class Phase(str, Enum):
    TYPING = "typing"      # insert shown one character per step
    ERASING = "erasing"    # delete shown one character per step
    CUE = "cue"            # prior content, cursor (and delete range) at the edit
    REVEAL = "reveal"      # atomic insert applied, inserted range highlighted
    SETTLE = "settle"      # final content, no highlight
    ADVANCE = "advance"    # final content, waiting to move to the next operation


@dataclass(frozen=True)
class Idle:
    index: int


@dataclass(frozen=True)
class Animating:
    index: int
    phase: Phase
    step: int = 0
    playing: bool = False


@dataclass(frozen=True)
class Paused:
    animation: Animating

    @property
    def index(self) -> int:
        return self.animation.index


PlaybackState = Union[Idle, Animating, Paused]


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Seek:
    index: int


@dataclass(frozen=True)
class StepForward:
    pass


@dataclass(frozen=True)
class StepBack:
    pass


@dataclass(frozen=True)
class JumpToStart:
    pass


@dataclass(frozen=True)
class JumpToEnd:
    pass


PlaybackEvent = Union[Play, Pause, Tick, Seek, StepForward, StepBack, JumpToStart, JumpToEnd]


@dataclass(frozen=True)
class Highlight:
    start: int
    end: int
    kind: OperationKind
    user_id: str


@dataclass(frozen=True)
class Frame:
    """What a viewer draws for a playback state."""
    index: int
    content: str
    cursor_position: int
    highlight: Optional[Highlight]
    timestamp: int


def initial_state() -> PlaybackState:
    return Idle(index=0)


def _is_large_delete(op: Operation) -> bool:
    return op.length > LARGE_DELETION_THRESHOLD


def _insert_at(op: Operation, prior: str) -> int:
    return len(prior) if op.appends else min(op.position, len(prior))


def _delete_range(op: Operation, prior: str):
    start = min(op.position, len(prior))
    end = min(op.position + op.length, len(prior))
    return start, max(start, end)


def start_animation(timeline: Timeline, index: int, playing: bool) -> Animating:
    """First animation state for ops[index]."""
    op = timeline.ops[index]
    if op.kind == OperationKind.INSERT and not op.is_large_insertion:
        return Animating(index=index, phase=Phase.TYPING, step=min(1, op.length), playing=playing)
    return Animating(index=index, phase=Phase.CUE, playing=playing)


def _finish(timeline: Timeline, anim: Animating) -> PlaybackState:
    if anim.playing and anim.index < timeline.last_index:
        return Animating(index=anim.index, phase=Phase.ADVANCE, playing=True)
    return Idle(index=anim.index)


def _on_tick(timeline: Timeline, state: PlaybackState, event: Tick) -> PlaybackState:
    if not isinstance(state, Animating):
        return state

    op = timeline.ops[state.index]
    phase = state.phase

    if phase == Phase.ADVANCE:
        if state.index >= timeline.last_index:
            return Idle(index=state.index)
        return start_animation(timeline, state.index + 1, playing=True)

    if phase == Phase.TYPING:
        if state.step < op.length:
            return replace(state, step=state.step + 1)
        return _finish(timeline, state)

    if phase == Phase.CUE:
        if op.kind == OperationKind.INSERT:
            return replace(state, phase=Phase.REVEAL)
        if _is_large_delete(op):
            return replace(state, phase=Phase.SETTLE)
        start, end = _delete_range(op, timeline.before(state.index).content)
        if end == start:
            return _finish(timeline, state)
        return replace(state, phase=Phase.ERASING, step=1)

    if phase == Phase.ERASING:
        start, end = _delete_range(op, timeline.before(state.index).content)
        if state.step < end - start:
            return replace(state, step=state.step + 1)
        return _finish(timeline, state)

    if phase == Phase.REVEAL:
        return replace(state, phase=Phase.SETTLE)

    # SETTLE
    return _finish(timeline, state)


def _on_play(timeline: Timeline, state: PlaybackState, event: Play) -> PlaybackState:
    if isinstance(state, Paused):
        return replace(state.animation, playing=True)
    if isinstance(state, Animating):
        return replace(state, playing=True)
    if state.index >= timeline.last_index:
        return state
    return Animating(index=state.index, phase=Phase.ADVANCE, playing=True)


def _on_pause(timeline: Timeline, state: PlaybackState, event: Pause) -> PlaybackState:
    if not isinstance(state, Animating):
        return state
    if state.phase == Phase.ADVANCE:
        return Idle(index=state.index)
    return Paused(animation=replace(state, playing=False))


def _seek(timeline: Timeline, state: PlaybackState, index: int) -> PlaybackState:
    index = max(0, min(index, timeline.last_index))
    if isinstance(state, Idle) and state.index == index:
        return state
    return start_animation(timeline, index, playing=False)


def _on_seek(timeline: Timeline, state: PlaybackState, event: Seek) -> PlaybackState:
    return _seek(timeline, state, event.index)


def _on_step_forward(timeline: Timeline, state: PlaybackState, event: StepForward) -> PlaybackState:
    return _seek(timeline, state, state.index + 1)


def _on_step_back(timeline: Timeline, state: PlaybackState, event: StepBack) -> PlaybackState:
    return _seek(timeline, state, state.index - 1)


def _on_jump_to_start(timeline: Timeline, state: PlaybackState, event: JumpToStart) -> PlaybackState:
    return _seek(timeline, state, 0)


def _on_jump_to_end(timeline: Timeline, state: PlaybackState, event: JumpToEnd) -> PlaybackState:
    return _seek(timeline, state, timeline.last_index)


Handler = Callable[[Timeline, PlaybackState, PlaybackEvent], PlaybackState]

HANDLERS: Dict[Type, Handler] = {
    Tick: _on_tick,
    Play: _on_play,
    Pause: _on_pause,
    Seek: _on_seek,
    StepForward: _on_step_forward,
    StepBack: _on_step_back,
    JumpToStart: _on_jump_to_start,
    JumpToEnd: _on_jump_to_end,
}


def transition(timeline: Timeline, state: PlaybackState, event: PlaybackEvent) -> PlaybackState:
    """
    Apply a playback event.

    An empty timeline has nothing to show; every event leaves the state as is.

    Raises:
        InvalidEventError: If no handler is registered for the event type
    """
    handler = HANDLERS.get(type(event))
    if handler is None:
        raise InvalidEventError(f"No handler for playback event: {type(event).__name__}")
    if len(timeline) == 0:
        return state
    return handler(timeline, state, event)


def hold_ms(timeline: Timeline, state: PlaybackState) -> Optional[int]:
    """
    How long a state stays on screen before the next Tick, at speed 1.

    Returns None for states that only change on user events.
    """
    if not isinstance(state, Animating):
        return None

    op = timeline.ops[state.index]
    phase = state.phase
    if phase == Phase.ADVANCE:
        return ADVANCE_MS
    if phase == Phase.TYPING:
        return PASTE_TYPE_MS if op.is_copy_paste else TYPE_MS
    if phase == Phase.ERASING:
        return ERASE_MS
    if phase == Phase.REVEAL:
        return INSERT_REVEAL_MS
    if phase == Phase.SETTLE:
        return SETTLE_MS
    # CUE
    if op.kind == OperationKind.INSERT:
        return INSERT_CUE_MS
    return LARGE_DELETE_CUE_MS if _is_large_delete(op) else SMALL_DELETE_CUE_MS


def render(timeline: Timeline, state: PlaybackState) -> Frame:
    """Frame to draw for a playback state."""
    if len(timeline) == 0:
        return Frame(index=-1, content="", cursor_position=0, highlight=None, timestamp=0)

    if isinstance(state, Paused):
        state = state.animation

    final = timeline.state_at(state.index)
    at_rest = Frame(
        index=state.index,
        content=final.content,
        cursor_position=final.cursor_position,
        highlight=None,
        timestamp=final.timestamp,
    )
    if isinstance(state, Idle) or state.phase in (Phase.SETTLE, Phase.ADVANCE):
        return at_rest

    op = timeline.ops[state.index]
    prior = timeline.before(state.index).content

    if op.kind == OperationKind.INSERT:
        pos = _insert_at(op, prior)
        if state.phase == Phase.TYPING:
            typed = op.text[: state.step]
            return replace(at_rest, content=prior[:pos] + typed + prior[pos:], cursor_position=pos + len(typed))
        if state.phase == Phase.CUE:
            return replace(at_rest, content=prior, cursor_position=pos)
        return replace(at_rest, highlight=Highlight(pos, pos + op.length, op.kind, op.author.id))

    start, end = _delete_range(op, prior)
    erased = state.step if state.phase == Phase.ERASING else 0
    remaining_end = end - erased
    highlight = Highlight(start, remaining_end, op.kind, op.author.id) if remaining_end > start else None
    return replace(
        at_rest,
        content=prior[:start] + prior[start + erased:],
        cursor_position=start,
        highlight=highlight,
    )
