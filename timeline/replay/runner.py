"""
Replay runner: reconstruct document state from an operation sequence.

Replay is pure: operations 0..index are applied in order to an empty
document. Positions are clamped against the content length at the moment
each operation is applied, so a state depends only on the prefix before it.
"""

import threading
from typing import Dict, Iterator, Optional, Sequence, Tuple

from ..config import DEFAULT_CHECKPOINT_INTERVAL
from ..core.errors import ReplayIndexError
from ..core.operations import DocumentState, Operation, OperationKind
from ..metrics import track_replay_duration


def apply_operation(content: str, op: Operation) -> Tuple[str, int]:
    """
    Apply one operation.

    Args:
        content: Document content before the operation
        op: Operation to apply

    Returns:
        (new_content, cursor_position)
    """
    if op.kind == OperationKind.INSERT:
        if op.appends:
            content = content + op.text
            return content, len(content)

        insert_at = min(op.position, len(content))
        content = content[:insert_at] + op.text + content[insert_at:]
        return content, insert_at + len(op.text)

    delete_start = min(op.position, len(content))
    delete_end = min(op.position + op.length, len(content))
    if delete_start < delete_end:
        content = content[:delete_start] + content[delete_end:]
    return content, delete_start


def _check_index(index: int, size: int) -> None:
    if index < 0 or index >= size:
        raise ReplayIndexError(index, size)


def state_at(ops: Sequence[Operation], index: int) -> DocumentState:
    """
    Replay operations 0..index (inclusive) from an empty document.

    Args:
        ops: Normalized operation sequence
        index: Last operation to apply

    Returns:
        DocumentState after ops[index]

    Raises:
        ReplayIndexError: If index is outside 0 <= index < len(ops)
    """
    _check_index(index, len(ops))

    content = ""
    cursor = 0
    for i in range(index + 1):
        content, cursor = apply_operation(content, ops[i])

    return DocumentState(
        content=content,
        timestamp=ops[index].timestamp,
        change_index=index,
        cursor_position=cursor,
    )


def iter_states(ops: Sequence[Operation]) -> Iterator[DocumentState]:
    """Yield the state after each operation, in order, in a single pass."""
    content = ""
    for i, op in enumerate(ops):
        content, cursor = apply_operation(content, op)
        yield DocumentState(
            content=content,
            timestamp=op.timestamp,
            change_index=i,
            cursor_position=cursor,
        )


class Timeline:
    """
    Scrubbable view over an operation sequence.

    Answers state_at() with the same output as literal replay, but resumes
    from recorded checkpoints instead of the empty document. A checkpoint
    (content, cursor) is recorded after every `checkpoint_interval`
    operations, and the highest replayed prefix is kept as the head.

    Usage:
        timeline = Timeline(ops)
        timeline.state_at(42)
        timeline.state_at(7)   # resumes from the nearest checkpoint <= 7
    """

    def __init__(
        self,
        ops: Sequence[Operation],
        checkpoint_interval: int = DEFAULT_CHECKPOINT_INTERVAL,
    ) -> None:
        self.ops: Tuple[Operation, ...] = tuple(ops)
        self.checkpoint_interval = max(1, checkpoint_interval)
        # op index -> (content, cursor) after applying it
        self._checkpoints: Dict[int, Tuple[str, int]] = {}
        self._head: Optional[Tuple[int, str, int]] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self.ops)

    @property
    def last_index(self) -> int:
        return len(self.ops) - 1

    def _resume_point(self, index: int) -> Tuple[int, str, int]:
        """Return (next op to apply, content, cursor) for reaching index."""
        best: Tuple[int, str, int] = (0, "", 0)

        k = (index + 1) // self.checkpoint_interval
        while k > 0:
            cp_index = k * self.checkpoint_interval - 1
            cp = self._checkpoints.get(cp_index)
            if cp is not None:
                best = (cp_index + 1, cp[0], cp[1])
                break
            k -= 1

        if self._head is not None and best[0] <= self._head[0] <= index:
            best = (self._head[0] + 1, self._head[1], self._head[2])

        return best

    def state_at(self, index: int) -> DocumentState:
        """
        State after ops[index].

        Raises:
            ReplayIndexError: If index is outside 0 <= index < len(self)
        """
        _check_index(index, len(self.ops))

        with track_replay_duration(), self._lock:
            start, content, cursor = self._resume_point(index)
            for i in range(start, index + 1):
                content, cursor = apply_operation(content, self.ops[i])
                if (i + 1) % self.checkpoint_interval == 0:
                    self._checkpoints.setdefault(i, (content, cursor))

            if self._head is None or index > self._head[0]:
                self._head = (index, content, cursor)

        return DocumentState(
            content=content,
            timestamp=self.ops[index].timestamp,
            change_index=index,
            cursor_position=cursor,
        )

    def before(self, index: int) -> DocumentState:
        """
        State just before ops[index] is applied.

        Returns DocumentState.empty() for index 0.

        Raises:
            ReplayIndexError: If index is outside 0 <= index < len(self)
        """
        _check_index(index, len(self.ops))
        if index == 0:
            return DocumentState.empty()
        return self.state_at(index - 1)

    def final_state(self) -> DocumentState:
        """State after the last operation (empty document for an empty log)."""
        if not self.ops:
            return DocumentState.empty()
        return self.state_at(self.last_index)
