"""
Replay system for document state reconstruction.

Replay applies operations in order to an empty document.
Must be 100% deterministic: same operations + index -> same state.
"""

from .runner import Timeline, apply_operation, iter_states, state_at
from .snapshot import compute_state_hash, serialize_state, state_to_dict

__all__ = [
    "Timeline",
    "apply_operation",
    "iter_states",
    "state_at",
    "compute_state_hash",
    "serialize_state",
    "state_to_dict",
]
