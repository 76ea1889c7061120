"""
Deterministic document state snapshots.

Same state always produces the same bytes, so two replays can be compared
by digest.
"""

import hashlib
import json
from typing import Any, Dict

from ..core.operations import DocumentState


def state_to_dict(state: DocumentState) -> Dict[str, Any]:
    return {
        "content": state.content,
        "timestamp": state.timestamp,
        "change_index": state.change_index,
        "cursor_position": state.cursor_position,
    }


def serialize_state(state: DocumentState) -> bytes:
    """
    Serialize state to canonical JSON bytes.

    Guarantees:
    - sorted keys
    - no whitespace
    - ensure_ascii=False keeps UTF-8 content stable
    """
    s = json.dumps(state_to_dict(state), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def compute_state_hash(state: DocumentState) -> str:
    """SHA-256 hex digest of the canonical state bytes."""
    return hashlib.sha256(serialize_state(state)).hexdigest()
