"""
Core replay primitives.

This module provides the foundational types for document reconstruction:
- Operation: Immutable, normalized insert/delete record
- DocumentState: Snapshot produced by replay
- Thresholds: Copy-paste and large-insertion heuristics
- Errors: Engine exception hierarchy
"""

from .operations import (
    COPY_PASTE_THRESHOLD,
    LARGE_DELETION_THRESHOLD,
    LARGE_INSERTION_THRESHOLD,
    MASS_INSERTION_POSITION,
    Author,
    DocumentState,
    Operation,
    OperationKind,
)
from .errors import InvalidEventError, LogFormatError, LogLoadError, ReplayIndexError, TimelineError

__all__ = [
    "COPY_PASTE_THRESHOLD",
    "LARGE_DELETION_THRESHOLD",
    "LARGE_INSERTION_THRESHOLD",
    "MASS_INSERTION_POSITION",
    "Author",
    "DocumentState",
    "Operation",
    "OperationKind",
    "TimelineError",
    "ReplayIndexError",
    "LogFormatError",
    "LogLoadError",
    "InvalidEventError",
]
