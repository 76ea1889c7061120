"""
Exception types for the revision timeline engine.
"""


class TimelineError(Exception):
    """Base class for timeline engine errors."""
    pass


class ReplayIndexError(TimelineError, IndexError):
    """Raised when a replay index falls outside the operation sequence."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"index out of range: {index} (operations: {size})")
        self.index = index
        self.size = size


class LogFormatError(TimelineError):
    """Raised when a document log cannot be decoded into document data."""
    pass


class LogLoadError(TimelineError):
    """Raised when a document log source cannot be read."""
    pass


class InvalidEventError(TimelineError):
    """Raised when the playback machine has no handler for an event."""
    pass
