"""
Operation model for document replay.

Operations are immutable, normalized edit records. The Reconstructor only
ever reads them; it never mutates a sequence.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

# Heuristic thresholds. Statistics and playback timing depend on these exact values.
COPY_PASTE_THRESHOLD = 10
LARGE_INSERTION_THRESHOLD = 5
LARGE_DELETION_THRESHOLD = 10

# Position sentinel for mass insertions: append at the current end.
MASS_INSERTION_POSITION = -1


class OperationKind(str, Enum):
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class Author:
    """Author of an operation (name, photo URL, user id)."""
    name: str = ""
    photo_url: str = ""
    id: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "photo_url": self.photo_url, "id": self.id}


@dataclass(frozen=True)
class Operation:
    """
    Normalized insert or delete.

    Fields:
        kind: INSERT or DELETE
        text: Inserted text (empty for DELETE)
        length: Number of characters affected
        position: Offset in the document, or MASS_INSERTION_POSITION
        timestamp: Epoch milliseconds
        author: Who made the edit
        is_copy_paste: Insert longer than COPY_PASTE_THRESHOLD, or a mass insertion
        is_mass_insertion: Derived from a mass insertion record
        is_large_insertion: Insert longer than LARGE_INSERTION_THRESHOLD, or a
            mass insertion; playback applies these atomically

    Raises:
        ValueError: If the fields violate the operation invariants
    """
    kind: OperationKind
    text: str
    length: int
    position: int
    timestamp: int
    author: Author = Author()
    is_copy_paste: bool = False
    is_mass_insertion: bool = False
    is_large_insertion: bool = False

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Operation.length must be >= 0, got {self.length}")
        if self.kind == OperationKind.DELETE:
            if self.text:
                raise ValueError("DELETE operations carry no text")
            if self.position < 0:
                raise ValueError(f"DELETE position must be >= 0, got {self.position}")
        else:
            if self.length != len(self.text):
                raise ValueError("INSERT length must equal len(text)")
            if self.position < 0 and self.position != MASS_INSERTION_POSITION:
                raise ValueError(f"INSERT position must be >= 0 or -1, got {self.position}")

    @property
    def appends(self) -> bool:
        """True when the insert has no known position and goes at the end."""
        return self.kind == OperationKind.INSERT and self.position == MASS_INSERTION_POSITION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "length": self.length,
            "position": self.position,
            "timestamp": self.timestamp,
            "author": self.author.to_dict(),
            "is_copy_paste": self.is_copy_paste,
            "is_mass_insertion": self.is_mass_insertion,
            "is_large_insertion": self.is_large_insertion,
        }


@dataclass(frozen=True)
class DocumentState:
    """
    Document snapshot after applying operations 0..change_index.

    Derived on demand; never stored.
    """
    content: str
    timestamp: int
    change_index: int
    cursor_position: int

    @staticmethod
    def empty() -> "DocumentState":
        """State before the first operation."""
        return DocumentState(content="", timestamp=0, change_index=-1, cursor_position=0)
