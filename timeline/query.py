"""
Deterministic query helpers over normalized operations and contributions.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Sequence

from .core.operations import Author, Operation, OperationKind
from .log.raw import RawContribution, UserContribution


@dataclass(frozen=True)
class CopyPasteStats:
    total_changes: int
    copy_paste_changes: int
    copy_paste_percentage: float
    largest_copy_paste: int


@dataclass(frozen=True)
class CopyPasteDetail:
    author: Author
    text: str
    timestamp: int
    length: int


@dataclass(frozen=True)
class EditingSummary:
    total_changes: int
    insertions: int
    deletions: int
    mass_insertions: int
    copy_paste_operations: int
    small_edits: int
    editing_days: int
    avg_insertion_size: float
    avg_deletion_size: float


@dataclass(frozen=True)
class Contributor:
    id: str
    name: str
    photo_url: str
    total_contributions: int


@dataclass(frozen=True)
class DailyContribution:
    date: str
    user_id: str
    user_name: str
    count: int


def copy_paste_stats(ops: Sequence[Operation]) -> CopyPasteStats:
    """
    Count copy-paste operations.

    An empty sequence yields zero percentage rather than NaN.
    """
    pasted = [op for op in ops if op.is_copy_paste]
    largest = max((op.length for op in pasted), default=0)
    percentage = (len(pasted) / len(ops)) * 100 if ops else 0.0

    return CopyPasteStats(
        total_changes=len(ops),
        copy_paste_changes=len(pasted),
        copy_paste_percentage=percentage,
        largest_copy_paste=largest,
    )


def detailed_copy_paste_info(ops: Sequence[Operation]) -> List[CopyPasteDetail]:
    """Pasted inserts, largest first; equal lengths keep timeline order."""
    details = [
        CopyPasteDetail(author=op.author, text=op.text, timestamp=op.timestamp, length=op.length)
        for op in ops
        if op.is_copy_paste and op.kind == OperationKind.INSERT
    ]
    return sorted(details, key=lambda d: d.length, reverse=True)


def _utc_date(timestamp_ms: int) -> str:
    # Timestamps outside datetime's range count as their own day
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).date().isoformat()
    except (OverflowError, ValueError, OSError):
        return str(timestamp_ms)


def editing_summary(ops: Sequence[Operation]) -> EditingSummary:
    """
    Summarize how the document was written.

    Editing days are distinct UTC calendar dates. Averages are 0.0 when
    there is nothing to average.
    """
    inserts = [op for op in ops if op.kind == OperationKind.INSERT]
    deletes = [op for op in ops if op.kind == OperationKind.DELETE]

    avg_insert = sum(op.length for op in inserts) / len(inserts) if inserts else 0.0
    avg_delete = sum(op.length for op in deletes) / len(deletes) if deletes else 0.0

    return EditingSummary(
        total_changes=len(ops),
        insertions=len(inserts),
        deletions=len(deletes),
        mass_insertions=sum(1 for op in ops if op.is_mass_insertion),
        copy_paste_operations=sum(1 for op in ops if op.is_copy_paste and not op.is_mass_insertion),
        small_edits=sum(1 for op in inserts if not op.is_copy_paste),
        editing_days=len({_utc_date(op.timestamp) for op in ops}),
        avg_insertion_size=avg_insert,
        avg_deletion_size=avg_delete,
    )


def contributors(user_contribution: UserContribution) -> List[Contributor]:
    """
    Contributors ordered by total contributions (highest first).

    A RawContribution carries no structured data and yields [].
    """
    if isinstance(user_contribution, RawContribution):
        return []

    result = [
        Contributor(
            id=user_id,
            name=record.name,
            photo_url=record.photo_url,
            total_contributions=sum(record.contributions.values()),
        )
        for user_id, record in user_contribution.users.items()
    ]
    return sorted(result, key=lambda c: c.total_contributions, reverse=True)


def contributions_per_day(user_contribution: UserContribution) -> List[DailyContribution]:
    """Daily contribution counts per user, oldest date first."""
    if isinstance(user_contribution, RawContribution):
        return []

    rows = [
        DailyContribution(date=date, user_id=user_id, user_name=record.name, count=count)
        for user_id, record in user_contribution.users.items()
        for date, count in record.contributions.items()
    ]
    return sorted(rows, key=lambda row: row.date)


def change_label(op: Operation) -> str:
    if op.kind == OperationKind.DELETE:
        return "Deletion"
    if op.is_mass_insertion:
        return "Mass Insertion"
    if op.is_copy_paste:
        return "Copy-Paste"
    return "Typing"
