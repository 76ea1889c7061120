"""
Change normalizer: raw log entries -> ordered Operation sequence.

Normalization is pure. Entries that do not match an insert or delete shape
are dropped and counted in the dropped-entries metric.
"""

import logging
from collections import Counter
from typing import Iterable, Optional, Tuple

from .core.operations import (
    COPY_PASTE_THRESHOLD,
    LARGE_INSERTION_THRESHOLD,
    MASS_INSERTION_POSITION,
    Author,
    Operation,
    OperationKind,
)
from .log.raw import DELETE_CODE, INSERT_CODE, DocumentData, MassInsertionRecord, RawOperation
from .metrics import track_clamped_delete, track_dropped_entry, track_normalized

logger = logging.getLogger(__name__)


def _author(entry) -> Author:
    return Author(
        name=entry.name or "",
        photo_url=entry.photo_url or "",
        id=entry.user_id or "",
    )


def _drop_reason(change: RawOperation) -> Optional[str]:
    if change.type == INSERT_CODE:
        if not change.s:
            return "missing_text"
    elif change.type == DELETE_CODE:
        if change.end is None:
            return "missing_end"
    else:
        return "unknown_type"
    if change.start < 0:
        return "negative_position"
    return None


def _from_change(change: RawOperation) -> Operation:
    if change.type == INSERT_CODE:
        text = change.s or ""
        return Operation(
            kind=OperationKind.INSERT,
            text=text,
            length=len(text),
            position=change.start,
            timestamp=change.timestamp,
            author=_author(change),
            is_copy_paste=len(text) > COPY_PASTE_THRESHOLD,
            is_large_insertion=len(text) > LARGE_INSERTION_THRESHOLD,
        )

    length = change.end - change.start
    if length < 0:
        logger.warning(
            f"Delete at {change.start} has end {change.end} < start; clamping length to 0"
        )
        track_clamped_delete()
        length = 0

    return Operation(
        kind=OperationKind.DELETE,
        text="",
        length=length,
        position=change.start,
        timestamp=change.timestamp,
        author=_author(change),
    )


def _from_mass_insertion(record: MassInsertionRecord) -> Operation:
    return Operation(
        kind=OperationKind.INSERT,
        text=record.text,
        length=len(record.text),
        position=MASS_INSERTION_POSITION,
        timestamp=record.timestamp,
        author=_author(record),
        is_copy_paste=True,
        is_mass_insertion=True,
        is_large_insertion=True,
    )


def normalize(
    raw_changes: Iterable[RawOperation],
    mass_insertions: Iterable[MassInsertionRecord] = (),
) -> Tuple[Operation, ...]:
    """
    Merge raw changes and mass insertions into one time-ordered sequence.

    Args:
        raw_changes: Entries of the `changes` list
        mass_insertions: Entries of the `mass_insertion` list

    Returns:
        Operations sorted by timestamp ascending; ties keep input order
        (changes first, then mass insertions)
    """
    ops = []
    dropped: Counter = Counter()

    for idx, change in enumerate(raw_changes):
        reason = _drop_reason(change)
        if reason is not None:
            logger.debug(f"Dropping change {idx} (type={change.type!r}): {reason}")
            track_dropped_entry(reason)
            dropped[reason] += 1
            continue
        ops.append(_from_change(change))

    for record in mass_insertions:
        ops.append(_from_mass_insertion(record))

    # sorted() is stable
    ops = sorted(ops, key=lambda op: op.timestamp)

    inserts = sum(1 for op in ops if op.kind == OperationKind.INSERT)
    track_normalized(OperationKind.INSERT.value, inserts)
    track_normalized(OperationKind.DELETE.value, len(ops) - inserts)

    if dropped:
        summary = ", ".join(f"{reason}={count}" for reason, count in sorted(dropped.items()))
        logger.info(f"Normalized {len(ops)} operations, dropped {sum(dropped.values())} ({summary})")
    else:
        logger.debug(f"Normalized {len(ops)} operations")

    return tuple(ops)


def normalize_document(data: DocumentData) -> Tuple[Operation, ...]:
    """Normalize the changes and mass insertions of a loaded document log."""
    return normalize(data.changes, data.mass_insertion)
