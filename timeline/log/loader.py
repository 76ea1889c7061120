"""
Document log loading.

Reads the raw JSON blob from a file or an http(s) URL, strips control
characters, decodes it and validates entries one at a time. Entries that
fail validation are dropped rather than failing the whole log.
"""

import http.client
import json
import logging
import re
import urllib.error
import urllib.request
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.errors import LogFormatError, LogLoadError
from ..logging_config import get_logger
from ..metrics import track_dropped_entry, track_load_failure
from .raw import (
    ContributorRecord,
    DocumentData,
    MassInsertionRecord,
    ParsedContribution,
    RawContribution,
    RawOperation,
    Revision,
    UserContribution,
)

logger = logging.getLogger(__name__)

# C0 and C1 control characters
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")

HTTP_TIMEOUT_SECONDS = 10

M = TypeVar("M", bound=BaseModel)


def sanitize_log_text(text: str) -> str:
    """Remove U+0000-U+001F and U+007F-U+009F before JSON decoding."""
    return CONTROL_CHARS.sub("", text)


def _validate_entries(model: Type[M], entries: Any, field: str) -> List[M]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        logger.debug(f"Ignoring non-list '{field}' field ({type(entries).__name__})")
        return []

    valid = []
    for idx, entry in enumerate(entries):
        try:
            valid.append(model.model_validate(entry))
        except ValidationError as e:
            logger.debug(f"Dropping invalid {field}[{idx}]: {e.error_count()} validation error(s)")
            track_dropped_entry("invalid_entry")
    return valid


def _parse_contribution(value: Any) -> UserContribution:
    if value is None:
        return ParsedContribution()
    if isinstance(value, str):
        return RawContribution(text=value)
    if not isinstance(value, dict):
        return RawContribution(text=json.dumps(value, sort_keys=True))

    users: Dict[str, ContributorRecord] = {}
    for user_id, record in value.items():
        try:
            users[str(user_id)] = ContributorRecord.model_validate(record)
        except ValidationError:
            logger.debug(f"Dropping invalid user_contribution entry for {user_id}")
    return ParsedContribution(users=users)


def parse_document_data(obj: Any) -> DocumentData:
    """
    Validate a decoded JSON document into DocumentData.

    Args:
        obj: Decoded JSON value

    Returns:
        DocumentData with every valid entry

    Raises:
        LogFormatError: If the top level is not a JSON object
    """
    if not isinstance(obj, dict):
        raise LogFormatError(f"document log must be a JSON object, got {type(obj).__name__}")

    raw_changes = obj.get("changes")
    raw_mass = obj.get("mass_insertion")
    changes = _validate_entries(RawOperation, raw_changes, "changes")
    mass_insertion = _validate_entries(MassInsertionRecord, raw_mass, "mass_insertion")
    revisions = _validate_entries(Revision, obj.get("revisions"), "revisions")

    dropped = 0
    if isinstance(raw_changes, list):
        dropped += len(raw_changes) - len(changes)
    if isinstance(raw_mass, list):
        dropped += len(raw_mass) - len(mass_insertion)

    return DocumentData(
        changes=changes,
        mass_insertion=mass_insertion,
        revisions=revisions,
        user_contribution=_parse_contribution(obj.get("user_contribution")),
        dropped_entries=dropped,
    )


def loads_document_data(text: str) -> DocumentData:
    """
    Sanitize, decode and validate a raw document log.

    Raises:
        LogFormatError: If the text is not valid JSON or not an object
    """
    try:
        obj = json.loads(sanitize_log_text(text))
    except json.JSONDecodeError as e:
        raise LogFormatError(f"invalid JSON: {e}") from e
    return parse_document_data(obj)


def _read_source(source: str) -> str:
    if source.startswith(("http://", "https://")):
        req = urllib.request.Request(source, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=HTTP_TIMEOUT_SECONDS) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                return response.read().decode(charset, errors="replace")
        except (urllib.error.URLError, http.client.HTTPException, OSError, LookupError) as e:
            raise LogLoadError(f"failed to fetch {source}: {e}") from e

    try:
        with open(source, "rb") as f:
            return f.read().decode("utf-8", errors="replace")
    except FileNotFoundError:
        raise
    except OSError as e:
        raise LogLoadError(f"failed to read {source}: {e}") from e


def load_document_data(source: str) -> DocumentData:
    """
    Load a document log from a file path or http(s) URL.

    Args:
        source: Filesystem path or URL

    Returns:
        Validated DocumentData

    Raises:
        FileNotFoundError: If a file source does not exist
        LogLoadError: If the source cannot be read or fetched
        LogFormatError: If the content is not a JSON object
    """
    try:
        data = loads_document_data(_read_source(source))
    except (LogLoadError, LogFormatError, FileNotFoundError):
        track_load_failure()
        raise

    get_logger(__name__, source=source).info(
        f"Loaded document log: {len(data.changes)} changes, "
        f"{len(data.mass_insertion)} mass insertions, {data.dropped_entries} invalid entries"
    )
    return data
