"""
Document log ingestion.

This module provides:
- Wire models for the raw log (changes, mass insertions, contributions)
- Loader: control-character sanitation, JSON decoding, file/HTTP sources
"""

from .raw import (
    DELETE_CODE,
    INSERT_CODE,
    ContributorRecord,
    DocumentData,
    MassInsertionRecord,
    ParsedContribution,
    RawContribution,
    RawOperation,
    Revision,
    UserContribution,
)
from .loader import load_document_data, loads_document_data, parse_document_data, sanitize_log_text

__all__ = [
    "DELETE_CODE",
    "INSERT_CODE",
    "ContributorRecord",
    "DocumentData",
    "MassInsertionRecord",
    "ParsedContribution",
    "RawContribution",
    "RawOperation",
    "Revision",
    "UserContribution",
    "load_document_data",
    "loads_document_data",
    "parse_document_data",
    "sanitize_log_text",
]
