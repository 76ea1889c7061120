"""
Wire models for the document log.

Field names follow the document log format exactly (`s`, `start`, `end`,
`type` codes "is"/"ds"). Models are permissive about optional metadata so
that partial legacy entries still reach the normalizer, which decides what
to drop.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

INSERT_CODE = "is"
DELETE_CODE = "ds"


class RawOperation(BaseModel):
    """One entry of the `changes` list."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: Optional[str] = ""
    photo_url: Optional[str] = ""
    s: Optional[str] = None
    start: int
    end: Optional[int] = None
    timestamp: int
    type: str
    user_id: Optional[str] = ""


class MassInsertionRecord(BaseModel):
    """A block of text inserted at an unknown document position."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: Optional[str] = ""
    photo_url: Optional[str] = ""
    text: str
    timestamp: int
    user_id: Optional[str] = ""


class Revision(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    revision: int
    user_id: Optional[str] = ""


class ContributorRecord(BaseModel):
    """Per-user entry of `user_contribution`: daily contribution counts."""
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    photo_url: str = ""
    contributions: Dict[str, int] = Field(default_factory=dict)


class ParsedContribution(BaseModel):
    """`user_contribution` delivered as an object keyed by user id."""
    kind: Literal["parsed"] = "parsed"
    users: Dict[str, ContributorRecord] = Field(default_factory=dict)


class RawContribution(BaseModel):
    """`user_contribution` delivered as an opaque string."""
    kind: Literal["raw"] = "raw"
    text: str = ""


UserContribution = Union[ParsedContribution, RawContribution]


class DocumentData(BaseModel):
    """Validated document log."""
    changes: List[RawOperation] = Field(default_factory=list)
    mass_insertion: List[MassInsertionRecord] = Field(default_factory=list)
    revisions: List[Revision] = Field(default_factory=list)
    user_contribution: UserContribution = Field(
        default_factory=ParsedContribution, discriminator="kind"
    )
    dropped_entries: int = 0
