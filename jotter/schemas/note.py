"""
Jotter: Pydantic Schemas
==========================

What:  Data shapes passed between routes, stores and templates.
How:   NoteRecord is what every store returns (built from ORM rows with
       from_attributes); NoteForm validates the create/update form fields.
"""

from datetime import datetime, timezone
from typing import List, Union

from pydantic import BaseModel, Field, field_validator


def parse_labels(raw: Union[str, List[str], None]) -> List[str]:
    """
    Split a comma-separated label field into clean labels.

    Whitespace is trimmed and empty entries dropped; order is kept and
    repeated labels collapse onto their first occurrence.

        >>> parse_labels("a, b ,,c")
        ['a', 'b', 'c']
    """
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    labels: List[str] = []
    for part in parts:
        label = part.strip()
        if label and label not in labels:
            labels.append(label)
    return labels


# ══════════════════════════════════════════════════════════════════════════
# Store Records (what stores return and templates render)
# ══════════════════════════════════════════════════════════════════════════


class NoteRecord(BaseModel):
    """
    A stored note, detached from any database session.

    `content` is the raw text; templates run it through the markdownify
    and preview filters.
    """
    id: int
    title: str
    slug: str
    content: str = ""
    date: datetime
    labels: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive timestamps
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("labels", mode="before")
    @classmethod
    def null_labels(cls, v):
        return [] if v is None else v


# ══════════════════════════════════════════════════════════════════════════
# Form Input (what the browser posts)
# ══════════════════════════════════════════════════════════════════════════


class NoteForm(BaseModel):
    """
    Validated fields of the create and edit forms.

    labels: accepts the raw comma-separated string from the form
            (e.g. "work, ideas") or an already-split list.
    """
    title: str
    content: str = ""
    labels: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v

    @field_validator("labels", mode="before")
    @classmethod
    def split_labels(cls, v):
        return parse_labels(v)


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
