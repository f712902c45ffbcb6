"""
Jotter: Note SQLAlchemy Model
===============================

What:  ORM model for the `notes` table.
Who:   Used by SqlNoteStore for CRUD, and by Alembic / create_schema().

Table Design:
    - id:      SERIAL primary key, assigned by the database
    - slug:    unique external identifier used in URLs
    - content: raw markdown/plain text, rendered to HTML only at display time
    - date:    creation time (UTC), never touched by updates
    - labels:  TEXT[] on PostgreSQL, JSON on SQLite

    Index on date DESC serves the list page (newest first).
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import ARRAY, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from jotter.database import Base

# TEXT[] on PostgreSQL; SQLite has no array type
LabelsType = ARRAY(Text).with_variant(JSON(), "sqlite")


class Note(Base):
    """
    A stored note.

    Lifecycle:
        1. Inserted by the create handler (id, slug, date assigned)
        2. title / content / labels rewritten by the update handler
        3. Row deleted by the delete handler (no soft delete)

    Query Patterns:
        - List: SELECT ... ORDER BY date DESC, id DESC
        - Get:  SELECT ... WHERE slug = :slug (unique index)
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    slug: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        comment="External identifier used in note URLs",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    labels: Mapped[List[str]] = mapped_column(
        LabelsType,
        nullable=False,
        default=lambda: [],
    )

    __table_args__ = (
        Index("idx_notes_date", date.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, slug='{self.slug}', date='{self.date}')>"
