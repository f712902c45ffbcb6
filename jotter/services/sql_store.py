"""
Jotter: Relational Note Store
===============================

What:  NoteStore backed by the `notes` table through async SQLAlchemy.
How:   Every operation is a single statement in its own session
       (session_scope commits on success, rolls back on error). Rows are
       converted to NoteRecord before the session closes.

Error Translation:
    slug unique violation  → SlugConflict (insert retries with a new slug)
    zero rows on UPDATE    → NotFoundError
    anything else          → StoreError (details logged, never returned)
"""

import logging
from typing import List

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jotter.database import session_scope
from jotter.exceptions import NotFoundError, StoreError
from jotter.models.note import Note
from jotter.schemas.note import NoteRecord
from jotter.services.slugs import SlugConflict
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)


class SqlNoteStore(NoteStore):
    """
    Query Plans:
        list_all:    SELECT ... FROM notes ORDER BY date DESC, id DESC
        get_by_slug: SELECT ... WHERE slug = :slug
        insert:      INSERT INTO notes (title, slug, content, date, labels)
        update:      UPDATE notes SET title, content, labels WHERE slug = :slug
        delete:      DELETE FROM notes WHERE slug = :slug
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], **kwargs):
        super().__init__(**kwargs)
        self.session_factory = session_factory

    async def list_all(self) -> List[NoteRecord]:
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    select(Note).order_by(Note.date.desc(), Note.id.desc())
                )
                return [NoteRecord.model_validate(note) for note in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise StoreError(
                context={"operation": "list_all", "error_type": type(e).__name__},
            ) from e

    async def get_by_slug(self, slug: str) -> NoteRecord:
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(select(Note).where(Note.slug == slug))
                note = result.scalar_one_or_none()
                if note is None:
                    raise NotFoundError(resource="note", resource_id=slug)
                return NoteRecord.model_validate(note)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error fetching note %s: %s", slug, str(e), exc_info=True)
            raise StoreError(
                context={"operation": "get_by_slug", "slug": slug, "error_type": type(e).__name__},
            ) from e

    async def _insert_with_slug(
        self, slug: str, title: str, content: str, labels: List[str]
    ) -> None:
        try:
            async with session_scope(self.session_factory) as session:
                session.add(Note(title=title, slug=slug, content=content, labels=labels))
                await session.flush()
        except IntegrityError as e:
            if "slug" in str(e.orig):
                logger.warning("Slug collision on insert: %s", slug)
                raise SlugConflict(slug) from e
            logger.error("Constraint violation inserting note: %s", str(e))
            raise StoreError(
                context={"operation": "insert", "slug": slug, "error_type": type(e).__name__},
            ) from e
        except Exception as e:
            logger.error("Database error inserting note: %s", str(e), exc_info=True)
            raise StoreError(
                context={"operation": "insert", "slug": slug, "error_type": type(e).__name__},
            ) from e

    async def update(self, slug: str, title: str, content: str, labels: List[str]) -> None:
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    update(Note)
                    .where(Note.slug == slug)
                    .values(title=title, content=content, labels=list(labels))
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFoundError(resource="note", resource_id=slug)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error updating note %s: %s", slug, str(e), exc_info=True)
            raise StoreError(
                context={"operation": "update", "slug": slug, "error_type": type(e).__name__},
            ) from e
        logger.info("Note updated: %s", slug)

    async def delete(self, slug: str) -> None:
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    delete(Note)
                    .where(Note.slug == slug)
                    .execution_options(synchronize_session=False)
                )
        except Exception as e:
            logger.error("Database error deleting note %s: %s", slug, str(e), exc_info=True)
            raise StoreError(
                context={"operation": "delete", "slug": slug, "error_type": type(e).__name__},
            ) from e
        if result.rowcount:
            logger.info("Note deleted: %s", slug)

    async def ping(self) -> bool:
        try:
            async with session_scope(self.session_factory) as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False
