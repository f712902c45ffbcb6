"""
In-memory NoteStore (STORE_BACKEND=memory).

Keeps notes in a process-local list, useful for local demos and tests. All
operations run under one asyncio.Lock and callers only ever receive copies,
so concurrent requests cannot observe a half-applied change. Data is lost on
restart.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List

from jotter.exceptions import NotFoundError
from jotter.schemas.note import NoteRecord
from jotter.services.slugs import SlugConflict
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)


class MemoryNoteStore(NoteStore):

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._notes: List[NoteRecord] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def list_all(self) -> List[NoteRecord]:
        async with self._lock:
            ordered = sorted(self._notes, key=lambda n: (n.date, n.id), reverse=True)
            return [note.model_copy(deep=True) for note in ordered]

    async def get_by_slug(self, slug: str) -> NoteRecord:
        async with self._lock:
            return self._find(slug).model_copy(deep=True)

    async def _insert_with_slug(
        self, slug: str, title: str, content: str, labels: List[str]
    ) -> None:
        async with self._lock:
            if any(note.slug == slug for note in self._notes):
                raise SlugConflict(slug)
            self._notes.append(
                NoteRecord(
                    id=self._next_id,
                    title=title,
                    slug=slug,
                    content=content,
                    date=datetime.now(timezone.utc),
                    labels=list(labels),
                )
            )
            self._next_id += 1

    async def update(self, slug: str, title: str, content: str, labels: List[str]) -> None:
        async with self._lock:
            note = self._find(slug)
            note.title = title
            note.content = content
            note.labels = list(labels)
        logger.info("Note updated: %s", slug)

    async def delete(self, slug: str) -> None:
        async with self._lock:
            before = len(self._notes)
            self._notes = [note for note in self._notes if note.slug != slug]
            removed = before - len(self._notes)
        if removed:
            logger.info("Note deleted: %s", slug)

    def _find(self, slug: str) -> NoteRecord:
        for note in self._notes:
            if note.slug == slug:
                return note
        raise NotFoundError(resource="note", resource_id=slug)
