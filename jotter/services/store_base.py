"""
Jotter: Abstract Note Store Interface
=======================================

What:  Abstract base class defining the contract every note store fulfils.
How:   SqlNoteStore (relational table) and MemoryNoteStore (in-process list)
       implement it; routes only ever see a NoteStore.
Who:   Built by the AppContext from Settings.store_backend.

Shared behaviour lives here: slug generation with retry-on-conflict. A
backend only has to raise SlugConflict from _insert_with_slug() when the
slug is taken.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)

from jotter.exceptions import StoreError
from jotter.schemas.note import NoteRecord
from jotter.services.slugs import SlugConflict, generate_slug

logger = logging.getLogger(__name__)


class NoteStore(ABC):
    """
    Persistence contract for notes.

    Contract:
        - list_all() never fails on an empty store; it returns []
        - get_by_slug() and update() raise NotFoundError for unknown slugs
        - delete() of an unknown slug is a silent success
        - every backend failure is raised as StoreError
    """

    def __init__(
        self,
        slug_max_attempts: int = 5,
        slug_factory: Callable[[], str] = generate_slug,
    ):
        self.slug_max_attempts = slug_max_attempts
        self.slug_factory = slug_factory

    @abstractmethod
    async def list_all(self) -> List[NoteRecord]:
        """
        Return every note, newest date first (newest id breaks ties).

        Raises:
            StoreError: backend failure
        """
        ...

    @abstractmethod
    async def get_by_slug(self, slug: str) -> NoteRecord:
        """
        Raises:
            NotFoundError: no note has this slug
            StoreError: backend failure
        """
        ...

    async def insert(self, title: str, content: str, labels: List[str]) -> str:
        """
        Store a new note and return its generated slug.

        A fresh slug is drawn for every attempt; after slug_max_attempts
        conflicts the insert fails with StoreError.
        """
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(SlugConflict),
                stop=stop_after_attempt(self.slug_max_attempts),
                before_sleep=before_sleep_log(logger, logging.WARNING),
            ):
                with attempt:
                    slug = self.slug_factory()
                    await self._insert_with_slug(slug, title, content, list(labels))
        except RetryError as e:
            logger.error("Gave up inserting note after %d slug conflicts", self.slug_max_attempts)
            raise StoreError(
                context={
                    "operation": "insert",
                    "attempts": self.slug_max_attempts,
                    "last_slug": e.last_attempt.exception().slug,
                },
            ) from e

        logger.info("Note created: %s", slug)
        return slug

    @abstractmethod
    async def _insert_with_slug(
        self, slug: str, title: str, content: str, labels: List[str]
    ) -> None:
        """
        Insert one note under `slug`.

        Raises:
            SlugConflict: the slug is already stored
            StoreError: any other backend failure
        """
        ...

    @abstractmethod
    async def update(self, slug: str, title: str, content: str, labels: List[str]) -> None:
        """
        Rewrite title, content and labels; id, slug and date are untouched.

        Raises:
            NotFoundError: no row was affected
            StoreError: backend failure
        """
        ...

    @abstractmethod
    async def delete(self, slug: str) -> None:
        """Remove the note if present. Raises StoreError on backend failure."""
        ...

    async def ping(self) -> bool:
        """Connectivity probe for /health."""
        return True

    async def close(self) -> None:
        """Release backend resources."""
        return None
