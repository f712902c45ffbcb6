"""
Jotter: Application Context
=============================

What:  The process-wide objects every handler shares: settings, the note
       store, the SQL engine (when used) and the page renderer.
How:   create_app() builds one AppContext and stores it on `app.state`.
       Handlers receive its parts through the dependencies at the bottom
       of this module. The lifespan calls startup() / shutdown().

Lifecycle:
    build_context()  → engine, store and compiled templates (no I/O)
    startup()        → CREATE TABLE IF NOT EXISTS when create_schema is on
    shutdown()       → close the store, dispose the engine
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.requests import Request

from jotter.config import Settings
from jotter.database import build_engine, build_session_factory, create_schema, dispose_engine
from jotter.services.content_renderer import ContentRenderer
from jotter.services.memory_store import MemoryNoteStore
from jotter.services.page_renderer import PageRenderer
from jotter.services.sql_store import SqlNoteStore
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    store: NoteStore
    pages: PageRenderer
    engine: Optional[AsyncEngine] = None

    async def startup(self) -> None:
        if self.engine is not None and self.settings.create_schema:
            await create_schema(self.engine)
            logger.info("Database schema checked")
        logger.info("Note store ready (%s backend)", self.settings.store_backend)

    async def shutdown(self) -> None:
        await self.store.close()
        if self.engine is not None:
            await dispose_engine(self.engine)


def build_context(settings: Settings, store: Optional[NoteStore] = None) -> AppContext:
    """
    Assemble the context described by `settings`.

    A ready-made `store` may be passed in (tests); it is then used as-is and
    no engine is created.
    """
    engine = None
    if store is None:
        if settings.store_backend == "memory":
            store = MemoryNoteStore(slug_max_attempts=settings.slug_max_attempts)
        else:
            engine = build_engine(settings)
            store = SqlNoteStore(
                build_session_factory(engine),
                slug_max_attempts=settings.slug_max_attempts,
            )

    content = ContentRenderer(preview_length=settings.preview_length)
    pages = PageRenderer(settings.templates_dir, content, site_title=settings.site_title)
    return AppContext(settings=settings, store=store, pages=pages, engine=engine)


# ── Dependencies ──────────────────────────────────────────────────────────

def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_store(request: Request) -> NoteStore:
    return get_context(request).store


def get_pages(request: Request) -> PageRenderer:
    return get_context(request).pages
