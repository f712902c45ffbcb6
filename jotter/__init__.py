"""
Jotter: Application Package Initializer
=========================================

What: Server-rendered note-taking web application.
Who:  Imported by uvicorn (`jotter.main:app`), Alembic, and pytest.

Architecture Note:
    The package is layered the same way for every request:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP + forms)        │  ← parse form fields, redirect
    ├─────────────────────────────────────┤
    │   Services (store, rendering)       │  ← NoteStore, ContentRenderer,
    │                                     │    PageRenderer
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The shared pieces (settings, store, templates) live in one AppContext
    built by the application factory and attached to `app.state`.
"""

__version__ = "1.0.0"
