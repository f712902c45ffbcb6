"""
Jotter: Services Layer
========================

What:  Everything between the routes and the database.

Service Inventory:
    - NoteStore (abstract, store_base.py): persistence contract + slug retry
    - SqlNoteStore (sql_store.py): notes table via async SQLAlchemy
    - MemoryNoteStore (memory_store.py): lock-guarded in-process list
    - slugs.py: slug generation
    - ContentRenderer (content_renderer.py): markdown → HTML, previews
    - PageRenderer (page_renderer.py): Jinja2 page templates
"""
