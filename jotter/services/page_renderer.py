"""
Page rendering: binds payloads to the three page templates.

    index.html  list of notes            (GET /)
    new.html    empty creation form      (GET /new)
    note.html   single note, view or edit (GET /note/{slug}[?edit=true])

All three extend base.html. Templates are compiled once, when the
AppContext is built.
"""

from typing import List

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from jotter.schemas.note import NoteRecord
from jotter.services.content_renderer import ContentRenderer


class PageRenderer:

    def __init__(self, templates_dir: str, content: ContentRenderer, site_title: str = "My Notes"):
        self.site_title = site_title
        self.content = content
        self.templates = Jinja2Templates(directory=templates_dir)
        self.templates.env.filters["markdownify"] = content.render
        self.templates.env.filters["preview"] = content.preview

    def list_page(self, request: Request, notes: List[NoteRecord]) -> Response:
        return self.templates.TemplateResponse(
            request,
            "index.html",
            {"title": self.site_title, "notes": notes},
        )

    def new_page(self, request: Request) -> Response:
        return self.templates.TemplateResponse(
            request,
            "new.html",
            {"title": "Create a New Note"},
        )

    def note_page(self, request: Request, note: NoteRecord, editing: bool = False) -> Response:
        return self.templates.TemplateResponse(
            request,
            "note.html",
            {"title": note.title, "note": note, "is_editing": editing},
        )
