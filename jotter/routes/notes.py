"""
Jotter: Note Route Handlers
=============================

What:  The HTML pages and form endpoints for notes.
How:   Parse path/query/form input, call the NoteStore, render a page or
       redirect with 303 See Other. Errors are raised as JotterError
       subclasses and turned into responses by the handlers in main.py.

Route Inventory:
    GET  /                     list page
    GET  /new                  creation form
    POST /new                  create → 303 /
    GET  /note/{slug}          view (or edit form with ?edit=true)
    POST /note/{slug}          update → 303 /note/{slug}
    POST /note/delete/{slug}   delete → 303 /   (other verbs: 405)
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from jotter.context import get_pages, get_store
from jotter.exceptions import MethodNotAllowedError, ValidationError
from jotter.schemas.note import NoteForm
from jotter.services.page_renderer import PageRenderer
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


async def note_form(
    title: str = Form(default=""),
    content: str = Form(default=""),
    labels: str = Form(default="", description="Comma-separated labels"),
) -> NoteForm:
    """Validate the create/edit form; missing fields count as empty."""
    try:
        return NoteForm(title=title, content=content, labels=labels)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else None
        message = "Title is required" if field == "title" else "Invalid form input"
        raise ValidationError(message=message, field=field) from e


def see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


@router.get("/", response_class=HTMLResponse, summary="List all notes")
async def list_notes(
    request: Request,
    store: NoteStore = Depends(get_store),
    pages: PageRenderer = Depends(get_pages),
):
    notes = await store.list_all()
    return pages.list_page(request, notes)


@router.get("/new", response_class=HTMLResponse, summary="Show the creation form")
async def new_note_form(request: Request, pages: PageRenderer = Depends(get_pages)):
    return pages.new_page(request)


@router.post("/new", status_code=303, summary="Create a note")
async def create_note(
    form: NoteForm = Depends(note_form),
    store: NoteStore = Depends(get_store),
) -> RedirectResponse:
    await store.insert(form.title, form.content, form.labels)
    return see_other("/")


@router.post("/note/delete/{slug:path}", status_code=303, summary="Delete a note")
async def delete_note(slug: str, store: NoteStore = Depends(get_store)) -> RedirectResponse:
    """Idempotent: deleting an unknown slug still redirects to the list."""
    if not slug.strip():
        raise ValidationError(message="Missing note identifier", field="slug")
    await store.delete(slug)
    return see_other("/")


@router.api_route(
    "/note/delete/{slug:path}",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def delete_note_wrong_method(request: Request, slug: str):
    raise MethodNotAllowedError(method=request.method, allowed=["POST"])


@router.get("/note/{slug}", response_class=HTMLResponse, summary="View or edit a note")
async def view_note(
    request: Request,
    slug: str,
    edit: str | None = Query(default=None, description="'true' shows the edit form"),
    store: NoteStore = Depends(get_store),
    pages: PageRenderer = Depends(get_pages),
):
    note = await store.get_by_slug(slug)
    return pages.note_page(request, note, editing=edit == "true")


@router.post("/note/{slug}", status_code=303, summary="Update a note")
async def update_note(
    slug: str,
    form: NoteForm = Depends(note_form),
    store: NoteStore = Depends(get_store),
) -> RedirectResponse:
    await store.update(slug, form.title, form.content, form.labels)
    # Back to the clean view URL, without ?edit=true
    return see_other(f"/note/{quote(slug)}")
