"""
Jotter: HTTP Route Tests
==========================

What:  End-to-end request/response tests through the ASGI app, using the
       SQL store on a temporary SQLite database.

What we test:
    ✅ List, create, view, edit, update and delete flows with 303 redirects
    ✅ 404 for unknown slugs, 400 for blank titles and empty delete slugs
    ✅ 405 for non-POST delete
    ✅ Static assets and /health
    ✅ Store failures become a generic 500
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from jotter.exceptions import StoreError
from jotter.main import create_app
from jotter.services.store_base import NoteStore


async def create_note(client, title="First note", content="Hello\n**world**", labels="a, b ,,c"):
    response = await client.post("/new", data={"title": title, "content": content, "labels": labels})
    assert response.status_code == 303
    return response


async def only_slug(app):
    notes = await app.state.context.store.list_all()
    assert len(notes) == 1
    return notes[0].slug


class TestListAndCreate:

    @pytest.mark.asyncio
    async def test_empty_list_page(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "No notes yet" in response.text

    @pytest.mark.asyncio
    async def test_new_form_page(self, test_client):
        response = await test_client.get("/new")

        assert response.status_code == 200
        assert 'action="/new"' in response.text
        assert "Create a New Note" in response.text

    @pytest.mark.asyncio
    async def test_create_redirects_to_list(self, test_client, app):
        response = await create_note(test_client)

        assert response.headers["location"] == "/"
        note = (await app.state.context.store.list_all())[0]
        assert note.title == "First note"
        assert note.content == "Hello\n**world**"
        assert note.labels == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_list_shows_title_preview_and_labels(self, test_client, app):
        await create_note(test_client, content="line one\nline two")
        slug = await only_slug(app)

        response = await test_client.get("/")

        assert f'href="/note/{slug}"' in response.text
        assert "First note" in response.text
        assert "line one..." in response.text
        assert "line two" not in response.text
        assert '<li class="label">b</li>' in response.text

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, test_client):
        await create_note(test_client, title="Older")
        await create_note(test_client, title="Newer")

        page = (await test_client.get("/")).text

        assert page.index("Newer") < page.index("Older")

    @pytest.mark.asyncio
    async def test_create_with_blank_title_is_rejected(self, test_client, app):
        response = await test_client.post("/new", data={"title": "  ", "content": "x"})

        assert response.status_code == 400
        assert await app.state.context.store.list_all() == []

    @pytest.mark.asyncio
    async def test_title_is_stored_as_submitted(self, test_client, app):
        await create_note(test_client, title="  Spaced title ")

        note = (await app.state.context.store.list_all())[0]
        assert note.title == "  Spaced title "

    @pytest.mark.asyncio
    async def test_titles_are_escaped(self, test_client):
        await create_note(test_client, title="<script>alert(1)</script>")

        page = (await test_client.get("/")).text

        assert "<script>alert(1)</script>" not in page
        assert "&lt;script&gt;" in page


class TestViewAndEdit:

    @pytest.mark.asyncio
    async def test_view_renders_markdown(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.get(f"/note/{slug}")

        assert response.status_code == 200
        assert "<strong>world</strong>" in response.text
        assert "Hello<br>" in response.text
        assert f'href="/note/{slug}?edit=true"' in response.text
        assert f'action="/note/delete/{slug}"' in response.text

    @pytest.mark.asyncio
    async def test_edit_flag_shows_form(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.get(f"/note/{slug}", params={"edit": "true"})

        assert response.status_code == 200
        assert f'action="/note/{slug}"' in response.text
        assert 'value="First note"' in response.text
        assert 'value="a, b, c"' in response.text
        assert "**world**</textarea>" in response.text

    @pytest.mark.asyncio
    async def test_other_edit_values_show_read_only_page(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.get(f"/note/{slug}", params={"edit": "yes"})

        assert "Edit note" not in response.text
        assert "<strong>world</strong>" in response.text

    @pytest.mark.asyncio
    async def test_raw_html_in_content_is_not_live_markup(self, test_client, app):
        await create_note(test_client, content="<img src=x onerror=alert(1)>\n<script>alert(2)</script>")
        slug = await only_slug(app)

        response = await test_client.get(f"/note/{slug}")

        assert response.status_code == 200
        assert "onerror" not in response.text
        assert "<script>alert(2)" not in response.text

    @pytest.mark.asyncio
    async def test_unknown_slug_is_404(self, test_client):
        response = await test_client.get("/note/note-missing")

        assert response.status_code == 404


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_redirects_to_clean_view_url(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.post(
            f"/note/{slug}?edit=true",
            data={"title": "Renamed", "content": "new body", "labels": "x"},
        )

        assert response.status_code == 303
        assert response.headers["location"] == f"/note/{slug}"
        note = await app.state.context.store.get_by_slug(slug)
        assert (note.title, note.content, note.labels) == ("Renamed", "new body", ["x"])

    @pytest.mark.asyncio
    async def test_update_unknown_slug_is_404(self, test_client):
        response = await test_client.post(
            "/note/note-missing", data={"title": "T", "content": "", "labels": ""}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_blank_title_is_rejected(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.post(f"/note/{slug}", data={"title": ""})

        assert response.status_code == 400
        assert (await app.state.context.store.get_by_slug(slug)).title == "First note"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_redirects_to_list(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        response = await test_client.post(f"/note/delete/{slug}")

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert await app.state.context.store.list_all() == []

    @pytest.mark.asyncio
    async def test_delete_twice_both_redirect(self, test_client, app):
        await create_note(test_client)
        slug = await only_slug(app)

        first = await test_client.post(f"/note/delete/{slug}")
        second = await test_client.post(f"/note/delete/{slug}")

        assert first.status_code == 303
        assert second.status_code == 303

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    async def test_non_post_is_405(self, test_client, method):
        response = await test_client.request(method, "/note/delete/note-1")

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"

    @pytest.mark.asyncio
    async def test_empty_slug_is_400(self, test_client):
        response = await test_client.post("/note/delete/")

        assert response.status_code == 400


class TestAmbient:

    @pytest.mark.asyncio
    async def test_static_asset_is_served(self, test_client):
        response = await test_client.get("/static/style.css")

        assert response.status_code == 200
        assert "text/css" in response.headers["content-type"]

    @pytest.mark.asyncio
    async def test_missing_static_asset_is_404(self, test_client):
        response = await test_client.get("/static/missing.css")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        generated = await test_client.get("/")
        echoed = await test_client.get("/", headers={"X-Request-ID": "abc12345"})

        assert generated.headers["x-request-id"]
        assert echoed.headers["x-request-id"] == "abc12345"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("supplied", ["has spaces", "x" * 65, "bad\\ninjected"])
    async def test_malformed_request_id_is_replaced(self, test_client, supplied):
        response = await test_client.get("/", headers={"X-Request-ID": supplied})

        rid = response.headers["x-request-id"]
        assert rid != supplied
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_memory_backend(self, test_settings):
        settings = test_settings.model_copy(update={"store_backend": "memory"})
        application = create_app(settings)
        await application.state.context.startup()
        transport = ASGITransport(app=application)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await create_note(client, title="In memory")
            page = await client.get("/")

        assert application.state.context.engine is None
        assert "In memory" in page.text


class TestStoreFailure:

    @pytest.mark.asyncio
    async def test_store_error_is_generic_500(self, test_settings):
        store = AsyncMock(spec=NoteStore)
        store.list_all.side_effect = StoreError(
            context={"operation": "list_all", "error_type": "OperationalError"}
        )
        application = create_app(test_settings, store=store)
        transport = ASGITransport(app=application)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/")

        assert response.status_code == 500
        assert "OperationalError" not in response.text
        assert "internal error" in response.text

    @pytest.mark.asyncio
    async def test_unreachable_store_fails_health(self, test_settings):
        store = AsyncMock(spec=NoteStore)
        store.ping.return_value = False
        application = create_app(test_settings, store=store)
        transport = ASGITransport(app=application)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_generic_500(self, test_settings):
        store = AsyncMock(spec=NoteStore)
        store.list_all.side_effect = RuntimeError("cursor exploded at 0xdeadbeef")
        application = create_app(test_settings, store=store)
        # The catch-all handler responds, then Starlette re-raises to the server
        transport = ASGITransport(app=application, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/")

        assert response.status_code == 500
        assert response.text == "An internal error occurred. Please try again later."
        assert "0xdeadbeef" not in response.text
