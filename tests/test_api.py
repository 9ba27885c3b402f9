"""HTTP surface tests through the ASGI app."""

from __future__ import annotations

import httpx
import pytest

from chronicle.core.db import get_db
from chronicle.main import app
from tests.conftest import create_author, create_post, day


@pytest.fixture()
async def client(session_factory):
    async def _get_test_db():
        async with session_factory() as db_session:
            yield db_session

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest.mark.integration
async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
async def test_search_returns_posts_with_authors(client, session, author) -> None:
    await create_post(session, author, "Ocean Currents", published_at=day(1))
    await create_post(session, author, "Tides", excerpt="The ocean is vast", published_at=day(2))

    response = await client.get("/search", params={"q": "ocean"})

    assert response.status_code == 200
    body = response.json()
    assert [item["post"]["title"] for item in body["items"]] == ["Ocean Currents", "Tides"]
    assert body["items"][0]["author"]["handle"] == "writer"
    assert body["has_more"] is False
    assert body["next_cursor"] is None


@pytest.mark.integration
async def test_search_pages_follow_the_cursor(client, session, author) -> None:
    for i in range(3):
        await create_post(session, author, f"Ocean {i}", published_at=day(i))

    first = (await client.get("/search", params={"q": "ocean", "limit": 2})).json()
    second = (await client.get("/search", params={"q": "ocean", "limit": 2, "cursor": first["next_cursor"]})).json()

    assert [item["post"]["title"] for item in first["items"]] == ["Ocean 2", "Ocean 1"]
    assert first["has_more"] is True
    assert [item["post"]["title"] for item in second["items"]] == ["Ocean 0"]
    assert second["has_more"] is False


@pytest.mark.integration
async def test_empty_query_returns_empty_page(client) -> None:
    response = await client.get("/search", params={"q": "   "})

    assert response.status_code == 200
    assert response.json() == {"items": [], "has_more": False, "next_cursor": None}


@pytest.mark.integration
async def test_malformed_cursor_is_a_client_error(client) -> None:
    response = await client.get("/search", params={"q": "ocean", "cursor": "definitely-not-a-cursor"})

    assert response.status_code == 400


@pytest.mark.integration
async def test_unknown_recency_window_is_rejected(client) -> None:
    response = await client.get("/search", params={"q": "ocean", "date": "decade"})

    assert response.status_code == 422


@pytest.mark.integration
async def test_author_facet(client, session, author) -> None:
    await create_post(session, author, "Ocean Currents", published_at=day(1))

    response = await client.get("/search/authors")

    assert response.status_code == 200
    assert response.json() == [{"handle": "writer", "name": "Writer", "avatar": None, "count": 1}]


@pytest.mark.integration
async def test_post_lifecycle_over_http(client, session) -> None:
    writer = await create_author(session, handle="poet", name="Poet")
    headers = {"X-Author-Id": str(writer.uuid)}

    created = await client.post("/posts", json={"title": "Ocean Currents", "content": "Warm water"}, headers=headers)
    assert created.status_code == 201
    slug = created.json()["slug"]

    hidden = (await client.get("/search", params={"q": "ocean"})).json()
    assert hidden["items"] == []

    published = await client.post(f"/posts/{slug}/publish", headers=headers)
    assert published.status_code == 200
    assert published.json()["published"] is True

    visible = (await client.get("/search", params={"q": "ocean", "author": "poet"})).json()
    assert [item["post"]["slug"] for item in visible["items"]] == [slug]

    deleted = await client.delete(f"/posts/{slug}", headers=headers)
    assert deleted.status_code == 204

    gone = (await client.get("/search", params={"q": "ocean"})).json()
    assert gone["items"] == []


@pytest.mark.integration
async def test_writes_require_an_author(client) -> None:
    missing = await client.post("/posts", json={"title": "Ocean", "content": "Body"})
    invalid = await client.post("/posts", json={"title": "Ocean", "content": "Body"}, headers={"X-Author-Id": "nope"})

    assert missing.status_code == 422
    assert invalid.status_code == 401


@pytest.mark.integration
async def test_unknown_post_is_not_found(client, author) -> None:
    response = await client.post("/posts/missing/publish", headers={"X-Author-Id": str(author.uuid)})

    assert response.status_code == 404
