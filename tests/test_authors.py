"""Tests for the author facet shown next to search."""

from __future__ import annotations

import pytest

from chronicle.domains.identity.schemas import UserCreate
from chronicle.domains.identity.services import AuthorDirectoryService
from tests.conftest import create_author, create_post, day


@pytest.mark.integration
async def test_counts_only_published_posts_ordered_by_count(session) -> None:
    alice = await create_author(session, handle="alice", name="Alice", image="https://img.example/a.png")
    bob = await create_author(session, handle="bob", name="Bob")
    carol = await create_author(session, handle="carol", name="Carol")

    for i in range(3):
        await create_post(session, bob, f"Bob post {i}", published_at=day(i))
    await create_post(session, alice, "Alice post", published_at=day(1))
    await create_post(session, alice, "Alice draft", published=False)
    await create_post(session, carol, "Carol draft", published=False)

    authors = await AuthorDirectoryService(session).authors_with_published_counts()

    assert [(a.handle, a.count) for a in authors] == [("bob", 3), ("alice", 1)]
    assert authors[1].name == "Alice"
    assert authors[1].avatar == "https://img.example/a.png"


@pytest.mark.integration
async def test_ties_are_broken_by_handle(session) -> None:
    for handle in ("zed", "amy", "kim"):
        user = await create_author(session, handle=handle, name=handle.title())
        await create_post(session, user, f"{handle} post", published_at=day(1))

    authors = await AuthorDirectoryService(session).authors_with_published_counts()

    assert [a.handle for a in authors] == ["amy", "kim", "zed"]


@pytest.mark.integration
async def test_authors_without_handle_are_hidden(session) -> None:
    anonymous = await create_author(session, handle=None, name="Anonymous")
    await create_post(session, anonymous, "Unsigned", published_at=day(1))

    assert await AuthorDirectoryService(session).authors_with_published_counts() == []


@pytest.mark.integration
async def test_limit_is_applied(session) -> None:
    for handle in ("one", "two", "three"):
        user = await create_author(session, handle=handle, name=handle)
        await create_post(session, user, f"{handle} post", published_at=day(1))

    authors = await AuthorDirectoryService(session).authors_with_published_counts(limit=2)

    assert len(authors) == 2


@pytest.mark.integration
async def test_register_author_rejects_taken_handle(session) -> None:
    service = AuthorDirectoryService(session)
    await service.register_author(UserCreate(name="Alice", username="alice"))

    with pytest.raises(ValueError):
        await service.register_author(UserCreate(name="Other Alice", username="alice"))

    assert (await service.get_author_by_handle("alice")).name == "Alice"


@pytest.mark.unit
@pytest.mark.parametrize("username", ["search", "Admin", "bad handle", "no!"])
def test_reserved_or_invalid_handles_are_rejected(username: str) -> None:
    with pytest.raises(ValueError):
        UserCreate(name="Someone", username=username)
