"""Tests for the opaque cursor codec and page assembly."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
import json
import uuid

import pytest

from chronicle.domains.identity.entities import AuthorSummary
from chronicle.domains.posts.entities import Post
from chronicle.domains.search.entities import SearchHit
from chronicle.domains.search.exceptions import InvalidCursorError
from chronicle.domains.search.paginator import (
    BRANCH_FALLBACK,
    BRANCH_RANKED,
    Cursor,
    Paginator,
    decode_cursor,
    encode_cursor,
)
from chronicle.domains.search.planner import FallbackPlan, RankedPlan


def _token(payload) -> str:
    raw = json.dumps(payload).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _hit(score: int, published_at: datetime) -> SearchHit:
    author_id = uuid.uuid4()
    post = Post.create_post(author_id=author_id, title="Ocean", slug="ocean", content="")
    post.publish(at=published_at)
    return SearchHit(post=post, author=AuthorSummary(id=author_id, name="A", handle="a", avatar=None), score=score)


class FakeSearchRepository:
    def __init__(self, hits):
        self.hits = hits
        self.limits = []

    async def fetch_hits(self, match, conditions, limit):
        self.limits.append(limit)
        return self.hits[:limit]


@pytest.mark.unit
def test_cursor_survives_encoding() -> None:
    cursor = Cursor(
        score=24,
        published_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
        post_id=uuid.uuid4(),
    )

    token = encode_cursor(cursor)

    assert "=" not in token
    assert decode_cursor(token) == cursor


@pytest.mark.unit
def test_cursor_keeps_naive_timestamps_naive() -> None:
    cursor = Cursor(score=0, published_at=datetime(2024, 5, 1, 9, 30), post_id=uuid.uuid4())

    assert decode_cursor(encode_cursor(cursor)).published_at.tzinfo is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "token",
    [
        "not a cursor",
        "%%%",
        _token({"score": 1}),
        _token(["ranked", 1, "2024-01-01T00:00:00"]),
        _token([1, "2024-01-01T00:00:00", str(uuid.uuid4())]),
        _token(["sideways", 1, "2024-01-01T00:00:00", str(uuid.uuid4())]),
        _token(["ranked", 1, "yesterday", str(uuid.uuid4())]),
        _token(["ranked", 1, "2024-01-01T00:00:00", "not-a-uuid"]),
        _token(["ranked", "1", "2024-01-01T00:00:00", str(uuid.uuid4())]),
        _token(["ranked", 1.5, "2024-01-01T00:00:00", str(uuid.uuid4())]),
        _token(["fallback", True, "2024-01-01T00:00:00", str(uuid.uuid4())]),
        _token(["ranked", 1, None, str(uuid.uuid4())]),
        base64.urlsafe_b64encode(b"\xff\xfe").decode("ascii"),
    ],
)
def test_malformed_cursor_is_rejected(token: str) -> None:
    with pytest.raises(InvalidCursorError):
        decode_cursor(token)


@pytest.mark.unit
def test_invalid_cursor_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        decode_cursor("garbage")


@pytest.mark.unit
async def test_paginate_reports_more_when_extra_row_exists() -> None:
    base = datetime(2024, 1, 10, tzinfo=timezone.utc)
    hits = [_hit(0, base.replace(day=10 - i)) for i in range(4)]
    repository = FakeSearchRepository(hits)

    page = await Paginator(repository).paginate(FallbackPlan("ocean").match(), [], None, page_size=3)

    assert repository.limits == [4]
    assert page.items == hits[:3]
    assert page.has_more is True
    assert decode_cursor(page.next_cursor) == Cursor.from_hit(hits[2], BRANCH_FALLBACK)


@pytest.mark.unit
async def test_last_page_has_no_cursor() -> None:
    hits = [_hit(0, datetime(2024, 1, 1, tzinfo=timezone.utc))]

    page = await Paginator(FakeSearchRepository(hits)).paginate(FallbackPlan("ocean").match(), [], None, page_size=3)

    assert page.items == hits
    assert page.has_more is False
    assert page.next_cursor is None


@pytest.mark.unit
def test_cursor_carries_its_branch() -> None:
    position = dict(score=0, published_at=datetime(2024, 5, 1, tzinfo=timezone.utc), post_id=uuid.uuid4())

    ranked = decode_cursor(encode_cursor(Cursor(**position)))
    fallback = decode_cursor(encode_cursor(Cursor(branch=BRANCH_FALLBACK, **position)))

    assert ranked.branch == BRANCH_RANKED
    assert not ranked.is_fallback
    assert fallback.is_fallback


@pytest.mark.unit
async def test_ranked_page_hands_out_ranked_cursor() -> None:
    base = datetime(2024, 1, 10, tzinfo=timezone.utc)
    hits = [_hit(20, base.replace(day=10 - i)) for i in range(3)]

    page = await Paginator(FakeSearchRepository(hits)).paginate(
        RankedPlan("ocean", frozenset({"ocean"})).match(), [], None, page_size=2
    )

    assert decode_cursor(page.next_cursor) == Cursor.from_hit(hits[1], BRANCH_RANKED)
