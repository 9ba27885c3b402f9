import base64
import binascii
import json
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, TYPE_CHECKING

from sqlalchemy.sql.elements import ColumnElement

from chronicle.domains.search.entities import SearchHit, SearchPage
from chronicle.domains.search.exceptions import InvalidCursorError
from chronicle.domains.search.ranker import SortKey, strictly_after

if TYPE_CHECKING:
    from chronicle.db.repositories.search_repository import SearchRepository
    from chronicle.domains.search.planner import MatchClause

# Ветка, выдавшая страницу: оценки веток несравнимы между собой
BRANCH_RANKED = "ranked"
BRANCH_FALLBACK = "fallback"
BRANCHES = (BRANCH_RANKED, BRANCH_FALLBACK)


@dataclass(frozen=True)
class Cursor:
    """Позиция в порядке выдачи: (оценка, дата публикации, UUID поста) и ветка поиска"""
    score: int
    published_at: datetime
    post_id: uuid.UUID
    branch: str = BRANCH_RANKED

    @property
    def sort_key(self) -> SortKey:
        return (self.score, self.published_at, self.post_id)

    @property
    def is_fallback(self) -> bool:
        return self.branch == BRANCH_FALLBACK

    @classmethod
    def from_hit(cls, hit: SearchHit, branch: str = BRANCH_RANKED) -> "Cursor":
        return cls(
            score=hit.score,
            published_at=hit.post.published_at,
            post_id=hit.post.uuid,
            branch=branch
        )


def encode_cursor(cursor: Cursor) -> str:
    """Курсор для клиента: непрозрачный URL-safe токен"""
    payload = json.dumps(
        [cursor.branch, cursor.score, cursor.published_at.isoformat(), str(cursor.post_id)],
        separators=(",", ":")
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> Cursor:
    """Разбор токена курсора; любой поврежденный токен дает InvalidCursorError"""
    try:
        padded = token + "=" * (-len(token) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        branch, score, published_at, post_id = payload
        if branch not in BRANCHES:
            raise ValueError(f"unknown search branch {branch!r}")
        if isinstance(score, bool) or not isinstance(score, int):
            raise TypeError("score must be an integer")
        return Cursor(
            score=score,
            published_at=datetime.fromisoformat(published_at),
            post_id=uuid.UUID(post_id),
            branch=branch
        )
    except (binascii.Error, ValueError, TypeError, AttributeError) as exc:
        raise InvalidCursorError("Malformed pagination cursor") from exc


class Paginator:
    """Keyset-пагинация по составному ключу сортировки"""

    def __init__(self, search_repository: "SearchRepository"):
        self.search_repository = search_repository

    async def paginate(
        self,
        match: "MatchClause",
        predicates: Sequence[ColumnElement],
        cursor: Optional[Cursor],
        page_size: int
    ) -> SearchPage:
        """Страница строго после курсора; запрашиваем на одну строку больше, чтобы узнать о продолжении"""
        conditions: List[ColumnElement] = list(predicates)
        if cursor is not None:
            conditions.append(strictly_after(match.score, cursor.sort_key))

        hits = await self.search_repository.fetch_hits(match, conditions, limit=page_size + 1)

        if len(hits) > page_size:
            hits = hits[:page_size]
            branch = BRANCH_FALLBACK if match.neutral else BRANCH_RANKED
            return SearchPage(
                items=hits,
                has_more=True,
                next_cursor=encode_cursor(Cursor.from_hit(hits[-1], branch))
            )

        return SearchPage(items=hits, has_more=False, next_cursor=None)
