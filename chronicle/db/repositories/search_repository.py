import logging
from typing import Iterable, List, Sequence, Tuple, TYPE_CHECKING
import uuid

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from chronicle.db.models.post import Post as PostModel
from chronicle.db.models.search import SearchTerm as SearchTermModel
from chronicle.db.models.user import User as UserModel

if TYPE_CHECKING:
    from chronicle.domains.search.entities import SearchHit
    from chronicle.domains.search.planner import MatchClause

logger = logging.getLogger(__name__)


class SearchRepository:
    """Репозиторий инвертированного индекса и выборок поиска"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace_terms(self, post_id: uuid.UUID, postings: Iterable[Tuple[str, str, int]]) -> int:
        """Замена всех строк индекса поста; commit делает вызывающий"""
        await self.session.execute(
            delete(SearchTermModel).where(SearchTermModel.post_id == post_id)
        )

        rows = [
            {"post_id": post_id, "term": term, "zone": zone, "frequency": frequency}
            for term, zone, frequency in postings
        ]
        if rows:
            await self.session.execute(insert(SearchTermModel), rows)

        return len(rows)

    async def delete_terms(self, post_id: uuid.UUID) -> None:
        """Удаление строк индекса поста"""
        await self.session.execute(
            delete(SearchTermModel).where(SearchTermModel.post_id == post_id)
        )

    async def get_terms(self, post_id: uuid.UUID) -> List[Tuple[str, str, int]]:
        """Строки индекса поста: (терм, зона, частота)"""
        result = await self.session.execute(
            select(SearchTermModel.term, SearchTermModel.zone, SearchTermModel.frequency)
            .where(SearchTermModel.post_id == post_id)
            .order_by(SearchTermModel.zone, SearchTermModel.term)
        )
        return [tuple(row) for row in result.all()]

    async def fetch_hits(
        self,
        match: "MatchClause",
        conditions: Sequence[ColumnElement],
        limit: int
    ) -> List["SearchHit"]:
        """Выборка опубликованных постов с авторами в порядке выдачи"""
        from chronicle.domains.search.ranker import order_by

        stmt = (
            select(PostModel, UserModel, match.score.label("score"))
            .select_from(PostModel)
            .join(UserModel, UserModel.uuid == PostModel.author_id)
        )

        if match.source is not None:
            stmt = stmt.join(match.source, match.source.c.post_id == PostModel.uuid)

        stmt = (
            stmt.where(*match.predicates, *conditions)
            .order_by(*order_by(match.score, neutral=match.neutral))
            .limit(limit)
        )

        result = await self.session.execute(stmt)
        return [self._to_domain(db_post, db_user, score) for db_post, db_user, score in result.all()]

    async def recover(self) -> None:
        """Откат транзакции после ошибки выполнения запроса"""
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after failed search query did not complete", exc_info=True)

    def _to_domain(self, db_post: PostModel, db_user: UserModel, score) -> "SearchHit":
        """Преобразование строки выборки в результат поиска"""
        from chronicle.db.repositories.post_repository import PostRepository
        from chronicle.db.repositories.user_repository import UserRepository
        from chronicle.domains.search.entities import SearchHit

        return SearchHit(
            post=PostRepository.to_domain(db_post),
            author=UserRepository.to_summary(db_user),
            score=int(score or 0)
        )
