import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chronicle.core.config import settings
from chronicle.db.repositories.search_repository import SearchRepository
from chronicle.domains.identity.entities import AuthorWithPosts
from chronicle.domains.identity.services import AuthorDirectoryService
from chronicle.domains.search.entities import SearchPage, SearchQuery
from chronicle.domains.search.filters import RecencyWindow
from chronicle.domains.search.planner import QueryPlanner

logger = logging.getLogger(__name__)


def clamp_page_size(page_size: Optional[int]) -> int:
    """Размер страницы в пределах [1, search_max_page_size]"""
    if page_size is None:
        return settings.search_default_page_size
    return max(1, min(page_size, settings.search_max_page_size))


class SearchService:
    """Сервис поиска по опубликованным постам"""

    def __init__(self, session: AsyncSession, clock: Optional[Callable[[], datetime]] = None):
        self.session = session
        self.search_repository = SearchRepository(session)
        self.author_directory = AuthorDirectoryService(session)

        self.planner = QueryPlanner(
            self.search_repository,
            timeout=settings.search_timeout_seconds,
            clock=clock
        )

    async def search(
        self,
        text: str,
        author_handle: Optional[str] = None,
        recency: Optional[RecencyWindow] = None,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None
    ) -> SearchPage:
        """Поиск постов; при любой ошибке выполнения худший исход это пустая страница"""
        query = SearchQuery(
            text=text or "",
            author_handle=author_handle or None,
            recency=recency,
            cursor=cursor or None,
            page_size=clamp_page_size(page_size)
        )
        page = await self.planner.run(query)

        logger.debug(
            "Search completed",
            extra={
                "query": query.text,
                "results": len(page.items),
                "has_more": page.has_more,
                "states": [state.value for state in page.states]
            }
        )
        return page

    async def authors_with_published_counts(self, limit: Optional[int] = None) -> List[AuthorWithPosts]:
        """Авторы для фильтра поиска"""
        return await self.author_directory.authors_with_published_counts(limit)
