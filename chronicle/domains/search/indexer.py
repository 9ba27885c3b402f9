import logging
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chronicle.db.repositories.search_repository import SearchRepository
from chronicle.domains.search.exceptions import IndexingError
from chronicle.domains.search.normalizer import normalize
from chronicle.domains.search.tokenizer import analyze

logger = logging.getLogger(__name__)

ZONE_TITLE = "A"
ZONE_EXCERPT = "B"
ZONE_BODY = "C"
ZONES = (ZONE_TITLE, ZONE_EXCERPT, ZONE_BODY)


@dataclass(frozen=True)
class WeightedDocument:
    """Поисковый документ поста: текст и частоты термов по зонам"""
    zones: Dict[str, str]
    zone_terms: Dict[str, Counter] = field(default_factory=dict)

    def postings(self) -> Iterator[Tuple[str, str, int]]:
        """Строки инвертированного индекса: (терм, зона, частота)"""
        for zone in ZONES:
            for term, frequency in sorted(self.zone_terms.get(zone, Counter()).items()):
                yield term, zone, frequency

    def frequency(self, term: str, zone: str) -> int:
        return self.zone_terms.get(zone, Counter()).get(term, 0)

    @property
    def is_empty(self) -> bool:
        return not any(self.zone_terms.values())


def index(title: str, excerpt: Optional[str], body: str) -> WeightedDocument:
    """Построение взвешенного документа; заголовок входит в зону A дважды"""
    zones = {
        ZONE_TITLE: f"{title} {title}",
        ZONE_EXCERPT: excerpt or "",
        ZONE_BODY: normalize(body),
    }
    zone_terms = {zone: Counter(analyze(text)) for zone, text in zones.items()}
    return WeightedDocument(zones=zones, zone_terms=zone_terms)


class SearchIndexer:
    """Синхронная индексация поста внутри транзакции записи контента"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.search_repository = SearchRepository(session)

    async def index_on_write(
        self,
        post_id: uuid.UUID,
        title: str,
        excerpt: Optional[str],
        body: str
    ) -> WeightedDocument:
        """
        Пересоздание поискового документа поста.

        Не делает commit: строки индекса пишутся в транзакцию вызывающего.
        Любая ошибка превращается в IndexingError и должна прервать запись.
        """
        start_time = time.time()

        try:
            document = index(title, excerpt, body)
            postings = list(document.postings())
            await self.search_repository.replace_terms(post_id, postings)
        except (SQLAlchemyError, TypeError, ValueError) as exc:
            raise IndexingError(f"Failed to index post {post_id}") from exc

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Post indexed",
            extra={
                "post_id": str(post_id),
                "postings": len(postings),
                "duration_ms": f"{duration_ms:.2f}"
            }
        )
        return document
