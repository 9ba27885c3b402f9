"""
Ранжирование результатов поиска.

Порядок выдачи во всех ветках (ранжированной и подстрочной) один и тот же:
релевантность, затем дата публикации, затем UUID поста, все по убыванию.
Тем же трем ключам подчиняется сравнение с курсором пагинации.
"""
from datetime import datetime
from typing import Iterable, List, Tuple
import uuid

from sqlalchemy import and_, case, func, or_
from sqlalchemy.sql.elements import ColumnElement

from chronicle.db.models import Post, SearchTerm
from chronicle.domains.search.indexer import ZONE_BODY, ZONE_EXCERPT, ZONE_TITLE, WeightedDocument

# Целые веса, чтобы оценки точно сравнивались и в SQL, и в курсоре
ZONE_WEIGHTS = {
    ZONE_TITLE: 10,
    ZONE_EXCERPT: 4,
    ZONE_BODY: 2,
}

NEUTRAL_SCORE = 0

SortKey = Tuple[int, datetime, uuid.UUID]


def zone_weight() -> ColumnElement:
    """Вес зоны строки инвертированного индекса"""
    return case(ZONE_WEIGHTS, value=SearchTerm.zone, else_=0)


def weighted_score() -> ColumnElement:
    """Агрегат релевантности: сумма частот термов, умноженных на вес зоны"""
    return func.sum(SearchTerm.frequency * zone_weight())


def score_document(document: WeightedDocument, terms: Iterable[str]) -> int:
    """Та же оценка, что и weighted_score(), посчитанная по документу в памяти"""
    return sum(
        weight * document.frequency(term, zone)
        for term in set(terms)
        for zone, weight in ZONE_WEIGHTS.items()
    )


def sort_key(score: int, published_at: datetime, post_id: uuid.UUID) -> SortKey:
    return (score, published_at, post_id)


def order_by(score: ColumnElement, neutral: bool = False) -> List[ColumnElement]:
    """Ключи сортировки; постоянную оценку в ORDER BY не передаем"""
    keys = [Post.published_at.desc(), Post.uuid.desc()]
    if not neutral:
        keys.insert(0, score.desc())
    return keys


def strictly_after(score: ColumnElement, position: SortKey) -> ColumnElement:
    """Строки, которые при убывающем порядке идут строго после позиции курсора"""
    cursor_score, cursor_published_at, cursor_post_id = position
    return or_(
        score < cursor_score,
        and_(score == cursor_score, Post.published_at < cursor_published_at),
        and_(
            score == cursor_score,
            Post.published_at == cursor_published_at,
            Post.uuid < cursor_post_id,
        ),
    )
