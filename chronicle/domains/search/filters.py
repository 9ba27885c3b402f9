import enum
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.sql.elements import ColumnElement

from chronicle.db.models import Post, User


class RecencyWindow(str, enum.Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


WINDOW_DAYS = {
    RecencyWindow.WEEK: 7,
    RecencyWindow.MONTH: 30,
    RecencyWindow.YEAR: 365,
}


def cutoff_for(window: Optional[RecencyWindow], now: datetime) -> Optional[datetime]:
    """Граница окна свежести; None означает отсутствие ограничения"""
    if window is None:
        return None
    return now - timedelta(days=WINDOW_DAYS[RecencyWindow(window)])


def compose_filters(
    author_handle: Optional[str] = None,
    recency: Optional[RecencyWindow] = None,
    now: Optional[datetime] = None
) -> List[ColumnElement]:
    """
    Структурные фильтры поиска. Все условия объединяются через AND
    друг с другом и с условием текстового совпадения.
    """
    predicates: List[ColumnElement] = [
        Post.published.is_(True),
        Post.published_at.is_not(None),
    ]

    if author_handle:
        predicates.append(User.username == author_handle)

    if recency is not None:
        if now is None:
            raise ValueError("now is required for a recency filter")
        predicates.append(Post.published_at >= cutoff_for(recency, now))

    return predicates
