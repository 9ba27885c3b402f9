import enum
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from chronicle.domains.identity.entities import AuthorSummary
from chronicle.domains.posts.entities import Post
from chronicle.domains.search.filters import RecencyWindow
from chronicle.domains.search.ranker import SortKey, sort_key


class PlanState(str, enum.Enum):
    PLANNING = "planning"
    RANKED_MATCH = "ranked_match"
    FALLBACK_MATCH = "fallback_match"
    ERROR_RECOVERY = "error_recovery"
    FILTERED = "filtered"
    PAGINATED = "paginated"
    DONE = "done"


@dataclass(frozen=True)
class SearchQuery:
    """Поисковый запрос; неизменяем в пределах одного обращения"""
    text: str
    author_handle: Optional[str] = None
    recency: Optional[RecencyWindow] = None
    cursor: Optional[str] = None
    page_size: int = 10


@dataclass
class SearchHit:
    """Пост из выдачи вместе с автором и оценкой релевантности"""
    post: Post
    author: AuthorSummary
    score: int

    @property
    def sort_key(self) -> SortKey:
        return sort_key(self.score, self.post.published_at, self.post.uuid)


@dataclass
class SearchPage:
    items: List[SearchHit] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None
    states: Tuple[PlanState, ...] = ()

    @classmethod
    def empty(cls, states: Tuple[PlanState, ...] = ()) -> "SearchPage":
        return cls(items=[], has_more=False, next_cursor=None, states=states)
