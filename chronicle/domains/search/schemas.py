from pydantic import BaseModel, Field
from typing import List, Optional

from chronicle.domains.identity.schemas import AuthorSummaryResponse
from chronicle.domains.posts.schemas import PostResponse


class SearchHitResponse(BaseModel):
    """Схема для одного результата поиска"""
    post: PostResponse
    author: AuthorSummaryResponse


class SearchPageResponse(BaseModel):
    """Схема для страницы результатов поиска"""
    items: List[SearchHitResponse] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None
