from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from chronicle.core.config import settings
from chronicle.core.db import get_db
from chronicle.domains.identity.schemas import AuthorSummaryResponse, AuthorWithPostsResponse
from chronicle.domains.posts.schemas import PostResponse
from chronicle.domains.search.exceptions import InvalidCursorError
from chronicle.domains.search.filters import RecencyWindow
from chronicle.domains.search.schemas import SearchHitResponse, SearchPageResponse
from chronicle.domains.search.services import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchPageResponse)
async def search_posts(
    q: str = Query("", max_length=200),
    author: Optional[str] = Query(None, max_length=20),
    date: Optional[RecencyWindow] = Query(None),
    cursor: Optional[str] = Query(None, max_length=512),
    limit: int = Query(settings.search_default_page_size, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """Поиск по опубликованным постам с фильтрами и курсорной пагинацией"""
    search_service = SearchService(db)
    
    try:
        page = await search_service.search(
            q,
            author_handle=author,
            recency=date,
            cursor=cursor,
            page_size=limit
        )
    except InvalidCursorError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    
    return SearchPageResponse(
        items=[
            SearchHitResponse(
                post=PostResponse.model_validate(hit.post),
                author=AuthorSummaryResponse.model_validate(hit.author)
            )
            for hit in page.items
        ],
        has_more=page.has_more,
        next_cursor=page.next_cursor
    )


@router.get("/authors", response_model=List[AuthorWithPostsResponse])
async def get_authors_with_posts(
    limit: int = Query(settings.author_facet_limit, ge=1),
    db: AsyncSession = Depends(get_db)
):
    """Авторы с опубликованными постами для фильтра поиска"""
    search_service = SearchService(db)
    
    authors = await search_service.authors_with_published_counts(limit)
    
    return [AuthorWithPostsResponse.model_validate(author) for author in authors]
