from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from chronicle.core.auth import get_current_author_id
from chronicle.core.db import get_db
from chronicle.domains.posts.schemas import PostCreate, PostUpdate, PostResponse
from chronicle.domains.posts.services import PostService
from chronicle.domains.search.exceptions import IndexingError

router = APIRouter(prefix="/posts", tags=["posts"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Post not found"
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    author_id: uuid.UUID = Depends(get_current_author_id),
    db: AsyncSession = Depends(get_db)
):
    """Создание черновика поста"""
    post_service = PostService(db)
    
    try:
        post = await post_service.create_post(post_data, author_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except IndexingError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )
    
    return PostResponse.model_validate(post)


@router.get("/{post_uuid}", response_model=PostResponse)
async def get_post(
    post_uuid: uuid.UUID,
    db: AsyncSession = Depends(get_db)
):
    """Получение поста по UUID"""
    post_service = PostService(db)
    
    post = await post_service.get_post(post_uuid)
    
    if not post:
        raise _not_found()
    
    return PostResponse.model_validate(post)


@router.put("/{slug}", response_model=PostResponse)
async def update_post(
    slug: str,
    update_data: PostUpdate,
    author_id: uuid.UUID = Depends(get_current_author_id),
    db: AsyncSession = Depends(get_db)
):
    """Обновление поста"""
    post_service = PostService(db)
    
    try:
        post = await post_service.update_post(slug, update_data, author_id)
    except IndexingError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update post"
        )
    
    if not post:
        raise _not_found()
    
    return PostResponse.model_validate(post)


@router.post("/{slug}/publish", response_model=PostResponse)
async def publish_post(
    slug: str,
    author_id: uuid.UUID = Depends(get_current_author_id),
    db: AsyncSession = Depends(get_db)
):
    """Публикация поста"""
    post_service = PostService(db)
    
    post = await post_service.publish_post(slug, author_id)
    
    if not post:
        raise _not_found()
    
    return PostResponse.model_validate(post)


@router.post("/{slug}/unpublish", response_model=PostResponse)
async def unpublish_post(
    slug: str,
    author_id: uuid.UUID = Depends(get_current_author_id),
    db: AsyncSession = Depends(get_db)
):
    """Снятие поста с публикации"""
    post_service = PostService(db)
    
    post = await post_service.unpublish_post(slug, author_id)
    
    if not post:
        raise _not_found()
    
    return PostResponse.model_validate(post)


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    slug: str,
    author_id: uuid.UUID = Depends(get_current_author_id),
    db: AsyncSession = Depends(get_db)
):
    """Удаление поста"""
    post_service = PostService(db)
    
    deleted = await post_service.delete_post(slug, author_id)
    
    if not deleted:
        raise _not_found()
