import logging
import re
import unicodedata
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chronicle.db.repositories.post_repository import PostRepository
from chronicle.db.repositories.search_repository import SearchRepository
from chronicle.domains.posts.entities import Post
from chronicle.domains.posts.schemas import PostCreate, PostUpdate
from chronicle.domains.search.indexer import SearchIndexer

logger = logging.getLogger(__name__)

MAX_SLUG_SUFFIX = 100


def normalize_slug(text: Optional[str]) -> str:
    """Slug из заголовка: латиница в нижнем регистре, слова через дефис"""
    if not text:
        return ""
    slug = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = slug.lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def _random_suffix(length: int) -> str:
    return uuid.uuid4().hex[:length]


class PostService:
    """Сервис записи постов. Каждое изменение текста переиндексируется в той же транзакции"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.post_repository = PostRepository(session)
        self.search_repository = SearchRepository(session)
        self.indexer = SearchIndexer(session)

    async def create_post(self, post_data: PostCreate, author_id: uuid.UUID) -> Post:
        """Создание черновика поста вместе с поисковым документом"""
        slug = await self.generate_unique_slug(post_data.title, author_id)
        post = Post.create_post(
            author_id=author_id,
            title=post_data.title,
            slug=slug,
            content=post_data.content,
            excerpt=post_data.excerpt,
            cover_image=post_data.cover_image_url
        )

        try:
            created_post = await self.post_repository.create(post)
            await self.indexer.index_on_write(
                created_post.uuid, created_post.title, created_post.excerpt, created_post.content
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Post created", extra={"post_id": str(created_post.uuid), "slug": slug})
        return created_post

    async def update_post(self, slug: str, update_data: PostUpdate, author_id: uuid.UUID) -> Optional[Post]:
        """Обновление поста автора; None, если пост не найден"""
        post = await self.post_repository.get_by_author_and_slug(author_id, slug)

        if not post:
            return None

        searchable_changed = post.update_content(
            title=update_data.title,
            content=update_data.content,
            excerpt=update_data.excerpt,
            cover_image=update_data.cover_image_url
        )

        try:
            updated_post = await self.post_repository.update(post)
            if searchable_changed:
                await self.indexer.index_on_write(
                    updated_post.uuid, updated_post.title, updated_post.excerpt, updated_post.content
                )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return updated_post

    async def publish_post(self, slug: str, author_id: uuid.UUID) -> Optional[Post]:
        """Публикация поста автора"""
        post = await self.post_repository.get_by_author_and_slug(author_id, slug)

        if not post:
            return None

        post.publish()
        published_post = await self.post_repository.update(post)
        await self.session.commit()
        return published_post

    async def unpublish_post(self, slug: str, author_id: uuid.UUID) -> Optional[Post]:
        """Снятие поста автора с публикации"""
        post = await self.post_repository.get_by_author_and_slug(author_id, slug)

        if not post:
            return None

        post.unpublish()
        unpublished_post = await self.post_repository.update(post)
        await self.session.commit()
        return unpublished_post

    async def delete_post(self, slug: str, author_id: uuid.UUID) -> bool:
        """Удаление поста автора вместе со строками индекса"""
        post = await self.post_repository.get_by_author_and_slug(author_id, slug)

        if not post:
            return False

        try:
            await self.search_repository.delete_terms(post.uuid)
            deleted = await self.post_repository.delete(post.uuid)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return deleted

    async def get_post(self, post_uuid: uuid.UUID) -> Optional[Post]:
        """Получение поста по UUID"""
        return await self.post_repository.get_by_uuid(post_uuid)

    async def list_author_posts(self, author_id: uuid.UUID, limit: int = 100, offset: int = 0) -> List[Post]:
        """Посты автора, включая черновики"""
        return await self.post_repository.get_by_author(author_id, limit, offset)

    async def generate_unique_slug(self, title: str, author_id: uuid.UUID) -> str:
        """Чистый slug, суффикс -2, -3, ... только при конфликте у того же автора"""
        base_slug = normalize_slug(title)

        if not base_slug:
            return _random_suffix(10)

        existing = set(await self.post_repository.get_slugs_with_prefix(author_id, base_slug))

        if base_slug not in existing:
            return base_slug

        for counter in range(2, MAX_SLUG_SUFFIX + 1):
            candidate = f"{base_slug}-{counter}"
            if candidate not in existing:
                return candidate

        return f"{base_slug}-{_random_suffix(6)}"
