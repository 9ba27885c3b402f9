from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError
import uuid

from chronicle.db.models.post import Post as PostModel

if TYPE_CHECKING:
    from chronicle.domains.posts.entities import Post


class PostRepository:
    """Репозиторий для работы с постами.

    Методы записи не делают commit: пост и его поисковый документ
    фиксируются одной транзакцией на уровне сервиса.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, post: "Post") -> "Post":
        """Создание нового поста"""
        db_post = PostModel(
            uuid=post.uuid,
            author_id=post.author_id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            content=post.content,
            cover_image=post.cover_image,
            view_count=post.view_count,
            published=post.published,
            published_at=post.published_at
        )

        self.session.add(db_post)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Invalid author_id or duplicate slug")
        await self.session.refresh(db_post)
        return self.to_domain(db_post)

    async def get_by_uuid(self, post_uuid: uuid.UUID) -> Optional["Post"]:
        """Получение поста по UUID"""
        db_post = await self.session.get(PostModel, post_uuid)
        return self.to_domain(db_post) if db_post else None

    async def get_by_author_and_slug(self, author_id: uuid.UUID, slug: str) -> Optional["Post"]:
        """Получение поста автора по slug"""
        result = await self.session.execute(
            select(PostModel).where(
                and_(PostModel.author_id == author_id, PostModel.slug == slug)
            )
        )
        db_post = result.scalar_one_or_none()
        return self.to_domain(db_post) if db_post else None

    async def get_by_author(self, author_id: uuid.UUID, limit: int = 100, offset: int = 0) -> List["Post"]:
        """Получение постов автора, новые сверху"""
        result = await self.session.execute(
            select(PostModel)
            .where(PostModel.author_id == author_id)
            .order_by(PostModel.updated_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self.to_domain(db_post) for db_post in result.scalars().all()]

    async def get_slugs_with_prefix(self, author_id: uuid.UUID, prefix: str) -> List[str]:
        """Slug'и автора, начинающиеся с префикса"""
        result = await self.session.execute(
            select(PostModel.slug).where(
                and_(
                    PostModel.author_id == author_id,
                    PostModel.slug.startswith(prefix, autoescape=True)
                )
            )
        )
        return list(result.scalars().all())

    async def update(self, post: "Post") -> "Post":
        """Обновление поста"""
        db_post = await self.session.get(PostModel, post.uuid)
        if db_post is None:
            raise ValueError("Post not found")

        db_post.title = post.title
        db_post.excerpt = post.excerpt
        db_post.content = post.content
        db_post.cover_image = post.cover_image
        db_post.published = post.published
        db_post.published_at = post.published_at
        db_post.updated_at = post.updated_at

        await self.session.flush()
        await self.session.refresh(db_post)
        return self.to_domain(db_post)

    async def delete(self, post_uuid: uuid.UUID) -> bool:
        """Удаление поста"""
        result = await self.session.execute(delete(PostModel).where(PostModel.uuid == post_uuid))
        return result.rowcount > 0

    @staticmethod
    def to_domain(db_post: PostModel) -> "Post":
        """Преобразование модели БД в доменную сущность"""
        from chronicle.domains.posts.entities import Post

        return Post(
            uuid=db_post.uuid,
            author_id=db_post.author_id,
            title=db_post.title,
            slug=db_post.slug,
            excerpt=db_post.excerpt,
            content=db_post.content,
            cover_image=db_post.cover_image,
            view_count=db_post.view_count,
            published=db_post.published,
            published_at=db_post.published_at,
            created_at=db_post.created_at,
            updated_at=db_post.updated_at
        )
