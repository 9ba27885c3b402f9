from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
import uuid

from chronicle.db.models.post import Post as PostModel
from chronicle.db.models.user import User as UserModel

if TYPE_CHECKING:
    from chronicle.domains.identity.entities import AuthorSummary, AuthorWithPosts, User


class UserRepository:
    """Репозиторий для работы с авторами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: "User") -> "User":
        """Создание нового автора"""
        db_user = UserModel(
            uuid=user.uuid,
            name=user.name,
            username=user.username,
            image=user.image,
            bio=user.bio
        )

        self.session.add(db_user)
        try:
            await self.session.commit()
            await self.session.refresh(db_user)
            return self.to_domain(db_user)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("User with this username already exists")

    async def get_by_uuid(self, user_uuid: uuid.UUID) -> Optional["User"]:
        """Получение автора по UUID"""
        db_user = await self.session.get(UserModel, user_uuid)
        return self.to_domain(db_user) if db_user else None

    async def get_by_username(self, username: str) -> Optional["User"]:
        """Получение автора по handle"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.username == username)
        )
        db_user = result.scalar_one_or_none()
        return self.to_domain(db_user) if db_user else None

    async def username_exists(self, username: str) -> bool:
        """Проверка существования handle"""
        result = await self.session.execute(
            select(UserModel.uuid).where(UserModel.username == username)
        )
        return result.scalar_one_or_none() is not None

    async def get_authors_with_published_counts(self, limit: int = 50) -> List["AuthorWithPosts"]:
        """Авторы с числом опубликованных постов, по убыванию числа"""
        from chronicle.domains.identity.entities import AuthorWithPosts

        post_count = func.count(PostModel.uuid).label("post_count")
        result = await self.session.execute(
            select(UserModel.username, UserModel.name, UserModel.image, post_count)
            .join(PostModel, PostModel.author_id == UserModel.uuid)
            .where(PostModel.published.is_(True), UserModel.username.is_not(None))
            .group_by(UserModel.uuid, UserModel.username, UserModel.name, UserModel.image)
            .order_by(post_count.desc(), UserModel.username.asc())
            .limit(limit)
        )

        return [
            AuthorWithPosts(handle=username, name=name, avatar=image, count=count)
            for username, name, image, count in result.all()
        ]

    @staticmethod
    def to_domain(db_user: UserModel) -> "User":
        """Преобразование модели БД в доменную сущность"""
        from chronicle.domains.identity.entities import User

        return User(
            uuid=db_user.uuid,
            name=db_user.name,
            username=db_user.username,
            image=db_user.image,
            bio=db_user.bio,
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )

    @staticmethod
    def to_summary(db_user: UserModel) -> "AuthorSummary":
        """Краткая проекция автора для выдачи"""
        from chronicle.domains.identity.entities import AuthorSummary

        return AuthorSummary(
            id=db_user.uuid,
            name=db_user.name,
            handle=db_user.username,
            avatar=db_user.image
        )
