from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from chronicle.core.config import settings
from chronicle.db.repositories.user_repository import UserRepository
from chronicle.domains.identity.entities import AuthorWithPosts, User
from chronicle.domains.identity.schemas import UserCreate


class AuthorDirectoryService:
    """Справочник авторов: handle, имя и аватар по автору"""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repository = UserRepository(session)
    
    async def register_author(self, user_data: UserCreate) -> User:
        """Регистрация нового автора"""
        if user_data.username and await self.user_repository.username_exists(user_data.username):
            raise ValueError("Username already taken")
        
        user = User.create_user(
            name=user_data.name,
            username=user_data.username,
            image=user_data.image,
            bio=user_data.bio
        )
        
        return await self.user_repository.create(user)
    
    async def get_author_by_handle(self, handle: str) -> Optional[User]:
        """Получение автора по handle"""
        return await self.user_repository.get_by_username(handle)
    
    async def authors_with_published_counts(self, limit: Optional[int] = None) -> List[AuthorWithPosts]:
        """Авторы с числом опубликованных постов для фильтра поиска"""
        if limit is None:
            limit = settings.author_facet_limit
        limit = max(1, min(limit, settings.author_facet_limit))
        
        return await self.user_repository.get_authors_with_published_counts(limit)
