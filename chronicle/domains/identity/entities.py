import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


class User:
    """Сущность автора домена Identity"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        name: str,
        username: Optional[str] = None,
        image: Optional[str] = None,
        bio: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.name = name
        self.username = username
        self.image = image
        self.bio = bio
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or datetime.now(timezone.utc)
    
    @property
    def handle(self) -> Optional[str]:
        return self.username
    
    @classmethod
    def create_user(
        cls,
        name: str,
        username: Optional[str] = None,
        image: Optional[str] = None,
        bio: Optional[str] = None
    ) -> "User":
        """Создание нового автора"""
        return cls(
            uuid=uuid.uuid4(),
            name=name,
            username=username,
            image=image,
            bio=bio
        )
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.uuid == other.uuid
    
    def __repr__(self) -> str:
        return f"User(uuid={self.uuid}, username={self.username})"


@dataclass(frozen=True)
class AuthorSummary:
    """Минимальная проекция автора для отображения рядом с постом"""
    id: uuid.UUID
    name: str
    handle: Optional[str]
    avatar: Optional[str]


@dataclass(frozen=True)
class AuthorWithPosts:
    """Строка агрегата для фильтра по автору"""
    handle: str
    name: str
    avatar: Optional[str]
    count: int
