from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional
import re
import uuid

# Зарезервированные handle, совпадающие с маршрутами сайта
RESERVED_USERNAMES = frozenset({
    "admin", "api", "auth", "dashboard", "edit", "new",
    "onboarding", "search", "settings", "sign-in", "sign-out",
})

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")


class UserCreate(BaseModel):
    """Схема для создания автора"""
    name: str = Field(..., min_length=1, max_length=100)
    username: Optional[str] = Field(None, min_length=3, max_length=20)
    image: Optional[str] = Field(None, max_length=2048)
    bio: Optional[str] = Field(None, max_length=500)
    
    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if v is None:
            return v
        if not USERNAME_PATTERN.match(v):
            raise ValueError('Username can only contain letters, numbers, and underscores')
        if v.lower() in RESERVED_USERNAMES:
            raise ValueError('This username is reserved')
        return v


class AuthorSummaryResponse(BaseModel):
    """Схема для краткой информации об авторе"""
    id: uuid.UUID
    name: str
    handle: Optional[str] = None
    avatar: Optional[str] = None
    
    model_config = ConfigDict(from_attributes=True)


class AuthorWithPostsResponse(BaseModel):
    """Схема для автора с числом опубликованных постов"""
    handle: str
    name: str
    avatar: Optional[str] = None
    count: int
    
    model_config = ConfigDict(from_attributes=True)
