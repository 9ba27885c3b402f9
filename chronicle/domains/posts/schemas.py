from pydantic import BaseModel, Field, HttpUrl, field_validator, ConfigDict
from typing import Optional
import uuid
from datetime import datetime


class PostBase(BaseModel):
    """Базовая схема поста"""
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = Field(None, max_length=300)
    cover_image: Optional[HttpUrl] = None
    
    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title is required')
        return v.strip()
    
    @field_validator('excerpt', 'cover_image', mode='before')
    @classmethod
    def empty_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
    
    @property
    def cover_image_url(self) -> Optional[str]:
        return str(self.cover_image) if self.cover_image else None


class PostCreate(PostBase):
    """Схема для создания поста"""
    pass


class PostUpdate(PostBase):
    """Схема для обновления поста"""
    pass


class PostResponse(BaseModel):
    """Схема для ответа с данными поста"""
    uuid: uuid.UUID
    author_id: uuid.UUID
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    view_count: int
    published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)
