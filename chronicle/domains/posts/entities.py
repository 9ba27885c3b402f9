import uuid
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post:
    """Сущность поста домена Posts"""
    
    def __init__(
        self,
        uuid: uuid.UUID,
        author_id: uuid.UUID,
        title: str,
        slug: str,
        content: str,
        excerpt: Optional[str] = None,
        cover_image: Optional[str] = None,
        view_count: int = 0,
        published: bool = False,
        published_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.author_id = author_id
        self.title = title
        self.slug = slug
        self.content = content
        self.excerpt = excerpt
        self.cover_image = cover_image
        self.view_count = view_count
        self.published = published
        self.published_at = published_at
        self.created_at = created_at or _utcnow()
        self.updated_at = updated_at or _utcnow()
    
    def update_content(
        self,
        title: str,
        content: str,
        excerpt: Optional[str] = None,
        cover_image: Optional[str] = None
    ) -> bool:
        """Обновление содержимого; возвращает True, если изменились индексируемые поля"""
        excerpt = excerpt or None
        searchable_changed = (
            title != self.title or content != self.content or excerpt != self.excerpt
        )
        
        self.title = title
        self.content = content
        self.excerpt = excerpt
        self.cover_image = cover_image or None
        self.updated_at = _utcnow()
        
        return searchable_changed
    
    def publish(self, at: Optional[datetime] = None) -> None:
        """Публикация поста"""
        self.published = True
        self.published_at = at or _utcnow()
        self.updated_at = _utcnow()
    
    def unpublish(self) -> None:
        """Снятие поста с публикации"""
        self.published = False
        self.updated_at = _utcnow()
    
    @classmethod
    def create_post(
        cls,
        author_id: uuid.UUID,
        title: str,
        slug: str,
        content: str,
        excerpt: Optional[str] = None,
        cover_image: Optional[str] = None
    ) -> "Post":
        """Создание нового черновика"""
        return cls(
            uuid=uuid.uuid4(),
            author_id=author_id,
            title=title,
            slug=slug,
            content=content,
            excerpt=excerpt or None,
            cover_image=cover_image or None,
            published=False
        )
    
    def __eq__(self, other) -> bool:
        if not isinstance(other, Post):
            return False
        return self.uuid == other.uuid
    
    def __repr__(self) -> str:
        return f"Post(uuid={self.uuid}, slug={self.slug}, published={self.published})"
