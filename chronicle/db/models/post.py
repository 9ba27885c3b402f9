from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, UUID, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from chronicle.db.base import BaseModel


class Post(BaseModel):
    __tablename__ = "posts"
    __table_args__ = (
        UniqueConstraint("author_id", "slug", name="post_author_slug_uq"),
        Index("post_published_idx", "published", "published_at"),
    )
    
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.uuid", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    slug = Column(String(255), nullable=False)
    excerpt = Column(String(300), nullable=True)
    content = Column(Text, nullable=False)
    cover_image = Column(String(2048), nullable=True)
    view_count = Column(Integer, default=0, nullable=False)
    published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    
    # Relationships
    author = relationship("User", back_populates="posts")
    search_terms = relationship("SearchTerm", back_populates="post", cascade="all, delete-orphan")
