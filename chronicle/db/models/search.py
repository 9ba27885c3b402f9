from sqlalchemy import Column, String, Integer, ForeignKey, UUID, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from chronicle.db.base import BaseModel


class SearchTerm(BaseModel):
    """Строка инвертированного индекса: частота терма в одной зоне поста"""
    __tablename__ = "search_terms"
    __table_args__ = (
        UniqueConstraint("post_id", "term", "zone", name="search_term_post_zone_uq"),
        Index("search_term_term_idx", "term", "post_id"),
    )
    
    post_id = Column(UUID(as_uuid=True), ForeignKey("posts.uuid", ondelete="CASCADE"), nullable=False)
    term = Column(String(100), nullable=False)
    zone = Column(String(1), nullable=False)
    frequency = Column(Integer, nullable=False)
    
    # Relationships
    post = relationship("Post", back_populates="search_terms")
