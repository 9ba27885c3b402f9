from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from chronicle.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"
    
    name = Column(String(100), nullable=False)
    username = Column(String(20), unique=True, index=True, nullable=True)
    image = Column(String(2048), nullable=True)
    bio = Column(Text, nullable=True)
    
    # Relationships
    posts = relationship("Post", back_populates="author", cascade="all, delete-orphan")
