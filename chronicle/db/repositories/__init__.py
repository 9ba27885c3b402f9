from chronicle.db.repositories.user_repository import UserRepository
from chronicle.db.repositories.post_repository import PostRepository
from chronicle.db.repositories.search_repository import SearchRepository

__all__ = [
    "UserRepository",
    "PostRepository",
    "SearchRepository"
]
