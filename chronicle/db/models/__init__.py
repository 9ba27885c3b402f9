from chronicle.db.models.user import User
from chronicle.db.models.post import Post
from chronicle.db.models.search import SearchTerm

__all__ = [
    "User",
    "Post",
    "SearchTerm"
]
