from chronicle.domains.identity.entities import User, AuthorSummary, AuthorWithPosts
from chronicle.domains.identity.schemas import (
    UserCreate, AuthorSummaryResponse, AuthorWithPostsResponse
)
from chronicle.domains.identity.services import AuthorDirectoryService

__all__ = [
    "User", "AuthorSummary", "AuthorWithPosts",
    "UserCreate", "AuthorSummaryResponse", "AuthorWithPostsResponse",
    "AuthorDirectoryService"
]
