from chronicle.domains.posts.entities import Post
from chronicle.domains.posts.schemas import PostBase, PostCreate, PostUpdate, PostResponse
from chronicle.domains.posts.services import PostService

__all__ = [
    "Post",
    "PostBase", "PostCreate", "PostUpdate", "PostResponse",
    "PostService"
]
