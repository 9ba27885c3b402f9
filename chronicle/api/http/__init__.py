from chronicle.api.http.health import router as health_router
from chronicle.api.http.posts import router as posts_router
from chronicle.api.http.search import router as search_router

__all__ = [
    "health_router",
    "posts_router",
    "search_router"
]
