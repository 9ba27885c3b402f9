"""Shared test fixtures: environment, a temporary database and data builders."""

from datetime import datetime, timedelta, timezone
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from chronicle.core.db import init_models
from chronicle.db.repositories.post_repository import PostRepository
from chronicle.db.repositories.user_repository import UserRepository
from chronicle.domains.identity.entities import User
from chronicle.domains.posts.entities import Post
from chronicle.domains.posts.services import normalize_slug
from chronicle.domains.search.indexer import SearchIndexer


BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
NOW = BASE_TIME + timedelta(days=400)


def day(n: int) -> datetime:
    """Publication instant n days after BASE_TIME."""
    return BASE_TIME + timedelta(days=n)


@pytest.fixture()
async def engine(tmp_path):
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chronicle.db'}")
    await init_models(db_engine)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def session(session_factory):
    async with session_factory() as db_session:
        yield db_session


async def create_author(
    session: AsyncSession,
    handle: str | None = "writer",
    name: str = "Writer",
    image: str | None = None,
) -> User:
    user = User.create_user(name=name, username=handle, image=image)
    return await UserRepository(session).create(user)


async def create_post(
    session: AsyncSession,
    author: User,
    title: str,
    body: str = "",
    excerpt: str | None = None,
    published_at: datetime | None = None,
    published: bool = True,
    post_id: uuid.UUID | None = None,
) -> Post:
    """Insert a post and its search document in one transaction."""
    post = Post.create_post(
        author_id=author.uuid,
        title=title,
        slug=f"{normalize_slug(title) or 'post'}-{uuid.uuid4().hex[:8]}",
        content=body,
        excerpt=excerpt,
    )
    if post_id is not None:
        post.uuid = post_id
    if published:
        post.publish(at=published_at or BASE_TIME)

    created = await PostRepository(session).create(post)
    await SearchIndexer(session).index_on_write(created.uuid, created.title, created.excerpt, created.content)
    await session.commit()
    return created


@pytest.fixture()
async def author(session):
    return await create_author(session, handle="writer", name="Writer")
