"""Shared fixtures: an in-memory SQLite database and an ASGI test client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ADMIN_USERNAME", "pickteum1")
os.environ.setdefault("ADMIN_PASSWORD", "test-password")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import timedelta  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import app.models  # noqa: E402,F401
from app.clock import utcnow  # noqa: E402
from app.db.postgres import get_session, make_engine  # noqa: E402
from app.db.storage import MediaStorageClient, get_media_storage  # noqa: E402
from app.main import create_app  # noqa: E402
from app.models import Article, ArticleStatus, Category  # noqa: E402
from app.services.category_service import CategoryService  # noqa: E402


@pytest.fixture
async def engine():
    engine = make_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def categories(session) -> dict[str, Category]:
    """The seeded default categories, by name."""
    service = CategoryService(session)
    await service.seed_defaults()
    return {category.name: category for category in await service.list_categories()}


@pytest.fixture
def make_article(session):
    """Insert an article directly, bypassing the authoring rules."""
    counter = {"n": 0}

    async def _make(
        title: str | None = None,
        status: ArticleStatus = ArticleStatus.PUBLISHED,
        published_at=None,
        category: Category | None = None,
        **fields,
    ) -> Article:
        counter["n"] += 1
        n = counter["n"]
        if published_at is None and status is ArticleStatus.PUBLISHED:
            # Older articles first so higher n means newer
            published_at = utcnow() - timedelta(hours=1000 - n)
        article = Article(
            title=title or f"Article {n}",
            slug=fields.pop("slug", f"article-{n}"),
            content=fields.pop("content", f"<p>Body {n}</p>"),
            author=fields.pop("author", "tester"),
            status=status.value,
            published_at=published_at,
            category_id=category.id if category else None,
            **fields,
        )
        session.add(article)
        await session.commit()
        await session.refresh(article)
        return article

    return _make


@pytest.fixture
def storage():
    """Object store double; uploads return a predictable public URL."""
    client = MagicMock(spec=MediaStorageClient)
    client.upload = AsyncMock(side_effect=lambda key, body, content_type: f"https://media.test/{key}")
    client.delete = AsyncMock(return_value=None)
    return client


@pytest.fixture
async def client(session_factory, storage):
    app = create_app()

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_media_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def admin_headers(client) -> dict[str, str]:
    response = await client.post(
        "/api/admin/login", json={"username": "pickteum1", "password": "test-password"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
