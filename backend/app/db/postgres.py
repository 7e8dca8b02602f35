"""PostgreSQL database connection and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.config import get_settings

settings = get_settings()


def make_engine(url: str, **kwargs) -> AsyncEngine:
    """
    Create an async engine for the article database.

    Connections are pinged on checkout: the scheduler keeps the process
    alive across idle periods in which the server may drop connections.
    """
    kwargs.setdefault("echo", settings.debug)
    kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, **kwargs)


engine = make_engine(settings.database_url)

# Sessions outlive their commits: services return the objects they saved
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Create the article, category and media tables."""
    # Register table models on the metadata before create_all
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
