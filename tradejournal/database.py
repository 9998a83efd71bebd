"""Database engine and session management."""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from tradejournal.config import settings


def make_engine(url: str) -> AsyncEngine:
    """Build an async engine. SQLite journals are shared across request tasks."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_async_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(settings.database_url)

async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Base class for all journal models."""

    pass


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create any missing tables. Production schemas are managed by alembic."""
    # Import for side effect: registers every model on Base.metadata
    import tradejournal.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency that provides a database session."""
    async with async_session() as session:
        yield session
