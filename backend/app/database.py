"""
Async database engine and session factory.

The engine is the document store backend: SQLite (aiosqlite) in development
and tests, PostgreSQL (asyncpg) in production.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.config import settings

# SQLite-specific connection arguments
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_async_engine(settings.database_url, echo=settings.debug, connect_args=connect_args)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    # Looked up at call time so tests can swap the sessionmaker
    async with AsyncSessionLocal() as session:
        yield session
