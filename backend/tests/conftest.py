"""
Pytest fixtures for testing.
"""
import os

# Settings are read at import time; give the app a key and a throwaway database
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import pytest
import pytest_asyncio
from datetime import datetime
from typing import AsyncGenerator, Callable

from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import app.database
from app.database import Base
import app.services.identity
# Import ALL models so Base.metadata knows about all tables
from app.models import Application, Credential, Job, User, UserRole  # noqa: F401

# Now import app (after we can override database)
from app.main import app as fastapi_app
from app.services import user_directory
from app.services.access_policy import Identity, RequestContext
from app.services.identity import issue_session_token
from app.services.store import DocumentStore


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Cheapest bcrypt cost; hashing at the production cost dominates test time
app.services.identity.BCRYPT_ROUNDS = 4

DEFAULT_PASSWORD = "correct-horse"


@pytest.fixture
def default_password() -> str:
    """Password every fixture user signs up with."""
    return DEFAULT_PASSWORD


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps a single connection alive so every session sees the
    # same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test database
    original_engine = app.database.engine
    original_sessionmaker = app.database.AsyncSessionLocal

    app.database.engine = test_engine
    app.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = app.database.AsyncSessionLocal()

    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        app.database.engine = original_engine
        app.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def store(db: AsyncSession) -> DocumentStore:
    return DocumentStore(db)


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Anonymous HTTP client.

    Redirects are not followed: soft denials are asserted on the 303 itself.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=False,
    ) as client:
        yield client


@pytest_asyncio.fixture
async def client_for(db: AsyncSession) -> AsyncGenerator[Callable[[User], AsyncClient], None]:
    """
    Factory for clients signed in as a given user.

    Each call returns a separate client carrying that user's session cookie,
    so one test can act as several users.
    """
    clients: list[AsyncClient] = []

    def _client_for(user: User) -> AsyncClient:
        client = AsyncClient(
            transport=ASGITransport(app=fastapi_app),
            base_url="http://test",
            follow_redirects=False,
        )
        token = issue_session_token(Identity(uid=user.uid, email=user.email))
        client.cookies.set("auth_token", token)
        clients.append(client)
        return client

    yield _client_for

    for client in clients:
        await client.aclose()


def context_for(user: User) -> RequestContext:
    """Request context of a signed-in user, for calling services directly."""
    return RequestContext(identity=Identity(uid=user.uid, email=user.email), role=user.role)


@pytest.fixture
def ctx_for() -> Callable[[User], RequestContext]:
    return context_for


@pytest_asyncio.fixture
async def student(store: DocumentStore) -> User:
    return await user_directory.signup(
        store,
        email="student@example.com",
        password=DEFAULT_PASSWORD,
        role=UserRole.STUDENT,
        name="Sam Student",
        phone="555-0101",
    )


@pytest_asyncio.fixture
async def other_student(store: DocumentStore) -> User:
    return await user_directory.signup(
        store,
        email="student2@example.com",
        password=DEFAULT_PASSWORD,
        role=UserRole.STUDENT,
        name="Riley Student",
        phone="555-0102",
    )


@pytest_asyncio.fixture
async def employer(store: DocumentStore) -> User:
    return await user_directory.signup(
        store,
        email="employer@example.com",
        password=DEFAULT_PASSWORD,
        role=UserRole.EMPLOYER,
        name="Erin Employer",
        phone="555-0201",
        company="Cafe X",
    )


@pytest_asyncio.fixture
async def other_employer(store: DocumentStore) -> User:
    return await user_directory.signup(
        store,
        email="employer2@example.com",
        password=DEFAULT_PASSWORD,
        role=UserRole.EMPLOYER,
        name="Ezra Employer",
        phone="555-0202",
        company="Bakery Y",
    )


@pytest_asyncio.fixture
async def admin(store: DocumentStore) -> User:
    return await user_directory.create_admin(
        store,
        email="admin@example.com",
        password=DEFAULT_PASSWORD,
        name="Ada Admin",
        phone="555-0301",
    )


@pytest.fixture
def job_fields() -> dict:
    return {
        "title": "Barista",
        "company": "Cafe X",
        "location": "Downtown",
        "description": "Pull espresso shots and keep the bar running.",
        "requirements": "Morning availability\nCustomer service experience",
        "salary": "$18/hr",
        "employment_type": "part-time",
    }


@pytest.fixture
def backdate(db: AsyncSession) -> Callable:
    """
    Move a record's updated_at into the past, bypassing the store.

    Lets a test assert that a later write strictly advances the timestamp
    regardless of clock resolution. Returns the backdated value.
    """
    past = datetime(2020, 1, 1)

    async def _backdate(model, record_id: str) -> datetime:
        key = model.__mapper__.primary_key[0]
        await db.execute(
            update(model)
            .where(key == record_id)
            .values(updated_at=past)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return past

    return _backdate
