"""
RestBuddy: Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── registry:         default_registry() with User and Post
    ├── db_engine:        in-memory SQLite (aiosqlite + StaticPool), tables created
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── seeded:           four users and three posts committed
    ├── app_factory:      create_app() with the session dependency overridden
    ├── make_client:      HTTPX AsyncClient for an app built with given options
    └── test_client:      make_client() with default options, already open
"""

import os

# Override settings for testing BEFORE any restbuddy imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CREATE_TABLES"] = "false"

from datetime import datetime, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from restbuddy.database import Base, get_db_session
from restbuddy.main import create_app
from restbuddy.models import Post, User, default_registry
from restbuddy.schemas.options import DispatcherOptions


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def users_schema(registry):
    return registry.resolve("users")


@pytest.fixture
def posts_schema(registry):
    return registry.resolve("posts")


@pytest_asyncio.fixture
async def db_engine():
    """
    One in-memory database per test.

    StaticPool keeps a single connection, so every session opened during
    the test sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def seeded(session_factory):
    """
    Users (id, name, age, active):
        1 Alice 30 True | 2 Bob 25 False | 3 Carol 41 True | 4 Dave None True
    Posts (id, user_id, status):
        1 → 1 published | 2 → 1 draft | 3 → 2 published
    """
    async with session_factory() as session:
        session.add_all([
            User(id=1, name="Alice", email="alice@example.com", age=30, active=True,
                 created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            User(id=2, name="Bob", email="bob@example.com", age=25, active=False,
                 created_at=datetime(2024, 1, 2, tzinfo=timezone.utc)),
            User(id=3, name="Carol", email="carol@example.com", age=41, active=True,
                 created_at=datetime(2024, 1, 3, tzinfo=timezone.utc)),
            User(id=4, name="Dave", email="dave@example.com", age=None, active=True,
                 created_at=datetime(2024, 1, 4, tzinfo=timezone.utc)),
        ])
        await session.flush()
        session.add_all([
            Post(id=1, user_id=1, title="Hello", body="First post", status="published"),
            Post(id=2, user_id=1, title="Draft", body="", status="draft"),
            Post(id=3, user_id=2, title="Bob's post", body="Hi", status="published"),
        ])
        await session.commit()


@pytest.fixture
def app_factory(session_factory):
    """
    Builds an app whose session dependency uses the test database.

    Usage:
        app = app_factory(DispatcherOptions(max_items=2))
    """

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def build(options: Optional[DispatcherOptions] = None):
        app = create_app(default_registry(), options)
        app.dependency_overrides[get_db_session] = override_get_db_session
        return app

    return build


@pytest.fixture
def make_client(app_factory):
    """
    Usage:
        async with make_client(options) as client:
            response = await client.get("/users")
    """

    def build(options: Optional[DispatcherOptions] = None, app=None) -> AsyncClient:
        app = app if app is not None else app_factory(options)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return build


@pytest_asyncio.fixture
async def test_client(make_client, seeded):
    async with make_client() as client:
        yield client
