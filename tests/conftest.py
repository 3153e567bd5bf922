import os

# Must be set before any application module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database import Base
from models import User


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def users(session_factory):
    """Alice, Bob, Carol and Dave, keyed by lower-case first name."""
    created = {}
    async with session_factory() as session:
        for i, name in enumerate(["Alice", "Bob", "Carol", "Dave"], start=1):
            user = User(
                email=f"{name.lower()}@example.com",
                full_name=f"{name} Example",
                phone_number=f"+1555000000{i}",
                password_hash="not-a-real-hash",
            )
            session.add(user)
            created[name.lower()] = user
        await session.commit()
    return created
