"""Shared test fixtures for the couple_quiz package."""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from couple_quiz.application.seed_users.use_case import SeedUsersUseCase
from couple_quiz.domain.models.user import User
from couple_quiz.infrastructure.db.orm import Base
from couple_quiz.infrastructure.db.repositories.user_repository_pg import PostgresUserRepository

# One in-memory SQLite database per test; StaticPool keeps it on a single connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def mock_users():
    """Async mock user repository for unit tests."""
    return AsyncMock()


@pytest.fixture
def mock_questions():
    """Async mock question repository for unit tests."""
    return AsyncMock()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
async def test_session(test_session_factory):
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def partners(test_session) -> tuple[User, User]:
    """Both seeded users, ordered (Shivam, Shreya)."""
    users = await SeedUsersUseCase(PostgresUserRepository(test_session)).execute()
    await test_session.commit()
    by_name = {u.username: u for u in users}
    return by_name["Shivam"], by_name["Shreya"]
