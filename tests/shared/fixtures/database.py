"""
Database fixtures for persistence tests.

Two backends are provided:

- ``sqlite_engine`` / ``db_session``: a file-backed SQLite database per
  test (aiosqlite). Fast and always available; used by default.
- ``postgres_container`` / ``pg_engine`` / ``pg_session_maker``: an
  ephemeral PostgreSQL from Testcontainers for tests that depend on real
  row locking. Only tests marked ``@pytest.mark.integration`` use these.

Usage:
    async def test_something(db_session):
        repo = AccountRepositorySQLAlchemy(db_session)
        await repo.save(CreateAccount(account))
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

from bondarys_auth.persistence.sqlalchemy import Base
from bondarys_identity.infrastructure.persistence.sqlalchemy import (
    create_engine_for,
    create_tables,
)

# Use same Postgres version as production
POSTGRES_IMAGE = "postgres:16-alpine"


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path):
    """Engine on a fresh SQLite file with the full schema."""
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'bondarys.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(sqlite_engine):
    """
    Provide an isolated database session for each test.

    Uncommitted changes are rolled back after the test; the database file
    itself is discarded with ``tmp_path``.
    """
    session_maker = async_sessionmaker(
        sqlite_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture(scope="session")
def postgres_container():
    """
    Start a PostgreSQL container for the test session.

    The container is shared across all tests in the session for performance.
    """
    with PostgresContainer(POSTGRES_IMAGE, driver="asyncpg") as postgres:
        yield postgres


@pytest_asyncio.fixture
async def pg_engine(postgres_container):
    """Engine on the container with a clean schema for each test."""
    engine = create_async_engine(
        postgres_container.get_connection_url(),
        echo=False,
        poolclass=NullPool,  # Avoid sharing connections across event loops
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await create_tables(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def pg_session_maker(pg_engine):
    return async_sessionmaker(pg_engine, class_=AsyncSession, expire_on_commit=False)
