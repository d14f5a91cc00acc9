"""Shared pytest fixtures for all test domains."""

from tests.shared.fixtures.database import (
    db_session,
    pg_engine,
    pg_session_maker,
    postgres_container,
    sqlite_engine,
)
from tests.shared.fixtures.factories import TestAccountFactory

__all__ = [
    "TestAccountFactory",
    "db_session",
    "pg_engine",
    "pg_session_maker",
    "postgres_container",
    "sqlite_engine",
]
