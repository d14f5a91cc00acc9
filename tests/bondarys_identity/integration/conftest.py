"""Pytest fixtures for identity persistence tests.

Re-exports the shared database fixtures so that tests below this
directory can request them by name.
"""

from tests.shared.fixtures.database import (
    db_session,
    pg_engine,
    pg_session_maker,
    postgres_container,
    sqlite_engine,
)

__all__ = [
    "db_session",
    "pg_engine",
    "pg_session_maker",
    "postgres_container",
    "sqlite_engine",
]
