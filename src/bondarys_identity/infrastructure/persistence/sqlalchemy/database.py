"""Engine creation and schema management."""

import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from bondarys_auth.persistence.sqlalchemy import Base

# Registers the identity tables on Base.metadata
from bondarys_identity.infrastructure.persistence.sqlalchemy import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_engine_for(url: str) -> AsyncEngine:
    """Create the async engine for ``url``.

    For file-based SQLite the parent directory is created first.
    """
    if url.startswith("sqlite") and ":memory:" not in url:
        db_path = url.split("///")[-1]
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring all database tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema is up to date (missing tables created if needed)")
