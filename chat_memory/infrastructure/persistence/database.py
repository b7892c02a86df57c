"""
Database configuration for chat memory service.

Provides:
- Database initialization (init_database, init_db, close_db)
- Session factory access (get_session_factory)
"""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .models import Base
from ...core.errors import DatabaseError

logger = logging.getLogger("chat-memory.infrastructure.persistence.database")

engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker] = None


def to_async_url(database_url: str) -> str:
    """
    Convert a plain SQLAlchemy URL to its async driver variant.

    sqlite:/// -> sqlite+aiosqlite:///, postgresql:// -> postgresql+asyncpg://
    """
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def create_engine_for(database_url: str, **engine_kwargs) -> AsyncEngine:
    """
    Create async engine, configuring SQLite pragmas when needed.

    Args:
        database_url: SQLAlchemy database URL (plain or async)
        **engine_kwargs: Extra create_async_engine arguments (e.g. poolclass)
    """
    async_db_url = to_async_url(database_url)

    if async_db_url.startswith("sqlite+aiosqlite:///"):
        db_path = async_db_url.replace("sqlite+aiosqlite:///", "", 1)
        if db_path and db_path != ":memory:":
            # Ensure data directory exists for SQLite
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    new_engine = create_async_engine(async_db_url, echo=False, **engine_kwargs)

    if "sqlite" in async_db_url:
        @event.listens_for(new_engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable FK cascades and WAL for concurrent readers"""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=30000")  # 30 seconds
            cursor.close()

        logger.info("SQLite foreign keys and WAL mode configured")

    return new_engine


def init_database(database_url: str, **engine_kwargs) -> async_sessionmaker:
    """
    Initialize database engine and session maker.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Async session factory
    """
    global engine, async_session_maker

    engine = create_engine_for(database_url, **engine_kwargs)
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    logger.info(f"Database initialized with URL: {database_url}")
    return async_session_maker


def get_session_factory() -> async_sessionmaker:
    """Get the initialized session factory"""
    if async_session_maker is None:
        raise DatabaseError(
            operation="get_session_factory",
            reason="Database not initialized. Call init_database() first."
        )
    return async_session_maker


async def init_db():
    """Initialize database (create tables)"""
    if engine is None:
        raise DatabaseError(
            operation="init_db",
            reason="Database not initialized. Call init_database() first."
        )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema initialized")


async def close_db():
    """Close database connections"""
    global engine, async_session_maker

    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")

    engine = None
    async_session_maker = None
