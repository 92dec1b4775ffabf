"""
Database connection management.

Provides the cached async SQLAlchemy engine and the session factory used
by the chat service.

Dependencies: sqlalchemy, asyncpg, knowledge_rag.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)

from knowledge_rag.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect stale
    connections early. Cached so every session factory shares one pool.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Args:
        engine: Engine to bind (defaults to the configured engine)

    Returns:
        async_sessionmaker: Factory with autoflush off and expire_on_commit off

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )

