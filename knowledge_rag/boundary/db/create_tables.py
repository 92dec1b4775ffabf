"""
Database schema creation script.

Creates the conversation store tables from the ORM models and applies the
chunk store SQL migration (pgvector table plus hybrid search function).

Dependencies: sqlalchemy, asyncpg, knowledge_rag.configs
System role: Database schema initialization

Usage:
    python -m knowledge_rag.boundary.db.create_tables
"""

import asyncio
import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine

from knowledge_rag.boundary.db.base import Base
from knowledge_rag.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from knowledge_rag.boundary.db.models.conversation_model import ConversationModel  # noqa: F401
from knowledge_rag.boundary.db.models.message_model import MessageModel  # noqa: F401

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "chunk_store" / "sql"


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create conversation store tables.

    Idempotent: existing tables remain unchanged.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Conversation tables created")


async def apply_chunk_store_migrations(engine: AsyncEngine | None = None) -> None:
    """
    Apply the chunk store SQL migrations in file-name order.

    Each file may hold several statements, so it runs through the raw
    asyncpg connection rather than a prepared statement.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        raw = await conn.get_raw_connection()
        for path in sorted(MIGRATIONS_DIR.glob("*.sql")):
            await raw.driver_connection.execute(path.read_text(encoding="utf-8"))
            logger.info(f"{__name__}:apply_chunk_store_migrations - Applied {path.name}")


async def main() -> None:
    await create_all_tables()
    await apply_chunk_store_migrations()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
