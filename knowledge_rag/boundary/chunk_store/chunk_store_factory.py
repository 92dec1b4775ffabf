"""
Chunk store factory.

Selects PostgresChunkStore or InMemoryChunkStore based on settings.

Dependencies: knowledge_rag.configs, knowledge_rag.boundary.db.connection
System role: Chunk store construction for dependency wiring
"""

import logging

from knowledge_rag.boundary.chunk_store.chunk_store import ChunkStore
from knowledge_rag.boundary.chunk_store.memory_chunk_store import InMemoryChunkStore
from knowledge_rag.boundary.chunk_store.postgres_chunk_store import PostgresChunkStore
from knowledge_rag.boundary.db.connection import get_async_session_factory
from knowledge_rag.configs import get_settings

logger = logging.getLogger(__name__)


def get_chunk_store(store_type: str | None = None) -> ChunkStore:
    """
    Build the configured chunk store.

    Args:
        store_type: Override for settings.retrieval.store_type ("postgres" or "memory")

    Returns:
        ChunkStore: Configured store instance

    Raises:
        ValueError: If the store type is unknown
    """
    store_type = store_type or get_settings().retrieval.store_type

    if store_type == "memory":
        logger.info(f"{__name__}:get_chunk_store - Using in-memory chunk store")
        return InMemoryChunkStore()
    if store_type == "postgres":
        logger.info(f"{__name__}:get_chunk_store - Using PostgreSQL chunk store")
        return PostgresChunkStore(get_async_session_factory())

    raise ValueError(f"Unknown chunk store type: {store_type}")
