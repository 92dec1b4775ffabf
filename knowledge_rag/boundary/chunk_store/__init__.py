"""Chunk storage with topic-scoped hybrid search."""

from knowledge_rag.boundary.chunk_store.chunk_schemas import (
    ChunkRecord,
    HybridSearchQuery,
    HybridSearchRow,
)
from knowledge_rag.boundary.chunk_store.chunk_store import ChunkStore
from knowledge_rag.boundary.chunk_store.memory_chunk_store import InMemoryChunkStore
from knowledge_rag.boundary.chunk_store.postgres_chunk_store import PostgresChunkStore

__all__ = [
    "ChunkRecord",
    "ChunkStore",
    "HybridSearchQuery",
    "HybridSearchRow",
    "InMemoryChunkStore",
    "PostgresChunkStore",
]
