"""
Chunk store contract.

Dependencies: knowledge_rag.boundary.chunk_store.chunk_schemas
System role: Abstract chunk store consumed by retrieval and indexing
"""

from typing import Protocol, runtime_checkable

from knowledge_rag.boundary.chunk_store.chunk_schemas import (
    ChunkRecord,
    HybridSearchQuery,
    HybridSearchRow,
)


@runtime_checkable
class ChunkStore(Protocol):
    """Chunk persistence with topic-scoped hybrid search."""

    async def search(self, query: HybridSearchQuery) -> list[HybridSearchRow]:
        """Return vector and full-text candidates for one topic, pre-limited."""
        ...

    async def insert_chunks(self, chunks: list[ChunkRecord]) -> int:
        """Store chunks and return how many were written."""
        ...

    async def delete_document_chunks(self, document_id: str) -> int:
        """Delete every chunk of a document."""
        ...

    async def delete_topic_chunks(self, topic_id: str) -> int:
        """Delete every chunk of a topic."""
        ...
