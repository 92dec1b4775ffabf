"""
PostgreSQL chunk store using pgvector and full-text search.

Hybrid search delegates to the match_documents_hybrid_for_topic SQL function
(see sql/001_document_embeddings.sql), which returns vector and full-text
candidates for one organization and topic. Fusion happens in the retriever.

Dependencies: sqlalchemy (async), asyncpg
System role: Production chunk storage for RAG retrieval
"""

import json
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from knowledge_rag.boundary.chunk_store.chunk_schemas import (
    ChunkRecord,
    HybridSearchQuery,
    HybridSearchRow,
)
from knowledge_rag.core.exceptions import ChunkStoreError

logger = logging.getLogger(__name__)

HYBRID_SEARCH_SQL = text(
    """
    SELECT id, document_id, topic_id, chunk_text, chunk_index,
           document_title, topic_title, similarity, text_rank,
           vector_rank, lexical_rank
    FROM match_documents_hybrid_for_topic(
        CAST(:query_embedding AS vector),
        :query_text,
        :filter_org_id,
        :filter_topic_id,
        :vector_match_count,
        :fts_match_count,
        :final_match_count,
        :similarity_threshold
    )
    """
)

INSERT_CHUNK_SQL = text(
    """
    INSERT INTO document_embeddings
        (id, org_id, document_id, topic_id, chunk_text, chunk_index,
         embedding, section, metadata)
    VALUES
        (CAST(:id AS uuid), :org_id, :document_id, :topic_id, :chunk_text,
         :chunk_index, CAST(:embedding AS vector), :section,
         CAST(:metadata AS jsonb))
    """
)

DELETE_DOCUMENT_SQL = text("DELETE FROM document_embeddings WHERE document_id = :document_id")
DELETE_TOPIC_SQL = text("DELETE FROM document_embeddings WHERE topic_id = :topic_id")


def to_vector_literal(embedding: list[float]) -> str:
    """Format an embedding as a pgvector text literal."""
    return "[" + ",".join(repr(float(v)) for v in embedding) + "]"


class PostgresChunkStore:
    """
    Chunk store backed by the document_embeddings table.

    Each operation opens its own session from the injected factory, so the
    store can be shared across concurrent per-topic searches.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """
        Initialize store.

        Args:
            session_factory: Async session factory bound to the database engine
        """
        self._session_factory = session_factory

    async def search(self, query: HybridSearchQuery) -> list[HybridSearchRow]:
        """
        Run hybrid search for one organization and topic.

        Args:
            query: Hybrid search parameters

        Returns:
            list[HybridSearchRow]: Candidate rows, pre-limited by the store

        Raises:
            ChunkStoreError: If the database query fails
        """
        params = {
            "query_embedding": to_vector_literal(query.query_embedding),
            "query_text": query.query_text,
            "filter_org_id": query.org_id,
            "filter_topic_id": query.topic_id,
            "vector_match_count": query.vector_limit,
            "fts_match_count": query.fts_limit,
            "final_match_count": query.final_limit,
            "similarity_threshold": query.similarity_threshold,
        }
        try:
            async with self._session_factory() as session:
                result = await session.execute(HYBRID_SEARCH_SQL, params)
                records = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:search - Hybrid search failed for topic {query.topic_id}: {e}")
            raise ChunkStoreError(
                f"Hybrid search failed: {e}",
                operation="search",
                details={"topic_id": query.topic_id},
            ) from e

        return [
            HybridSearchRow(
                chunk_id=str(r["id"]),
                chunk_text=r["chunk_text"],
                chunk_index=r["chunk_index"] or 0,
                document_id=str(r["document_id"]),
                topic_id=str(r["topic_id"]),
                document_title=r["document_title"] or "Untitled",
                topic_title=r["topic_title"],
                similarity=float(r["similarity"]),
                text_rank=float(r["text_rank"] or 0.0),
                vector_rank=r["vector_rank"],
                lexical_rank=r["lexical_rank"],
            )
            for r in records
        ]

    async def insert_chunks(self, chunks: list[ChunkRecord]) -> int:
        """
        Insert chunks in a single transaction.

        Raises:
            ChunkStoreError: If the insert fails
        """
        if not chunks:
            return 0

        rows = [
            {
                "id": chunk.id,
                "org_id": chunk.org_id,
                "document_id": chunk.document_id,
                "topic_id": chunk.topic_id,
                "chunk_text": chunk.chunk_text,
                "chunk_index": chunk.chunk_index,
                "embedding": to_vector_literal(chunk.embedding),
                "section": chunk.section,
                "metadata": json.dumps(chunk.metadata),
            }
            for chunk in chunks
        ]
        try:
            async with self._session_factory() as session:
                await session.execute(INSERT_CHUNK_SQL, rows)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:insert_chunks - Insert failed: {e}")
            raise ChunkStoreError(f"Chunk insert failed: {e}", operation="insert") from e

        logger.info(f"{__name__}:insert_chunks - Inserted {len(rows)} chunks")
        return len(rows)

    async def delete_document_chunks(self, document_id: str) -> int:
        return await self._delete(DELETE_DOCUMENT_SQL, {"document_id": document_id})

    async def delete_topic_chunks(self, topic_id: str) -> int:
        return await self._delete(DELETE_TOPIC_SQL, {"topic_id": topic_id})

    async def _delete(self, statement, params: dict) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement, params)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:_delete - Delete failed for {params}: {e}")
            raise ChunkStoreError(f"Chunk delete failed: {e}", operation="delete", details=params) from e
        return result.rowcount or 0
