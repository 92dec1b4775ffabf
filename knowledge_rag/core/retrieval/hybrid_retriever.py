"""
Hybrid retriever.

Embeds the query once, runs one vector + full-text store search per topic,
applies the similarity floor, fuses ranks with RRF and returns the top_k
results in a deterministic total order.

Dependencies: knowledge_rag.boundary.providers, knowledge_rag.boundary.chunk_store
System role: Retrieval business logic for the RAG core
"""

import asyncio
import logging

from knowledge_rag.boundary.chunk_store.chunk_schemas import HybridSearchQuery
from knowledge_rag.boundary.chunk_store.chunk_store import ChunkStore
from knowledge_rag.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_rag.configs.retrieval import RetrievalSettings
from knowledge_rag.core.exceptions import InvalidQueryError
from knowledge_rag.core.retrieval.fusion import DEFAULT_RRF_K, fuse_rows
from knowledge_rag.models.retrieval import RetrievalResult

logger = logging.getLogger(__name__)


def validate_scope(query_text: str, org_id: str, topic_ids: list[str] | None) -> list[str]:
    """
    Reject queries that must never reach a provider or store.

    Returns:
        list[str]: Topic ids with duplicates removed, order preserved

    Raises:
        InvalidQueryError: Blank query, blank org id, or missing topic ids
    """
    if not query_text or not query_text.strip():
        raise InvalidQueryError("Query text must not be empty", field="query")
    if not org_id or not org_id.strip():
        raise InvalidQueryError("Organization id is required", field="org_id")
    if not topic_ids:
        raise InvalidQueryError("At least one topic id is required", field="topic_ids")
    if any(not t or not t.strip() for t in topic_ids):
        raise InvalidQueryError("Topic ids must not be blank", field="topic_ids")
    return list(dict.fromkeys(topic_ids))


class HybridRetriever:
    """
    Topic-scoped hybrid retrieval over a chunk store.

    Holds no per-query state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        chunk_store: ChunkStore,
        vector_candidates: int = 20,
        fts_candidates: int = 20,
        rrf_k: int = DEFAULT_RRF_K,
        vector_weight: float = 1.0,
        lexical_weight: float = 1.0,
    ) -> None:
        """
        Initialize retriever.

        Args:
            embedding_provider: Provider used for query embeddings
            chunk_store: Store that runs per-topic hybrid searches
            vector_candidates: Vector candidates requested per topic
            fts_candidates: Full-text candidates requested per topic
            rrf_k: RRF smoothing constant
            vector_weight: Weight of the vector rank term
            lexical_weight: Weight of the lexical rank term
        """
        self._embedding_provider = embedding_provider
        self._chunk_store = chunk_store
        self._vector_candidates = vector_candidates
        self._fts_candidates = fts_candidates
        self._rrf_k = rrf_k
        self._vector_weight = vector_weight
        self._lexical_weight = lexical_weight

    @classmethod
    def from_settings(
        cls,
        embedding_provider: EmbeddingProvider,
        chunk_store: ChunkStore,
        settings: RetrievalSettings,
    ) -> "HybridRetriever":
        return cls(
            embedding_provider,
            chunk_store,
            vector_candidates=settings.vector_candidates,
            fts_candidates=settings.fts_candidates,
            rrf_k=settings.rrf_k,
            vector_weight=settings.vector_weight,
            lexical_weight=settings.lexical_weight,
        )

    async def embed_query(self, query_text: str) -> list[float]:
        return await self._embedding_provider.embed(query_text, "query")

    async def retrieve(
        self,
        query_text: str,
        org_id: str,
        topic_ids: list[str],
        top_k: int = 5,
        similarity_threshold: float = 0.5,
        query_embedding: list[float] | None = None,
    ) -> list[RetrievalResult]:
        """
        Retrieve the top_k chunks for a query within an organization's topics.

        Args:
            query_text: User question
            org_id: Organization scope (always enforced)
            topic_ids: Topic scope, at least one
            top_k: Number of results to return
            similarity_threshold: Minimum cosine similarity for any candidate
            query_embedding: Precomputed query embedding (skips the embed call)

        Returns:
            list[RetrievalResult]: Ranked results, empty when nothing matches

        Raises:
            InvalidQueryError: Invalid scope or query, before any upstream call
            ProviderError: Query embedding failed
            ChunkStoreError: Store search failed
        """
        topic_ids = validate_scope(query_text, org_id, topic_ids)
        if top_k < 1:
            raise InvalidQueryError("top_k must be at least 1", field="top_k")
        if not 0.0 <= similarity_threshold <= 1.0:
            raise InvalidQueryError(
                "similarity_threshold must be between 0 and 1",
                field="similarity_threshold",
            )

        if query_embedding is None:
            logger.info(f"{__name__}:retrieve - Step 1: Embedding query (len={len(query_text)})")
            query_embedding = await self.embed_query(query_text)

        logger.info(f"{__name__}:retrieve - Step 2: Searching {len(topic_ids)} topic(s) for org {org_id}")
        tasks = [
            asyncio.ensure_future(
                self._chunk_store.search(
                    HybridSearchQuery(
                        query_embedding=query_embedding,
                        query_text=query_text,
                        org_id=org_id,
                        topic_id=topic_id,
                        vector_limit=self._vector_candidates,
                        fts_limit=self._fts_candidates,
                        final_limit=self._vector_candidates + self._fts_candidates,
                        similarity_threshold=similarity_threshold,
                    )
                )
            )
            for topic_id in topic_ids
        ]
        try:
            row_lists = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error(f"{__name__}:retrieve - Step 2 FAILED: chunk store search error")
            raise

        rows = [row for row_list in row_lists for row in row_list]

        results = fuse_rows(
            rows,
            similarity_threshold,
            k=self._rrf_k,
            vector_weight=self._vector_weight,
            lexical_weight=self._lexical_weight,
        )[:top_k]
        logger.info(f"{__name__}:retrieve - Step 3 OK: {len(rows)} candidates, returning {len(results)}")
        return results
