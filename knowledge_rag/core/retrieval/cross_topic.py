"""
Cross-topic merger.

Runs hybrid retrieval for every topic concurrently with one shared query
embedding, then merges and re-ranks the results globally. Ranking is purely
by relevance; no topic is guaranteed a slot.

Dependencies: knowledge_rag.core.retrieval.hybrid_retriever
System role: Multi-topic retrieval for the RAG core
"""

import asyncio
import logging
import math

from knowledge_rag.core.retrieval.hybrid_retriever import HybridRetriever, validate_scope
from knowledge_rag.models.retrieval import RetrievalResult

logger = logging.getLogger(__name__)


class CrossTopicMerger:
    """Concurrent per-topic retrieval with global re-ranking."""

    def __init__(self, retriever: HybridRetriever) -> None:
        self._retriever = retriever

    async def retrieve_across_topics(
        self,
        query: str,
        org_id: str,
        topic_ids: list[str],
        per_topic_k: int = 10,
        top_k: int = 8,
        similarity_threshold: float = 0.35,
    ) -> list[RetrievalResult]:
        """
        Retrieve and merge results across topics.

        Args:
            query: User question
            org_id: Organization scope
            topic_ids: Topics to search, in caller order
            per_topic_k: Results kept per topic before merging
            top_k: Results kept after the global merge
            similarity_threshold: Minimum cosine similarity for any candidate

        Returns:
            list[RetrievalResult]: Globally ranked results

        Raises:
            InvalidQueryError: Invalid scope or query
            ProviderError: Embedding or any per-topic retrieval failed
            ChunkStoreError: Any per-topic store search failed
        """
        topic_ids = validate_scope(query, org_id, topic_ids)
        topic_order = {topic_id: i for i, topic_id in enumerate(topic_ids)}

        logger.info(f"{__name__}:retrieve_across_topics - Step 1: Embedding query once for {len(topic_ids)} topics")
        query_embedding = await self._retriever.embed_query(query)

        tasks = [
            asyncio.ensure_future(
                self._retriever.retrieve(
                    query,
                    org_id,
                    [topic_id],
                    top_k=per_topic_k,
                    similarity_threshold=similarity_threshold,
                    query_embedding=query_embedding,
                )
            )
            for topic_id in topic_ids
        ]
        try:
            per_topic = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error(f"{__name__}:retrieve_across_topics - Step 2 FAILED: per-topic retrieval error")
            raise

        merged = [result for results in per_topic for result in results]
        merged.sort(
            key=lambda r: (
                -r.fused_score,
                r.vector_rank if r.vector_rank is not None else math.inf,
                topic_order.get(r.topic_id, len(topic_order)),
                r.chunk_id,
            )
        )
        logger.info(
            f"{__name__}:retrieve_across_topics - Step 2 OK: merged {len(merged)} results, keeping {min(top_k, len(merged))}"
        )
        return merged[:top_k]
