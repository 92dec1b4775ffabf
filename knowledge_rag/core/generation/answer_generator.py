"""
Answer generator.

Retrieves context for a question (single topic or cross-topic), assembles a
citation-numbered context block and asks the completion provider for a
grounded answer, synchronously or as a stream. When nothing relevant is
found, a fixed answer is returned without calling the provider.

Dependencies: knowledge_rag.core.retrieval, knowledge_rag.core.context_assembler,
    knowledge_rag.boundary.providers
System role: RAG answer orchestration
"""

import logging

from knowledge_rag.boundary.chunk_store.chunk_store import ChunkStore
from knowledge_rag.boundary.providers.completion_provider import (
    CompletionProvider,
    CompletionRequest,
)
from knowledge_rag.boundary.providers.embedding_provider import EmbeddingProvider
from knowledge_rag.configs.settings import Settings
from knowledge_rag.core.context_assembler import ContextAssembler
from knowledge_rag.core.generation.prompts import build_messages, build_system_prompt
from knowledge_rag.core.generation.streaming import AnswerStream, single_fragment
from knowledge_rag.core.retrieval.cross_topic import CrossTopicMerger
from knowledge_rag.core.retrieval.hybrid_retriever import HybridRetriever, validate_scope
from knowledge_rag.models.retrieval import (
    AnswerMode,
    AnswerResult,
    AssembledContext,
    ConversationTurn,
    RetrievalResult,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_INFORMATION_ANSWER = (
    "I couldn't find relevant information in your knowledge base to answer that question. "
    "Try rephrasing it or selecting a different topic."
)


class AnswerGenerator:
    """
    Grounded answer generation over hybrid retrieval.

    More than one topic id routes retrieval through the CrossTopicMerger;
    a single topic uses the HybridRetriever directly.
    """

    def __init__(
        self,
        retriever: HybridRetriever,
        completion_provider: CompletionProvider,
        assembler: ContextAssembler | None = None,
        merger: CrossTopicMerger | None = None,
        top_k: int = 5,
        similarity_threshold: float = 0.5,
        per_topic_k: int = 10,
        cross_topic_top_k: int = 8,
        cross_topic_similarity_threshold: float = 0.35,
        normal_max_output_tokens: int = 1500,
        operational_max_output_tokens: int = 500,
        stream_queue_size: int = 32,
    ) -> None:
        self._retriever = retriever
        self._completion_provider = completion_provider
        self._assembler = assembler or ContextAssembler()
        self._merger = merger or CrossTopicMerger(retriever)
        self._top_k = top_k
        self._similarity_threshold = similarity_threshold
        self._per_topic_k = per_topic_k
        self._cross_topic_top_k = cross_topic_top_k
        self._cross_topic_similarity_threshold = cross_topic_similarity_threshold
        self._max_output_tokens = {
            AnswerMode.NORMAL: normal_max_output_tokens,
            AnswerMode.OPERATIONAL: operational_max_output_tokens,
        }
        self._stream_queue_size = stream_queue_size

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        embedding_provider: EmbeddingProvider,
        completion_provider: CompletionProvider,
        chunk_store: ChunkStore,
    ) -> "AnswerGenerator":
        """Wire retriever, merger and assembler from application settings."""
        retrieval = settings.retrieval
        retriever = HybridRetriever.from_settings(embedding_provider, chunk_store, retrieval)
        return cls(
            retriever=retriever,
            completion_provider=completion_provider,
            assembler=ContextAssembler(
                max_chars=retrieval.max_context_chars,
                dedup_overlap_threshold=retrieval.dedup_overlap_threshold,
            ),
            merger=CrossTopicMerger(retriever),
            top_k=retrieval.top_k,
            similarity_threshold=retrieval.similarity_threshold,
            per_topic_k=retrieval.per_topic_k,
            cross_topic_top_k=retrieval.cross_topic_top_k,
            cross_topic_similarity_threshold=retrieval.cross_topic_similarity_threshold,
            normal_max_output_tokens=settings.providers.normal_max_output_tokens,
            operational_max_output_tokens=settings.providers.operational_max_output_tokens,
        )

    async def retrieve(self, query: str, org_id: str, topic_ids: list[str]) -> list[RetrievalResult]:
        """Route to single-topic or cross-topic retrieval."""
        topic_ids = validate_scope(query, org_id, topic_ids)
        if len(topic_ids) > 1:
            return await self._merger.retrieve_across_topics(
                query,
                org_id,
                topic_ids,
                per_topic_k=self._per_topic_k,
                top_k=self._cross_topic_top_k,
                similarity_threshold=self._cross_topic_similarity_threshold,
            )
        return await self._retriever.retrieve(
            query,
            org_id,
            topic_ids,
            top_k=self._top_k,
            similarity_threshold=self._similarity_threshold,
        )

    async def _prepare(
        self,
        query: str,
        org_id: str,
        topic_ids: list[str],
        conversation_history: list[ConversationTurn] | None,
        mode: AnswerMode,
    ) -> tuple[AssembledContext, CompletionRequest | None]:
        """Retrieve, assemble and build the completion request (None when no sources)."""
        logger.info(f"{__name__}:_prepare - Step 1: Retrieving for {len(topic_ids or [])} topic(s), mode={mode.value}")
        results = await self.retrieve(query, org_id, topic_ids)

        context = self._assembler.assemble(results)
        if not context.used_sources:
            logger.info(f"{__name__}:_prepare - Step 2: No relevant content, skipping completion")
            return context, None

        multi_topic = len({s.topic_id for s in context.used_sources}) > 1 or len(set(topic_ids)) > 1
        request = CompletionRequest(
            system_prompt=build_system_prompt(mode, multi_topic=multi_topic),
            messages=build_messages(context.context_block, query, conversation_history),
            max_output_tokens=self._max_output_tokens[mode],
        )
        logger.info(
            f"{__name__}:_prepare - Step 2 OK: {len(context.used_sources)} sources, "
            f"context_len={len(context.context_block)}, history={len(conversation_history or [])}"
        )
        return context, request

    async def generate_sync(
        self,
        query: str,
        org_id: str,
        topic_ids: list[str],
        conversation_history: list[ConversationTurn] | None = None,
        mode: AnswerMode = AnswerMode.NORMAL,
    ) -> AnswerResult:
        """
        Generate a complete answer.

        Args:
            query: User question
            org_id: Organization scope
            topic_ids: Topic scope (more than one uses cross-topic retrieval)
            conversation_history: Prior turns, oldest first
            mode: Answer mode

        Returns:
            AnswerResult: Answer and the sources it was grounded on

        Raises:
            InvalidQueryError: Invalid scope or query
            ProviderError: Embedding or completion failed
            ChunkStoreError: Store search failed
        """
        context, request = await self._prepare(query, org_id, topic_ids, conversation_history, mode)
        if request is None:
            return AnswerResult(answer=INSUFFICIENT_INFORMATION_ANSWER, sources=[])

        answer = await self._completion_provider.complete(request)
        logger.info(f"{__name__}:generate_sync - Step 3 OK: answer_len={len(answer)}")
        return AnswerResult(answer=answer, sources=context.used_sources)

    async def generate_stream(
        self,
        query: str,
        org_id: str,
        topic_ids: list[str],
        conversation_history: list[ConversationTurn] | None = None,
        mode: AnswerMode = AnswerMode.NORMAL,
    ) -> AnswerStream:
        """
        Generate an answer as a stream of text fragments.

        Retrieval runs before this returns, so errors up to that point raise
        here and `stream.sources` is known before the first fragment.

        Returns:
            AnswerStream: Single-use fragment stream

        Raises:
            InvalidQueryError: Invalid scope or query
            ProviderError: Query embedding failed
            ChunkStoreError: Store search failed
        """
        context, request = await self._prepare(query, org_id, topic_ids, conversation_history, mode)
        if request is None:
            return AnswerStream(
                [],
                single_fragment(INSUFFICIENT_INFORMATION_ANSWER),
                max_queue_size=self._stream_queue_size,
            )

        return AnswerStream(
            context.used_sources,
            lambda: self._completion_provider.stream(request),
            max_queue_size=self._stream_queue_size,
        )
