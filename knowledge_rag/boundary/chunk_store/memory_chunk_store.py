"""
In-memory chunk store for local development.

Provides the same interface as PostgresChunkStore. Vector candidates use
numpy cosine similarity; full-text candidates use BM25 over the topic's
chunks, matching only chunks that share a non-stopword term with the query.

Dependencies: numpy, rank_bm25, knowledge_rag.boundary.chunk_store.chunk_schemas
System role: Local chunk store for development RAG
"""

import logging
import re

import numpy as np
from rank_bm25 import BM25Okapi

from knowledge_rag.boundary.chunk_store.chunk_schemas import (
    ChunkRecord,
    HybridSearchQuery,
    HybridSearchRow,
)

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"\w+")

STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "can", "do", "does", "for",
        "from", "how", "i", "in", "is", "it", "of", "on", "or", "our", "that", "the",
        "this", "to", "was", "we", "what", "when", "where", "which", "who", "why",
        "with", "you", "your",
    }
)


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens with stopwords removed."""
    return [t for t in TOKEN_PATTERN.findall(text.lower()) if t not in STOPWORDS]


class InMemoryChunkStore:
    """
    In-memory chunk store.

    Holds chunks and topic titles in process memory. Not shared across
    processes; intended for development and tests.
    """

    def __init__(self, topic_titles: dict[str, str] | None = None) -> None:
        """
        Initialize empty store.

        Args:
            topic_titles: Optional topic_id -> title mapping used to label rows
        """
        self._chunks: list[ChunkRecord] = []
        self._topic_titles = dict(topic_titles or {})

    def set_topic_title(self, topic_id: str, title: str) -> None:
        """Register a topic title for row labelling."""
        self._topic_titles[topic_id] = title

    async def insert_chunks(self, chunks: list[ChunkRecord]) -> int:
        self._chunks.extend(chunks)
        logger.info(f"{__name__}:insert_chunks - Stored {len(chunks)} chunks (total={len(self._chunks)})")
        return len(chunks)

    async def delete_document_chunks(self, document_id: str) -> int:
        before = len(self._chunks)
        self._chunks = [c for c in self._chunks if c.document_id != document_id]
        return before - len(self._chunks)

    async def delete_topic_chunks(self, topic_id: str) -> int:
        before = len(self._chunks)
        self._chunks = [c for c in self._chunks if c.topic_id != topic_id]
        return before - len(self._chunks)

    async def search(self, query: HybridSearchQuery) -> list[HybridSearchRow]:
        """
        Hybrid search within one organization and topic.

        Args:
            query: Hybrid search parameters

        Returns:
            list[HybridSearchRow]: Union of vector and full-text candidates,
            ordered by best individual rank and truncated to final_limit
        """
        scoped = [
            c for c in self._chunks
            if c.org_id == query.org_id and c.topic_id == query.topic_id
        ]
        if not scoped:
            return []

        similarities = self._cosine_similarities(scoped, query.query_embedding)

        vector_order = sorted(
            (i for i in range(len(scoped)) if similarities[i] >= query.similarity_threshold),
            key=lambda i: (-similarities[i], scoped[i].id),
        )[: query.vector_limit]
        vector_ranks = {i: rank for rank, i in enumerate(vector_order, start=1)}

        text_scores, lexical_order = self._lexical_candidates(scoped, query.query_text)
        lexical_order = lexical_order[: query.fts_limit]
        lexical_ranks = {i: rank for rank, i in enumerate(lexical_order, start=1)}

        candidates = set(vector_ranks) | set(lexical_ranks)
        missing = len(scoped) + 1

        def best_rank(i: int) -> tuple[int, int, str]:
            v = vector_ranks.get(i, missing)
            f = lexical_ranks.get(i, missing)
            return (min(v, f), v, scoped[i].id)

        rows = []
        for i in sorted(candidates, key=best_rank)[: query.final_limit]:
            chunk = scoped[i]
            rows.append(
                HybridSearchRow(
                    chunk_id=chunk.id,
                    chunk_text=chunk.chunk_text,
                    chunk_index=chunk.chunk_index,
                    document_id=chunk.document_id,
                    topic_id=chunk.topic_id,
                    document_title=chunk.document_title,
                    topic_title=self._topic_titles.get(chunk.topic_id),
                    similarity=float(similarities[i]),
                    text_rank=float(text_scores[i]) if i in lexical_ranks else 0.0,
                    vector_rank=vector_ranks.get(i),
                    lexical_rank=lexical_ranks.get(i),
                )
            )
        return rows

    @staticmethod
    def _cosine_similarities(chunks: list[ChunkRecord], query_embedding: list[float]) -> np.ndarray:
        matrix = np.array([c.embedding for c in chunks], dtype=np.float32)
        q = np.array(query_embedding, dtype=np.float32)
        norms = np.linalg.norm(matrix, axis=1) * (np.linalg.norm(q) + 1e-12) + 1e-12
        return (matrix @ q) / norms

    @staticmethod
    def _lexical_candidates(
        chunks: list[ChunkRecord], query_text: str
    ) -> tuple[list[float], list[int]]:
        """BM25 scores for every chunk plus the ordered indices of matching chunks."""
        query_tokens = tokenize(query_text)
        corpus = [tokenize(c.chunk_text) for c in chunks]
        if not query_tokens or not any(corpus):
            return [0.0] * len(chunks), []

        scores = BM25Okapi(corpus).get_scores(query_tokens).tolist()
        query_terms = set(query_tokens)
        matching = [i for i, tokens in enumerate(corpus) if query_terms & set(tokens)]
        matching.sort(key=lambda i: (-scores[i], chunks[i].id))
        return scores, matching
