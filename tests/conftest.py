"""
Shared test fixtures and configuration for entire test suite.

Provides: deterministic provider fakes, a recording chunk store, candidate row
builder, in-memory SQLite conversation store
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
from collections.abc import AsyncIterator, Callable

import pytest

from knowledge_rag.boundary.chunk_store.chunk_schemas import (
    ChunkRecord,
    HybridSearchQuery,
    HybridSearchRow,
)
from knowledge_rag.boundary.providers.completion_provider import CompletionRequest
from knowledge_rag.core.exceptions import ChunkStoreError, ProviderError


class FakeEmbeddingProvider:
    """
    Deterministic embedding provider.

    Returns the vector registered for a text, or `default_vector`.
    Set `error` to make every call raise it.
    """

    def __init__(self, dimension: int = 3) -> None:
        self.dimension = dimension
        self.vectors: dict[str, list[float]] = {}
        self.default_vector = [1.0] + [0.0] * (dimension - 1)
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []
        self.batch_calls: list[tuple[list[str], str]] = []

    async def embed(self, text: str, task_type: str) -> list[float]:
        self.calls.append((text, task_type))
        if self.error is not None:
            raise self.error
        return list(self.vectors.get(text, self.default_vector))

    async def embed_batch(self, texts: list[str], task_type: str) -> list[list[float]]:
        self.batch_calls.append((list(texts), task_type))
        if self.error is not None:
            raise self.error
        return [list(self.vectors.get(t, self.default_vector)) for t in texts]


class FakeCompletionProvider:
    """
    Deterministic completion provider.

    `complete` returns the joined fragments; `stream` yields them one by one.
    With `fail_after` set, the stream raises ProviderError after that many
    fragments.
    """

    def __init__(self, fragments: list[str] | None = None) -> None:
        self.fragments = fragments if fragments is not None else [
            "Refunds are issued ",
            "within 14 days ",
            "of purchase [1].",
        ]
        self.fail_after: int | None = None
        self.complete_error: Exception | None = None
        self.fragment_delay: float = 0.0
        self.requests: list[CompletionRequest] = []
        self.complete_calls = 0
        self.stream_calls = 0
        self.stream_closed = False

    @property
    def calls(self) -> int:
        return self.complete_calls + self.stream_calls

    async def complete(self, request: CompletionRequest) -> str:
        self.complete_calls += 1
        self.requests.append(request)
        if self.complete_error is not None:
            raise self.complete_error
        return "".join(self.fragments)

    async def stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        self.stream_calls += 1
        self.requests.append(request)
        try:
            for i, fragment in enumerate(self.fragments):
                if self.fail_after is not None and i >= self.fail_after:
                    raise ProviderError("Upstream dropped", provider="fake", operation="stream")
                if self.fragment_delay:
                    await asyncio.sleep(self.fragment_delay)
                yield fragment
        finally:
            self.stream_closed = True


class FakeChunkStore:
    """
    Chunk store returning configured rows per topic and recording queries.

    Rows belong to `org_id`; other organizations get nothing. Rows are
    returned unfiltered, so the retriever's own similarity floor is what
    gets exercised.
    """

    def __init__(self, org_id: str = "org-1") -> None:
        self.org_id = org_id
        self.rows_by_topic: dict[str, list[HybridSearchRow]] = {}
        self.errors_by_topic: dict[str, Exception] = {}
        self.delay_by_topic: dict[str, float] = {}
        self.queries: list[HybridSearchQuery] = []
        self.cancelled_topics: list[str] = []
        self.inserted: list[ChunkRecord] = []
        self.deleted_documents: list[str] = []
        self.deleted_topics: list[str] = []

    async def search(self, query: HybridSearchQuery) -> list[HybridSearchRow]:
        self.queries.append(query)
        try:
            delay = self.delay_by_topic.get(query.topic_id)
            if delay:
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.cancelled_topics.append(query.topic_id)
            raise
        error = self.errors_by_topic.get(query.topic_id)
        if error is not None:
            raise error
        if query.org_id != self.org_id:
            return []
        return list(self.rows_by_topic.get(query.topic_id, []))

    async def insert_chunks(self, chunks: list[ChunkRecord]) -> int:
        self.inserted.extend(chunks)
        return len(chunks)

    async def delete_document_chunks(self, document_id: str) -> int:
        self.deleted_documents.append(document_id)
        return 0

    async def delete_topic_chunks(self, topic_id: str) -> int:
        self.deleted_topics.append(topic_id)
        return 0


@pytest.fixture
def fake_embedding_provider() -> FakeEmbeddingProvider:
    """Provide deterministic embedding provider."""
    return FakeEmbeddingProvider()


@pytest.fixture
def fake_completion_provider() -> FakeCompletionProvider:
    """Provide deterministic completion provider."""
    return FakeCompletionProvider()


@pytest.fixture
def fake_chunk_store() -> FakeChunkStore:
    """Provide recording chunk store (serves org-1 only)."""
    return FakeChunkStore()


@pytest.fixture
def provider_error() -> ProviderError:
    """Provide a representative upstream provider failure."""
    return ProviderError("Upstream unavailable", provider="fake", operation="embed")


@pytest.fixture
def chunk_store_error() -> ChunkStoreError:
    """Provide a representative chunk store failure."""
    return ChunkStoreError("Search failed", operation="search")


@pytest.fixture
def make_row() -> Callable[..., HybridSearchRow]:
    """Provide builder for hybrid search candidate rows."""

    def _make_row(
        chunk_id: str,
        similarity: float,
        vector_rank: int | None = None,
        lexical_rank: int | None = None,
        topic_id: str = "topic-a",
        document_id: str | None = None,
        chunk_text: str | None = None,
        document_title: str = "Handbook",
        topic_title: str | None = "Policies",
    ) -> HybridSearchRow:
        return HybridSearchRow(
            chunk_id=chunk_id,
            chunk_text=chunk_text or f"Content of {chunk_id}",
            document_id=document_id or f"doc-{chunk_id}",
            topic_id=topic_id,
            document_title=document_title,
            topic_title=topic_title,
            similarity=similarity,
            vector_rank=vector_rank,
            lexical_rank=lexical_rank,
        )

    return _make_row


@pytest.fixture
async def async_engine():
    """
    Create in-memory SQLite async engine with conversation tables.

    Yields:
        AsyncEngine: Engine shared by every session of the test (StaticPool)
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from knowledge_rag.boundary.db.base import Base
    from knowledge_rag.boundary.db import models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    """Provide session factory bound to the in-memory engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Provide a session on the in-memory database.

    Yields:
        AsyncSession: Test database session, rolled back afterwards
    """
    async with session_factory() as session:
        yield session
        await session.rollback()
