"""
Test suite for InMemoryChunkStore.

System role: Verification of the development chunk store
"""

import pytest

from knowledge_rag.boundary.chunk_store import ChunkRecord, HybridSearchQuery, InMemoryChunkStore
from knowledge_rag.boundary.chunk_store.memory_chunk_store import tokenize


def make_chunk(
    chunk_id: str,
    text: str,
    embedding: list[float],
    org_id: str = "org-1",
    topic_id: str = "topic-a",
    document_id: str = "doc-1",
) -> ChunkRecord:
    return ChunkRecord(
        id=chunk_id,
        org_id=org_id,
        document_id=document_id,
        topic_id=topic_id,
        chunk_text=text,
        chunk_index=0,
        embedding=embedding,
        metadata={"documentTitle": "Handbook"},
    )


def make_query(text: str, embedding: list[float], **kwargs) -> HybridSearchQuery:
    params = {"org_id": "org-1", "topic_id": "topic-a", "similarity_threshold": 0.5}
    params.update(kwargs)
    return HybridSearchQuery(query_embedding=embedding, query_text=text, **params)


@pytest.fixture
async def store() -> InMemoryChunkStore:
    """Provide store holding chunks of two orgs and two topics."""
    store = InMemoryChunkStore(topic_titles={"topic-a": "HR Policies"})
    await store.insert_chunks([
        make_chunk("refund", "Refund requests are processed within 14 days.", [1.0, 0.0, 0.0]),
        make_chunk("vacation", "Vacation days accrue monthly.", [0.6, 0.8, 0.0]),
        make_chunk("parking", "Parking permits are issued by facilities.", [0.0, 0.0, 1.0]),
        make_chunk("other-topic", "Refund requests for vendors.", [1.0, 0.0, 0.0], topic_id="topic-b"),
        make_chunk("other-org", "Refund requests elsewhere.", [1.0, 0.0, 0.0], org_id="org-2"),
    ])
    return store


class TestInMemoryChunkStoreSearch:
    """Test suite for InMemoryChunkStore.search()."""

    @pytest.mark.asyncio
    async def test_search_should_scope_to_org_and_topic(self, store) -> None:
        """Test chunks from other orgs or topics are never returned."""
        rows = await store.search(make_query("refund requests", [1.0, 0.0, 0.0], similarity_threshold=0.0))

        assert {r.chunk_id for r in rows} <= {"refund", "vacation", "parking"}

    @pytest.mark.asyncio
    async def test_search_should_rank_vector_candidates_by_similarity(self, store) -> None:
        """Test vector ranks follow cosine similarity and respect the threshold."""
        # Act
        rows = await store.search(make_query("xyz", [1.0, 0.0, 0.0], similarity_threshold=0.5))

        # Assert
        by_id = {r.chunk_id: r for r in rows}
        assert by_id["refund"].vector_rank == 1
        assert by_id["vacation"].vector_rank == 2
        assert by_id["refund"].similarity == pytest.approx(1.0)
        assert by_id["vacation"].similarity == pytest.approx(0.6)
        assert "parking" not in by_id

    @pytest.mark.asyncio
    async def test_search_should_add_lexical_candidates(self, store) -> None:
        """Test a chunk sharing query terms is a lexical candidate even with low similarity."""
        # Act
        rows = await store.search(make_query("parking permits", [1.0, 0.0, 0.0]))

        # Assert
        parking = next(r for r in rows if r.chunk_id == "parking")
        assert parking.lexical_rank == 1
        assert parking.vector_rank is None
        assert parking.similarity == pytest.approx(0.0, abs=1e-6)

    @pytest.mark.asyncio
    async def test_search_should_label_titles(self, store) -> None:
        """Test rows carry document title from metadata and registered topic title."""
        rows = await store.search(make_query("refund", [1.0, 0.0, 0.0]))

        assert rows[0].document_title == "Handbook"
        assert rows[0].topic_title == "HR Policies"

    @pytest.mark.asyncio
    async def test_search_should_respect_final_limit(self, store) -> None:
        """Test at most final_limit rows are returned."""
        rows = await store.search(make_query("refund vacation parking", [1.0, 0.0, 0.0], final_limit=1))

        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_search_should_return_empty_for_unknown_topic(self, store) -> None:
        """Test an empty scope yields no rows."""
        assert await store.search(make_query("refund", [1.0, 0.0, 0.0], topic_id="topic-x")) == []


class TestInMemoryChunkStoreMutations:
    """Test suite for insert and delete operations."""

    @pytest.mark.asyncio
    async def test_delete_document_chunks_should_remove_only_that_document(self) -> None:
        """Test document deletion counts and removes only matching chunks."""
        # Arrange
        store = InMemoryChunkStore()
        await store.insert_chunks([
            make_chunk("a", "Alpha", [1.0, 0.0], document_id="doc-1"),
            make_chunk("b", "Beta", [1.0, 0.0], document_id="doc-2"),
        ])

        # Act
        deleted = await store.delete_document_chunks("doc-1")

        # Assert
        assert deleted == 1
        rows = await store.search(make_query("alpha beta", [1.0, 0.0]))
        assert [r.chunk_id for r in rows] == ["b"]

    @pytest.mark.asyncio
    async def test_delete_topic_chunks_should_remove_topic(self, store) -> None:
        """Test topic deletion removes every chunk of the topic."""
        deleted = await store.delete_topic_chunks("topic-a")

        assert deleted == 3
        assert await store.search(make_query("refund", [1.0, 0.0, 0.0])) == []


class TestTokenize:
    """Test suite for tokenize()."""

    def test_tokenize_should_lowercase_and_drop_stopwords(self) -> None:
        """Test stopwords are removed from query terms."""
        assert tokenize("What is the Refund policy?") == ["refund", "policy"]
