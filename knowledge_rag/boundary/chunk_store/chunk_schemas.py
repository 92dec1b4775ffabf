"""
Chunk store schemas.

Pydantic models for chunk store operations (indexed chunks, hybrid queries,
candidate rows). Used for type-safe chunk store interactions.

Dependencies: pydantic
System role: Type definitions for chunk storage and hybrid search
"""

from typing import Any

from pydantic import BaseModel, Field


class ChunkRecord(BaseModel):
    """
    Indexed chunk of a document.

    Every chunk belongs to exactly one document, topic and organization.
    Records are immutable once stored; reprocessing deletes and re-inserts.
    """

    id: str = Field(description="Chunk identifier")
    org_id: str = Field(description="Owning organization ID")
    document_id: str = Field(description="Parent document ID")
    topic_id: str = Field(description="Topic the document belongs to")
    chunk_text: str = Field(description="Chunk text content")
    chunk_index: int = Field(ge=0, description="Position of the chunk in its document")
    embedding: list[float] = Field(description="Document-task embedding vector")
    section: str | None = Field(default=None, description="Section label")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="documentTitle, documentType, totalChunks, chunkingVersion, ...",
    )

    @property
    def document_title(self) -> str:
        """Document title stored in metadata."""
        return self.metadata.get("documentTitle") or "Untitled"


class HybridSearchQuery(BaseModel):
    """Query parameters for one hybrid (vector + full-text) search within a topic."""

    query_embedding: list[float] = Field(description="Query embedding vector")
    query_text: str = Field(description="Raw query text for full-text matching")
    org_id: str = Field(min_length=1, description="Organization filter (always enforced)")
    topic_id: str = Field(min_length=1, description="Topic filter")
    vector_limit: int = Field(default=20, ge=1, description="Vector candidates to consider")
    fts_limit: int = Field(default=20, ge=1, description="Full-text candidates to consider")
    final_limit: int = Field(default=40, ge=1, description="Rows returned by the store")
    similarity_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for vector candidates",
    )


class HybridSearchRow(BaseModel):
    """Single candidate row returned by a hybrid search."""

    chunk_id: str = Field(description="Chunk identifier")
    chunk_text: str = Field(description="Chunk text content")
    chunk_index: int = Field(default=0, description="Position of the chunk in its document")
    document_id: str = Field(description="Parent document ID")
    topic_id: str = Field(description="Topic ID")
    document_title: str = Field(default="Untitled", description="Parent document title")
    topic_title: str | None = Field(default=None, description="Topic title")
    similarity: float = Field(description="Cosine similarity to the query")
    text_rank: float = Field(default=0.0, description="Lexical relevance score")
    vector_rank: int | None = Field(default=None, description="1-based vector candidate rank")
    lexical_rank: int | None = Field(default=None, description="1-based full-text candidate rank")
