"""
Retrieval and answer domain models.

Pydantic models flowing through the RAG core: ranked retrieval results,
citation sources, assembled context, answers and conversation turns.

Dependencies: pydantic
System role: Type definitions shared by retrieval, assembly and generation
"""

from enum import Enum

from pydantic import BaseModel, Field


class AnswerMode(str, Enum):
    """Answer style requested by the caller."""

    NORMAL = "normal"
    OPERATIONAL = "operational"


class RetrievalResult(BaseModel):
    """Single ranked chunk returned by hybrid retrieval."""

    chunk_id: str = Field(description="Chunk identifier")
    document_id: str = Field(description="Parent document identifier")
    topic_id: str = Field(description="Topic the chunk belongs to")
    chunk_text: str = Field(description="Chunk text content")
    chunk_index: int = Field(default=0, description="Position of the chunk in its document")
    document_title: str = Field(default="Untitled", description="Parent document title")
    topic_title: str | None = Field(default=None, description="Topic title, when known")
    similarity: float = Field(description="Cosine similarity to the query (0.0-1.0)")
    text_rank: float = Field(default=0.0, description="Lexical relevance score")
    vector_rank: int | None = Field(
        default=None,
        description="1-based position in the vector candidate list",
    )
    lexical_rank: int | None = Field(
        default=None,
        description="1-based position in the full-text candidate list",
    )
    fused_score: float = Field(default=0.0, description="Reciprocal rank fusion score")


class Source(BaseModel):
    """Citation for a chunk included in the answer context."""

    citation_index: int = Field(ge=1, description="Inline citation marker number [n]")
    chunk_id: str = Field(description="Chunk identifier")
    document_id: str = Field(description="Source document identifier")
    document_title: str = Field(description="Source document title")
    chunk_text: str = Field(description="Chunk text used as context")
    topic_id: str = Field(description="Topic identifier")
    topic_title: str | None = Field(default=None, description="Topic title, when known")
    fused_score: float = Field(default=0.0, description="Fused retrieval score")
    similarity: float = Field(default=0.0, description="Cosine similarity to the query")


class AssembledContext(BaseModel):
    """Context block handed to the answer generator."""

    context_block: str = Field(description="Formatted context with [n] citation markers")
    used_sources: list[Source] = Field(
        default_factory=list,
        description="Sources actually included in the context block",
    )


class AnswerResult(BaseModel):
    """Synchronous answer with the sources it was grounded on."""

    answer: str = Field(description="Generated (or fixed fallback) answer text")
    sources: list[Source] = Field(default_factory=list, description="Cited sources")


class ConversationTurn(BaseModel):
    """One prior message in a conversation."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
    sources: list[Source] = Field(default_factory=list, description="Sources of an assistant turn")
