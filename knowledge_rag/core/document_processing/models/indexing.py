"""
Document indexing models.

Dependencies: pydantic
System role: Input and result types for DocumentIndexer
"""

from pydantic import BaseModel, Field


class DocumentInput(BaseModel):
    """Extracted document text handed to the indexer."""

    document_id: str = Field(description="Document identifier")
    org_id: str = Field(description="Owning organization ID")
    topic_id: str = Field(description="Topic the document belongs to")
    title: str = Field(default="Untitled", description="Document title")
    content: str = Field(description="Extracted plain text")
    document_type: str = Field(default="text", description="Document type (pdf, text, ...)")


class IndexingResult(BaseModel):
    """Outcome of indexing a single document."""

    document_id: str
    success: bool
    chunk_count: int = 0
    error: str | None = None


class TopicReprocessResult(BaseModel):
    """Outcome of re-indexing every document of a topic."""

    topic_id: str
    processed: int = Field(default=0, description="Documents indexed successfully")
    failed: int = Field(default=0, description="Documents that failed to index")
    results: list[IndexingResult] = Field(default_factory=list)
