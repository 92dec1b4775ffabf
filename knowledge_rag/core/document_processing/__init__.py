"""
Document processing for indexing.

Chunks extracted document text, embeds it and stores the chunks for
hybrid retrieval.

Dependencies: langchain_text_splitters, pydantic
System role: Indexing pipeline entrypoint
"""

from .document_indexer import DocumentIndexer
from .models import DocumentInput, IndexingResult, TopicReprocessResult
from .tasks import CHUNKING_VERSION, ChunkingTask

__all__ = [
    "CHUNKING_VERSION",
    "ChunkingTask",
    "DocumentIndexer",
    "DocumentInput",
    "IndexingResult",
    "TopicReprocessResult",
]
