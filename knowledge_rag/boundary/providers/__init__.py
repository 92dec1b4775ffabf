"""
AI provider boundary layer.

- EmbeddingProvider / GeminiEmbeddingProvider: text → fixed-dimension vectors
- CompletionProvider / GeminiCompletionProvider: grounded prompt → answer text or stream

Dependencies: langchain_google_genai
System role: Provider adapters injected into the RAG core
"""

from knowledge_rag.boundary.providers.completion_provider import (
    CompletionProvider,
    CompletionRequest,
    GeminiCompletionProvider,
)
from knowledge_rag.boundary.providers.embedding_provider import (
    EmbeddingProvider,
    EmbeddingTaskType,
    GeminiEmbeddingProvider,
)

__all__ = [
    "CompletionProvider",
    "CompletionRequest",
    "GeminiCompletionProvider",
    "EmbeddingProvider",
    "EmbeddingTaskType",
    "GeminiEmbeddingProvider",
]
