"""
Domain models shared across the RAG core, services and API.
"""

from knowledge_rag.models.retrieval import (
    AnswerMode,
    AnswerResult,
    AssembledContext,
    ConversationTurn,
    RetrievalResult,
    Source,
)

__all__ = [
    "AnswerMode",
    "AnswerResult",
    "AssembledContext",
    "ConversationTurn",
    "RetrievalResult",
    "Source",
]
