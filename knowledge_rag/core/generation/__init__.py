"""Grounded answer generation: prompts, streaming channel and generator."""

from knowledge_rag.core.generation.answer_generator import (
    INSUFFICIENT_INFORMATION_ANSWER,
    AnswerGenerator,
)
from knowledge_rag.core.generation.streaming import STREAM_ERROR_MARKER, AnswerStream

__all__ = [
    "INSUFFICIENT_INFORMATION_ANSWER",
    "STREAM_ERROR_MARKER",
    "AnswerGenerator",
    "AnswerStream",
]
