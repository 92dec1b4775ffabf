"""Adapters between the conversation store and domain models."""

from knowledge_rag.application.adapters.conversation_history_adapter import (
    ConversationHistoryAdapter,
    message_to_turn,
)

__all__ = ["ConversationHistoryAdapter", "message_to_turn"]
