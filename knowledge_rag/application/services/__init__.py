"""Application services."""

from knowledge_rag.application.services.chat_service import ChatService, ChatStream, conversation_title

__all__ = ["ChatService", "ChatStream", "conversation_title"]
