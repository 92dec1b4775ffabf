"""ORM models for the conversation store."""

from knowledge_rag.boundary.db.models.conversation_model import ConversationModel
from knowledge_rag.boundary.db.models.message_model import MessageModel

__all__ = ["ConversationModel", "MessageModel"]
