"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - ConversationModel, MessageModel: Conversation store entities
  - conversation_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, knowledge_rag.configs
System role: Persistent conversation log for the chat service
"""

from knowledge_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from knowledge_rag.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
)
from knowledge_rag.boundary.db.models import ConversationModel, MessageModel
from knowledge_rag.boundary.db.CRUD import (
    BaseCRUD,
    ConversationCRUD,
    MessageCRUD,
    conversation_crud,
    message_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_engine",
    "get_async_session_factory",
    "ConversationModel",
    "MessageModel",
    "BaseCRUD",
    "ConversationCRUD",
    "MessageCRUD",
    "conversation_crud",
    "message_crud",
]
