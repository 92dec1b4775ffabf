"""
CRUD operations for the conversation store.

Exports CRUD classes and singleton instances.
"""

from knowledge_rag.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_rag.boundary.db.CRUD.conversation_crud import ConversationCRUD, conversation_crud
from knowledge_rag.boundary.db.CRUD.message_crud import MessageCRUD, message_crud

__all__ = [
    "BaseCRUD",
    "ConversationCRUD",
    "MessageCRUD",
    "conversation_crud",
    "message_crud",
]
