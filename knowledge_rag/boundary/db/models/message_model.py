"""
Message ORM model.

Append-only chat message log entry. Position is assigned on append and
defines creation order within a conversation.

Dependencies: sqlalchemy, knowledge_rag.boundary.db.base
System role: Message persistence for chat history
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from knowledge_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Attributes:
        conversation_id: Parent conversation
        position: 1-based order within the conversation
        role: "user", "assistant" or "system"
        content: Message text
        sources: Serialized Source list for assistant answers
    """

    __tablename__ = "messages"
    __table_args__ = (UniqueConstraint("conversation_id", "position"),)

    conversation_id: Mapped[UUID] = mapped_column(
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sources: Mapped[list | None] = mapped_column(JSON, nullable=True, default=None)

    conversation = relationship("ConversationModel", back_populates="messages")
