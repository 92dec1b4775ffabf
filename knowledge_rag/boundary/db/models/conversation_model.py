"""
Conversation ORM model.

A conversation belongs to one user within one organization and is scoped to
the topic ids the user chatted against.

Dependencies: sqlalchemy, knowledge_rag.boundary.db.base
System role: Conversation persistence for chat history
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from knowledge_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owning user
        org_id: Owning organization
        topic_ids: Topic scope the conversation was started with
        title: Short title derived from the first user message
        messages: Ordered message log (cascade delete)
    """

    __tablename__ = "conversations"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    org_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    topic_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="New conversation")

    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="MessageModel.position",
    )
