"""
Message CRUD operations.

Messages are append-only. Each append takes the next position in the
conversation, so listing by position returns creation order.

Dependencies: sqlalchemy, knowledge_rag.boundary.db.models
System role: Message log persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_rag.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_rag.boundary.db.models.message_model import MessageModel


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel."""

    def __init__(self) -> None:
        super().__init__(MessageModel)

    async def append(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        role: str,
        content: str,
        sources: list[dict[str, Any]] | None = None,
    ) -> MessageModel:
        """
        Append a message at the end of a conversation.

        Args:
            session: Async database session
            conversation_id: Parent conversation UUID
            role: "user", "assistant" or "system"
            content: Message text
            sources: Serialized sources (assistant messages)

        Returns:
            Created MessageModel
        """
        stmt = select(func.coalesce(func.max(MessageModel.position), 0)).where(
            MessageModel.conversation_id == conversation_id
        )
        last_position = (await session.execute(stmt)).scalar_one()
        return await self.create(
            session,
            conversation_id=conversation_id,
            position=last_position + 1,
            role=role,
            content=content,
            sources=sources,
        )

    async def list_by_conversation(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        limit: int | None = None,
        roles: Sequence[str] | None = None,
    ) -> Sequence[MessageModel]:
        """
        List messages in creation order.

        Args:
            session: Async database session
            conversation_id: Parent conversation UUID
            limit: Keep only the most recent N messages (still oldest first)
            roles: Only include messages with these roles

        Returns:
            Sequence of MessageModel ordered by position
        """
        stmt = select(MessageModel).where(MessageModel.conversation_id == conversation_id)
        if roles is not None:
            stmt = stmt.where(MessageModel.role.in_(roles))
        if limit is not None:
            stmt = stmt.order_by(MessageModel.position.desc()).limit(limit)
            result = await session.execute(stmt)
            return list(reversed(result.scalars().all()))

        result = await session.execute(stmt.order_by(MessageModel.position))
        return result.scalars().all()

    async def delete_by_conversation(self, session: AsyncSession, conversation_id: UUID) -> int:
        """Delete every message of a conversation; returns the number removed."""
        stmt = delete(MessageModel).where(MessageModel.conversation_id == conversation_id)
        result = await session.execute(stmt)
        return result.rowcount


message_crud = MessageCRUD()
