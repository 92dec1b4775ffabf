"""
Conversation CRUD operations.

Dependencies: sqlalchemy, knowledge_rag.boundary.db.models
System role: Conversation persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_rag.boundary.db.base import utc_now
from knowledge_rag.boundary.db.CRUD.base_crud import BaseCRUD
from knowledge_rag.boundary.db.models.conversation_model import ConversationModel


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """CRUD operations for ConversationModel with per-user scoping."""

    def __init__(self) -> None:
        super().__init__(ConversationModel)

    async def create_conversation(
        self,
        session: AsyncSession,
        user_id: str,
        org_id: str,
        topic_ids: list[str],
        title: str,
    ) -> ConversationModel:
        return await self.create(
            session,
            user_id=user_id,
            org_id=org_id,
            topic_ids=list(topic_ids),
            title=title,
        )

    async def get_for_user(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: str,
        org_id: str | None = None,
    ) -> ConversationModel | None:
        """
        Retrieve a conversation only if it belongs to the user.

        Args:
            session: Async database session
            id: Conversation UUID
            user_id: Requesting user
            org_id: Requesting organization, checked when given

        Returns:
            ConversationModel if found and owned by user_id, None otherwise
        """
        stmt = select(ConversationModel).where(
            ConversationModel.id == id,
            ConversationModel.user_id == user_id,
        )
        if org_id is not None:
            stmt = stmt.where(ConversationModel.org_id == org_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int | None = None,
        org_id: str | None = None,
    ) -> Sequence[ConversationModel]:
        """List a user's conversations, most recently updated first."""
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.user_id == user_id)
            .order_by(ConversationModel.updated_at.desc())
        )
        if org_id is not None:
            stmt = stmt.where(ConversationModel.org_id == org_id)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def touch(self, session: AsyncSession, id: UUID) -> ConversationModel | None:
        """Bump updated_at after a new message."""
        return await self.update_by_id(session, id, updated_at=utc_now())


conversation_crud = ConversationCRUD()
