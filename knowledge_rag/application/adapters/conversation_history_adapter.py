"""
Conversation history adapter.

Business logic over MessageCRUD: appends messages by role and returns prior
turns as domain ConversationTurn objects.

Dependencies: knowledge_rag.boundary.db.CRUD.message_crud
System role: Conversation history business logic adapter
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from knowledge_rag.boundary.db.CRUD.message_crud import message_crud
from knowledge_rag.boundary.db.models.message_model import MessageModel
from knowledge_rag.models.retrieval import ConversationTurn, Source

CHAT_ROLES = ("user", "assistant")


def message_to_turn(message: MessageModel) -> ConversationTurn:
    return ConversationTurn(
        role=message.role,
        content=message.content,
        sources=[Source.model_validate(s) for s in message.sources or []],
    )


class ConversationHistoryAdapter:
    """
    Append-only message log for one conversation.

    Flushes through the given session; the caller commits.
    """

    def __init__(self, conversation_id: UUID, db: AsyncSession) -> None:
        self.conversation_id = conversation_id
        self.db = db

    async def add_user_message(self, content: str) -> MessageModel:
        return await message_crud.append(self.db, self.conversation_id, "user", content)

    async def add_assistant_message(self, content: str, sources: list[Source]) -> MessageModel:
        return await message_crud.append(
            self.db,
            self.conversation_id,
            "assistant",
            content,
            sources=[s.model_dump(mode="json") for s in sources],
        )

    async def get_turns(self, limit: int | None = None) -> list[ConversationTurn]:
        """
        Get prior user/assistant turns, oldest first.

        Args:
            limit: Keep only the most recent N chat messages

        Returns:
            list[ConversationTurn]: Turns with system messages excluded
        """
        if limit is not None and limit <= 0:
            return []
        messages = await message_crud.list_by_conversation(
            self.db, self.conversation_id, limit=limit, roles=CHAT_ROLES
        )
        return [message_to_turn(m) for m in messages]
