"""
Chat service for conversational Q&A over the knowledge base.

Orchestrates the chat flow: conversation lookup or creation, history
retrieval, answer generation and message persistence. Streaming responses
persist the assistant message only after the stream completes cleanly.

Dependencies: knowledge_rag.core.generation, knowledge_rag.application.adapters,
    knowledge_rag.boundary.db
System role: Chat service orchestration layer
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from knowledge_rag.application.adapters.conversation_history_adapter import (
    ConversationHistoryAdapter,
    message_to_turn,
)
from knowledge_rag.boundary.db.base import utc_now
from knowledge_rag.boundary.db.CRUD.conversation_crud import conversation_crud
from knowledge_rag.boundary.db.CRUD.message_crud import message_crud
from knowledge_rag.boundary.db.models.conversation_model import ConversationModel
from knowledge_rag.core.exceptions import ConversationNotFoundError, InvalidQueryError
from knowledge_rag.core.generation.answer_generator import AnswerGenerator
from knowledge_rag.core.generation.streaming import AnswerStream
from knowledge_rag.core.retrieval.hybrid_retriever import validate_scope
from knowledge_rag.models.chat import (
    ChatHistoryResponse,
    ChatMessageResponse,
    ChatRequest,
    ChatResponse,
    ConversationListResponse,
    ConversationSummary,
)
from knowledge_rag.models.streaming import StreamEvent, StreamEventType
from knowledge_rag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 50
TITLE_MAX_STORED_CHARS = 255


def conversation_title(message: str) -> str:
    """First 50 characters of the message, with "..." when truncated."""
    message = message.strip()
    if len(message) > TITLE_MAX_CHARS:
        return message[:TITLE_MAX_CHARS] + "..."
    return message


def conversation_summary(conversation: ConversationModel) -> ConversationSummary:
    return ConversationSummary(
        id=conversation.id,
        title=conversation.title,
        topic_ids=list(conversation.topic_ids or []),
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


@dataclass
class ChatStream:
    """Conversation id (known before streaming) plus the SSE event generator."""

    conversation_id: UUID
    events: AsyncGenerator[StreamEvent, None]


class ChatService:
    """
    Chat service for multi-turn knowledge base conversations.

    Opens one database session per unit of work from the injected factory,
    so streamed responses can persist after the request scope ends.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        generator: AnswerGenerator,
        context_window_size: int = 10,
    ) -> None:
        """
        Initialize chat service.

        Args:
            session_factory: Async session factory for the conversation store
            generator: Answer generator
            context_window_size: Prior messages passed to the model
        """
        self._session_factory = session_factory
        self._generator = generator
        self._context_window_size = context_window_size

    async def _get_or_create_conversation(
        self,
        db: AsyncSession,
        user_id: str,
        org_id: str,
        request: ChatRequest,
    ) -> ConversationModel:
        if request.conversation_id is not None:
            return await self._get_owned_conversation(db, user_id, org_id, request.conversation_id)

        conversation = await conversation_crud.create_conversation(
            db,
            user_id=user_id,
            org_id=org_id,
            topic_ids=request.topic_ids,
            title=conversation_title(request.message),
        )
        logger.info(f"{__name__}:_get_or_create_conversation - Created conversation {conversation.id}")
        return conversation

    async def _start_turn(self, user_id: str, org_id: str, request: ChatRequest):
        """Resolve the conversation, load history and store the user message."""
        validate_scope(request.message, org_id, request.topic_ids)

        async with self._session_factory() as db:
            conversation = await self._get_or_create_conversation(db, user_id, org_id, request)
            adapter = ConversationHistoryAdapter(conversation.id, db)
            history = await adapter.get_turns(limit=self._context_window_size)
            await adapter.add_user_message(request.message)
            await db.commit()

        logger.info(f"{__name__}:_start_turn - Conversation {conversation.id}, history={len(history)} turns")
        return conversation.id, history

    async def _store_answer(self, conversation_id: UUID, answer: str, sources) -> None:
        async with self._session_factory() as db:
            adapter = ConversationHistoryAdapter(conversation_id, db)
            await adapter.add_assistant_message(answer, sources)
            await conversation_crud.touch(db, conversation_id)
            await db.commit()

    async def process_chat(self, user_id: str, org_id: str, request: ChatRequest) -> ChatResponse:
        """
        Answer a chat message and persist both sides of the turn.

        Args:
            user_id: Authenticated user
            org_id: User's organization
            request: Chat request

        Returns:
            ChatResponse: Conversation id, answer and sources

        Raises:
            InvalidQueryError: Blank message or missing topic scope
            ConversationNotFoundError: Unknown conversation for this user
            ProviderError: Embedding or completion failed
        """
        conversation_id, history = await self._start_turn(user_id, org_id, request)

        result = await self._generator.generate_sync(
            request.message,
            org_id,
            request.topic_ids,
            conversation_history=history,
            mode=request.mode,
        )

        await self._store_answer(conversation_id, result.answer, result.sources)
        return ChatResponse(conversation_id=conversation_id, answer=result.answer, sources=result.sources)

    async def stream_chat(self, user_id: str, org_id: str, request: ChatRequest) -> ChatStream:
        """
        Start a streamed answer.

        Retrieval errors raise here, before any event is produced.

        Returns:
            ChatStream: Conversation id and the event generator
        """
        conversation_id, history = await self._start_turn(user_id, org_id, request)

        stream = await self._generator.generate_stream(
            request.message,
            org_id,
            request.topic_ids,
            conversation_history=history,
            mode=request.mode,
        )
        return ChatStream(conversation_id=conversation_id, events=self._stream_events(conversation_id, stream))

    async def _stream_events(
        self,
        conversation_id: UUID,
        stream: AnswerStream,
    ) -> AsyncGenerator[StreamEvent, None]:
        """Yield sources, tokens and a final complete or error event."""
        try:
            yield StreamEvent(
                event=StreamEventType.SOURCES,
                data={
                    "conversation_id": str(conversation_id),
                    "sources": [s.model_dump(mode="json") for s in stream.sources],
                },
            )

            async for fragment in stream:
                yield StreamEvent(event=StreamEventType.TOKEN, data={"token": fragment})

            if stream.error is not None:
                log_exception_with_context(
                    logger,
                    f"{__name__}:_stream_events - Stream interrupted",
                    stream.error,
                    conversation_id=conversation_id,
                )
                yield StreamEvent(
                    event=StreamEventType.ERROR,
                    data={"message": "The response was interrupted", "details": stream.error.details},
                )
                return

            if stream.completed:
                await self._store_answer(conversation_id, stream.emitted_text, stream.sources)
                yield StreamEvent(
                    event=StreamEventType.COMPLETE,
                    data={
                        "conversation_id": str(conversation_id),
                        "full_answer": stream.emitted_text,
                    },
                )
                logger.info(f"{__name__}:_stream_events - COMPLETE answer_len={len(stream.emitted_text)}")
        finally:
            await stream.aclose()

    async def _get_owned_conversation(
        self,
        db: AsyncSession,
        user_id: str,
        org_id: str,
        conversation_id: UUID,
    ) -> ConversationModel:
        conversation = await conversation_crud.get_for_user(db, conversation_id, user_id, org_id=org_id)
        if conversation is None:
            raise ConversationNotFoundError(str(conversation_id))
        return conversation

    async def get_history(self, user_id: str, org_id: str, conversation_id: UUID) -> ChatHistoryResponse:
        """
        Get the full message history of a user's conversation.

        Raises:
            ConversationNotFoundError: Unknown conversation for this user and organization
        """
        async with self._session_factory() as db:
            await self._get_owned_conversation(db, user_id, org_id, conversation_id)
            messages = await message_crud.list_by_conversation(db, conversation_id)

        items = [
            ChatMessageResponse(role=turn.role, content=turn.content, sources=turn.sources)
            for turn in (message_to_turn(m) for m in messages)
        ]
        return ChatHistoryResponse(conversation_id=conversation_id, messages=items, total=len(items))

    async def list_conversations(
        self,
        user_id: str,
        org_id: str,
        limit: int | None = None,
    ) -> ConversationListResponse:
        """List the user's conversations in the organization, most recently updated first."""
        async with self._session_factory() as db:
            conversations = await conversation_crud.list_by_user(db, user_id, limit=limit, org_id=org_id)
            items = [conversation_summary(c) for c in conversations]
        return ConversationListResponse(conversations=items, total=len(items))

    async def rename_conversation(
        self,
        user_id: str,
        org_id: str,
        conversation_id: UUID,
        title: str,
    ) -> ConversationSummary:
        """
        Replace a conversation's title.

        Args:
            user_id: Authenticated user
            org_id: User's organization
            conversation_id: Conversation to rename
            title: New title, 1 to 255 characters after trimming

        Returns:
            ConversationSummary: Updated conversation

        Raises:
            InvalidQueryError: Blank or overlong title
            ConversationNotFoundError: Unknown conversation for this user and organization
        """
        title = title.strip()
        if not title:
            raise InvalidQueryError("Title must not be empty", field="title")
        if len(title) > TITLE_MAX_STORED_CHARS:
            raise InvalidQueryError(
                f"Title must be at most {TITLE_MAX_STORED_CHARS} characters",
                field="title",
            )

        async with self._session_factory() as db:
            await self._get_owned_conversation(db, user_id, org_id, conversation_id)
            conversation = await conversation_crud.update_by_id(
                db, conversation_id, title=title, updated_at=utc_now()
            )
            summary = conversation_summary(conversation)
            await db.commit()

        logger.info(f"{__name__}:rename_conversation - Renamed conversation {conversation_id}")
        return summary

    async def delete_conversation(self, user_id: str, org_id: str, conversation_id: UUID) -> None:
        """
        Delete a conversation and its messages.

        Raises:
            ConversationNotFoundError: Unknown conversation for this user and organization
        """
        async with self._session_factory() as db:
            await self._get_owned_conversation(db, user_id, org_id, conversation_id)
            deleted_messages = await message_crud.delete_by_conversation(db, conversation_id)
            await conversation_crud.delete_by_id(db, conversation_id)
            await db.commit()

        logger.info(
            f"{__name__}:delete_conversation - Deleted conversation {conversation_id} "
            f"with {deleted_messages} messages"
        )
