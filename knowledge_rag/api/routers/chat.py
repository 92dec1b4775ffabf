"""Chat API endpoints.

Routes:
- POST /chat - Ask a question; JSON answer or Server-Sent Events stream
- GET /chat/conversations - List the caller's conversations
- GET /chat/{conversation_id}/messages - Conversation history
- PATCH /chat/{conversation_id} - Rename a conversation
- DELETE /chat/{conversation_id} - Delete a conversation and its messages

Dependencies: knowledge_rag.application.services.chat_service
System role: Chat messaging HTTP API with streaming support
"""

import json
import logging
from collections.abc import AsyncGenerator
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from knowledge_rag.api.deps import RequestIdentity, get_chat_service, get_request_identity
from knowledge_rag.api.routers.router_utils import handle_chat_errors
from knowledge_rag.application.services.chat_service import ChatService, ChatStream
from knowledge_rag.models.chat import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    ConversationListResponse,
    ConversationSummary,
    RenameConversationRequest,
)
from knowledge_rag.models.streaming import StreamEventType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def format_sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


def sse_response(chat_stream: ChatStream) -> StreamingResponse:
    """Wrap a chat stream as an SSE response carrying X-Conversation-Id."""

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            async for event in chat_stream.events:
                yield format_sse(event.event.value, event.data)
        except Exception as e:
            logger.error(f"{__name__}:event_generator - {type(e).__name__}: {e}")
            yield format_sse(
                StreamEventType.ERROR.value,
                {"code": "PROCESSING_ERROR", "message": "Chat processing failed"},
            )
        finally:
            await chat_stream.events.aclose()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
            "X-Conversation-Id": str(chat_stream.conversation_id),
        },
    )


@router.post("", response_model=ChatResponse)
@handle_chat_errors
async def chat(
    request: ChatRequest,
    identity: RequestIdentity = Depends(get_request_identity),
    chat_service: ChatService = Depends(get_chat_service),
):
    """Ask a question against one or more topics.

    With stream=true the answer is sent as SSE events:

        event: sources
        data: {"conversation_id": "...", "sources": [...]}

        event: token
        data: {"token": "..."}

        event: complete
        data: {"conversation_id": "...", "full_answer": "..."}

        event: error
        data: {"message": "..."}

    Raises:
        HTTPException(400): Blank message or missing topic scope
        HTTPException(404): Unknown conversation
        HTTPException(503): Embedding or completion provider unavailable
    """
    logger.info(
        f"{__name__}:chat - START user={identity.user_id} topics={len(request.topic_ids)} "
        f"stream={request.stream} mode={request.mode.value}"
    )
    if request.stream:
        chat_stream = await chat_service.stream_chat(identity.user_id, identity.org_id, request)
        return sse_response(chat_stream)

    return await chat_service.process_chat(identity.user_id, identity.org_id, request)


@router.get("/conversations", response_model=ConversationListResponse)
@handle_chat_errors
async def list_conversations(
    limit: int = Query(default=100, ge=1, le=500),
    identity: RequestIdentity = Depends(get_request_identity),
    chat_service: ChatService = Depends(get_chat_service),
) -> ConversationListResponse:
    """List the caller's conversations, most recently updated first."""
    return await chat_service.list_conversations(identity.user_id, identity.org_id, limit=limit)


@router.get("/{conversation_id}/messages", response_model=ChatHistoryResponse)
@handle_chat_errors
async def get_messages(
    conversation_id: UUID,
    identity: RequestIdentity = Depends(get_request_identity),
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatHistoryResponse:
    """Get a conversation's messages in creation order."""
    return await chat_service.get_history(identity.user_id, identity.org_id, conversation_id)


@router.patch("/{conversation_id}", response_model=ConversationSummary)
@handle_chat_errors
async def rename_conversation(
    conversation_id: UUID,
    request: RenameConversationRequest,
    identity: RequestIdentity = Depends(get_request_identity),
    chat_service: ChatService = Depends(get_chat_service),
) -> ConversationSummary:
    """
    Rename a conversation.

    Raises:
        HTTPException(400): Blank or overlong title
        HTTPException(404): Unknown conversation
    """
    return await chat_service.rename_conversation(
        identity.user_id, identity.org_id, conversation_id, request.title
    )


@router.delete("/{conversation_id}", status_code=204)
@handle_chat_errors
async def delete_conversation(
    conversation_id: UUID,
    identity: RequestIdentity = Depends(get_request_identity),
    chat_service: ChatService = Depends(get_chat_service),
) -> None:
    """
    Delete a conversation and its messages.

    Returns:
        204 No Content on success

    Raises:
        HTTPException(404): Unknown conversation
    """
    await chat_service.delete_conversation(identity.user_id, identity.org_id, conversation_id)
    logger.info(f"{__name__}:delete_conversation - user={identity.user_id} conversation={conversation_id}")
