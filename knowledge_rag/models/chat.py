"""
Chat domain models and schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from knowledge_rag.models.retrieval import AnswerMode, Source


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    message: str = Field(description="User question or message")
    conversation_id: UUID | None = Field(
        default=None,
        description="Existing conversation to continue (new one created when omitted)",
    )
    topic_ids: list[str] = Field(default_factory=list, description="Topic scope of the question")
    mode: AnswerMode = Field(default=AnswerMode.NORMAL, description="Answer style")
    stream: bool = Field(default=True, description="Stream the answer as server-sent events")


class ChatResponse(BaseModel):
    """Response schema for non-streaming chat messages."""

    conversation_id: UUID
    answer: str
    sources: list[Source]


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
    sources: list[Source] = Field(default_factory=list)


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    conversation_id: UUID
    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")


class ConversationSummary(BaseModel):
    """Conversation metadata without its messages."""

    id: UUID
    title: str
    topic_ids: list[str]
    created_at: datetime
    updated_at: datetime


class ConversationListResponse(BaseModel):
    """Response schema for a user's conversations."""

    conversations: list[ConversationSummary]
    total: int = Field(description="Number of conversations returned")


class RenameConversationRequest(BaseModel):
    """Request schema for renaming a conversation."""

    title: str = Field(description="New conversation title")
