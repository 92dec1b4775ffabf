"""
Exception hierarchy for the knowledge-base RAG core.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class KnowledgeRAGException(Exception):
    """Base exception for all knowledge-base RAG errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidQueryError(KnowledgeRAGException):
    """Raised when a query is rejected before any upstream call (empty text, missing scope)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize invalid query error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ProviderError(KnowledgeRAGException):
    """Raised when an embedding or completion provider call fails upstream."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Error message
            provider: Provider name (e.g. "gemini-embedding")
            operation: Operation that failed (embed, complete, stream)
            details: Additional context
        """
        details = details or {}
        if provider:
            details["provider"] = provider
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StreamInterruptedError(KnowledgeRAGException):
    """Recorded when an upstream completion stream ends abnormally."""

    def __init__(
        self,
        message: str,
        emitted_chars: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize stream interrupted error.

        Args:
            message: Error message
            emitted_chars: Characters already delivered before the failure
            details: Additional context
        """
        details = details or {}
        details["emitted_chars"] = emitted_chars
        super().__init__(message, details)


class ChunkStoreError(KnowledgeRAGException):
    """Raised when chunk store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize chunk store error.

        Args:
            message: Error message
            operation: Operation that failed (search, insert, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class ConversationNotFoundError(KnowledgeRAGException):
    """Raised when a conversation cannot be found."""

    def __init__(self, conversation_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize conversation not found error.

        Args:
            conversation_id: ID of the missing conversation
            details: Additional context
        """
        details = details or {}
        details["conversation_id"] = conversation_id
        super().__init__(f"Conversation not found: {conversation_id}", details)
