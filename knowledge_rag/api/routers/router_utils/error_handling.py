"""
Chat error handling utilities.

Decorator mapping RAG core exceptions to HTTP responses for chat endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from knowledge_rag.core.exceptions import (
    ConversationNotFoundError,
    InvalidQueryError,
    KnowledgeRAGException,
    ProviderError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SEARCH_UNAVAILABLE = "Search is temporarily unavailable. Please try again."


def to_http_exception(error: Exception) -> HTTPException:
    """Map an exception to the HTTPException returned to the client."""
    if isinstance(error, InvalidQueryError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
    if isinstance(error, ConversationNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, ProviderError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=SEARCH_UNAVAILABLE)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Chat processing failed",
    )


def handle_chat_errors(func: F) -> F:
    """
    Decorator transforming RAG core errors into HTTPExceptions.

    InvalidQueryError -> 400, ConversationNotFoundError -> 404,
    ProviderError -> 503, anything else -> 500.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            raise
        except (InvalidQueryError, ConversationNotFoundError) as e:
            logger.warning(f"{func.__module__}:{func.__name__} - Rejected request: {e}")
            raise to_http_exception(e) from e
        except KnowledgeRAGException as e:
            logger.error(f"{func.__module__}:{func.__name__} - {type(e).__name__}: {e}")
            raise to_http_exception(e) from e
        except Exception as e:
            logger.exception(f"{func.__module__}:{func.__name__} - Unexpected error: {e}")
            raise to_http_exception(e) from e

    return wrapper  # type: ignore[return-value]
