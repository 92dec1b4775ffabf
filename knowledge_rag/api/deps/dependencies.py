"""
Dependency injection container.

Factory functions for FastAPI dependencies. Providers, the chunk store and
the answer generator are built once and cached in the ServiceCache.

Dependencies: knowledge_rag.configs, knowledge_rag.application, knowledge_rag.boundary
System role: DI container for service injection
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from knowledge_rag.application.services.chat_service import ChatService
from knowledge_rag.configs import get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self) -> None:
        self._embedding_provider = None
        self._completion_provider = None
        self._chunk_store = None
        self._session_factory = None
        self._answer_generator = None

    @property
    def embedding_provider(self):
        """Get cached Gemini embedding provider."""
        if self._embedding_provider is None:
            from knowledge_rag.boundary.providers import GeminiEmbeddingProvider

            providers = get_settings().providers
            self._embedding_provider = GeminiEmbeddingProvider(
                api_key=providers.api_key,
                model=providers.embedding_model,
                dimension=providers.embedding_dimension,
            )
        return self._embedding_provider

    @property
    def completion_provider(self):
        """Get cached Gemini completion provider."""
        if self._completion_provider is None:
            from knowledge_rag.boundary.providers import GeminiCompletionProvider

            providers = get_settings().providers
            self._completion_provider = GeminiCompletionProvider(
                api_key=providers.api_key,
                model=providers.chat_model,
                temperature=providers.temperature,
            )
        return self._completion_provider

    @property
    def chunk_store(self):
        """Get cached chunk store selected by RETRIEVAL_STORE_TYPE."""
        if self._chunk_store is None:
            from knowledge_rag.boundary.chunk_store.chunk_store_factory import get_chunk_store

            self._chunk_store = get_chunk_store()
        return self._chunk_store

    @property
    def session_factory(self):
        """Get cached async session factory for the conversation store."""
        if self._session_factory is None:
            from knowledge_rag.boundary.db import get_async_session_factory

            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def answer_generator(self):
        """Get cached answer generator."""
        if self._answer_generator is None:
            from knowledge_rag.core.generation import AnswerGenerator

            self._answer_generator = AnswerGenerator.from_settings(
                get_settings(),
                embedding_provider=self.embedding_provider,
                completion_provider=self.completion_provider,
                chunk_store=self.chunk_store,
            )
        return self._answer_generator

    def clear(self) -> None:
        """Clear all cached instances."""
        self.__init__()


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@dataclass(frozen=True)
class RequestIdentity:
    """Caller identity set by the upstream auth layer."""

    user_id: str
    org_id: str


def get_request_identity(
    x_user_id: str | None = Header(default=None),
    x_org_id: str | None = Header(default=None),
) -> RequestIdentity:
    """
    Read caller identity from X-User-Id / X-Org-Id headers.

    Raises:
        HTTPException(401): Either header is missing or blank
    """
    if not x_user_id or not x_user_id.strip() or not x_org_id or not x_org_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id and X-Org-Id headers are required",
        )
    return RequestIdentity(user_id=x_user_id.strip(), org_id=x_org_id.strip())


def get_chat_service(cache: ServiceCache = Depends(get_service_cache)) -> ChatService:
    """
    Get chat service instance.

    Args:
        cache: Service cache (injected via Depends)

    Returns:
        ChatService: Chat service with the cached answer generator
    """
    return ChatService(
        session_factory=cache.session_factory,
        generator=cache.answer_generator,
    )
