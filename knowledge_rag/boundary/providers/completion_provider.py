"""
Completion provider adapter.

Sends a grounded prompt (system instructions + chat messages) to the chat
model, either returning the whole answer or streaming text fragments.

Dependencies: langchain_google_genai, langchain_core, knowledge_rag.core.exceptions
System role: Completion boundary for answer generation
"""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from dotenv import load_dotenv
from langchain_core.messages import BaseMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from knowledge_rag.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

# GOOGLE_API_KEY from .env is read by the langchain client when no key is passed
load_dotenv()


@dataclass
class CompletionRequest:
    """Prompt sent to a completion provider."""

    system_prompt: str
    messages: list[BaseMessage] = field(default_factory=list)
    max_output_tokens: int = 1500


@runtime_checkable
class CompletionProvider(Protocol):
    """Chat completion contract consumed by the answer generator."""

    async def complete(self, request: CompletionRequest) -> str:
        """Return the full completion text."""
        ...

    def stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """Yield completion text fragments in arrival order."""
        ...


def content_to_text(content: Any) -> str:
    """
    Flatten LangChain message content to plain text.

    Gemini may return content as a string or as a list of parts
    (strings or {"type": "text", "text": ...} dicts).

    Args:
        content: Message or chunk content

    Returns:
        str: Concatenated text
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content) if content else ""


class GeminiCompletionProvider:
    """
    Gemini chat completion provider.

    Keeps one LangChain chat client per output-token cap so normal and
    operational answers can share a provider instance.
    """

    PROVIDER_NAME = "gemini-chat"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-pro",
        temperature: float = 0.3,
    ) -> None:
        """
        Initialize Gemini completion provider.

        Args:
            api_key: Google API key (falls back to GOOGLE_API_KEY when None)
            model: Gemini chat model ID
            temperature: Sampling temperature (low for factual answers)
        """
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._clients: dict[int, ChatGoogleGenerativeAI] = {}

    def _client_for(self, max_output_tokens: int) -> ChatGoogleGenerativeAI:
        """Get (or lazily create) the chat client for an output-token cap."""
        client = self._clients.get(max_output_tokens)
        if client is None:
            kwargs: dict[str, Any] = {
                "model": self._model,
                "temperature": self._temperature,
                "max_output_tokens": max_output_tokens,
            }
            if self._api_key:
                kwargs["google_api_key"] = self._api_key
            client = ChatGoogleGenerativeAI(**kwargs)
            self._clients[max_output_tokens] = client
        return client

    @staticmethod
    def _to_messages(request: CompletionRequest) -> list[BaseMessage]:
        return [SystemMessage(content=request.system_prompt), *request.messages]

    async def complete(self, request: CompletionRequest) -> str:
        """
        Return the full completion text.

        Args:
            request: Completion request

        Returns:
            str: Answer text

        Raises:
            ProviderError: If the upstream call fails
        """
        client = self._client_for(request.max_output_tokens)
        try:
            response = await client.ainvoke(self._to_messages(request))
        except Exception as e:
            logger.error(f"{__name__}:complete - FAILED: {type(e).__name__}: {e}")
            raise ProviderError(
                message="Completion request failed",
                provider=self.PROVIDER_NAME,
                operation="complete",
                details={"error": str(e), "model": self._model},
            ) from e
        return content_to_text(response.content)

    async def stream(self, request: CompletionRequest) -> AsyncIterator[str]:
        """
        Yield completion text fragments in arrival order.

        Closing this iterator closes the underlying LangChain stream.

        Args:
            request: Completion request

        Yields:
            str: Non-empty text fragments

        Raises:
            ProviderError: If the upstream stream fails
        """
        client = self._client_for(request.max_output_tokens)
        upstream = client.astream(self._to_messages(request))
        try:
            async for chunk in upstream:
                text = content_to_text(chunk.content)
                if text:
                    yield text
        except Exception as e:
            logger.error(f"{__name__}:stream - FAILED: {type(e).__name__}: {e}")
            raise ProviderError(
                message="Completion stream failed",
                provider=self.PROVIDER_NAME,
                operation="stream",
                details={"error": str(e), "model": self._model},
            ) from e
        finally:
            await upstream.aclose()
