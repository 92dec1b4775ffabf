"""
Embedding provider adapter.

Converts text to fixed-dimension vectors for indexed chunks and incoming
queries. The production implementation wraps Google Gemini embeddings through
LangChain and pins the output dimensionality on every call, since the chunk
store column is a fixed-width vector.

Dependencies: langchain_google_genai, fastapi.concurrency, knowledge_rag.core.exceptions
System role: Embedding boundary for retrieval and indexing
"""

import logging
from typing import Literal, Protocol, runtime_checkable

from dotenv import load_dotenv
from fastapi.concurrency import run_in_threadpool
from langchain_google_genai import GoogleGenerativeAIEmbeddings

from knowledge_rag.core.exceptions import ProviderError

logger = logging.getLogger(__name__)

# GOOGLE_API_KEY from .env is read by the langchain client when no key is passed
load_dotenv()

EmbeddingTaskType = Literal["query", "document"]

GEMINI_TASK_TYPES: dict[str, str] = {
    "query": "RETRIEVAL_QUERY",
    "document": "RETRIEVAL_DOCUMENT",
}


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Text embedding contract consumed by retrieval and indexing."""

    dimension: int

    async def embed(self, text: str, task_type: EmbeddingTaskType) -> list[float]:
        """Embed a single text."""
        ...

    async def embed_batch(
        self, texts: list[str], task_type: EmbeddingTaskType
    ) -> list[list[float]]:
        """Embed several texts in one upstream call."""
        ...


class GeminiEmbeddingProvider:
    """
    Gemini embedding provider.

    Every call requests the configured output dimensionality and verifies the
    returned vector length. Failures surface as ProviderError; retry policy is
    left to the caller.
    """

    PROVIDER_NAME = "gemini-embedding"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "models/gemini-embedding-001",
        dimension: int = 768,
        client: GoogleGenerativeAIEmbeddings | None = None,
    ) -> None:
        """
        Initialize Gemini embeddings client.

        Args:
            api_key: Google API key (falls back to GOOGLE_API_KEY when None)
            model: Gemini embedding model ID
            dimension: Fixed output dimensionality for every vector
            client: Pre-built LangChain embeddings client (tests)
        """
        self.dimension = dimension
        self._model = model
        if client is None:
            kwargs = {"model": model}
            if api_key:
                kwargs["google_api_key"] = api_key
            client = GoogleGenerativeAIEmbeddings(**kwargs)
        self._client = client
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, dimension={dimension}"
        )

    async def embed(self, text: str, task_type: EmbeddingTaskType) -> list[float]:
        """
        Embed a single text.

        Args:
            text: Text to embed
            task_type: "query" for search queries, "document" for indexed chunks

        Returns:
            list[float]: Embedding vector of length `dimension`

        Raises:
            ProviderError: If the upstream call fails or returns a malformed vector
        """
        try:
            vector = await run_in_threadpool(
                self._client.embed_query,
                text,
                task_type=GEMINI_TASK_TYPES[task_type],
                output_dimensionality=self.dimension,
            )
        except Exception as e:
            logger.error(f"{__name__}:embed - FAILED: {type(e).__name__}: {e}")
            raise ProviderError(
                message="Failed to generate embedding",
                provider=self.PROVIDER_NAME,
                operation="embed",
                details={"error": str(e), "model": self._model},
            ) from e

        self._check_dimension(vector)
        return list(vector)

    async def embed_batch(
        self, texts: list[str], task_type: EmbeddingTaskType
    ) -> list[list[float]]:
        """
        Embed several texts in one upstream call.

        Args:
            texts: Texts to embed
            task_type: "query" or "document"

        Returns:
            list[list[float]]: One vector per input text, in input order

        Raises:
            ProviderError: If the upstream call fails or returns malformed vectors
        """
        if not texts:
            return []

        try:
            vectors = await run_in_threadpool(
                self._client.embed_documents,
                texts,
                task_type=GEMINI_TASK_TYPES[task_type],
                output_dimensionality=self.dimension,
            )
        except Exception as e:
            logger.error(f"{__name__}:embed_batch - FAILED: {type(e).__name__}: {e}")
            raise ProviderError(
                message="Failed to generate embeddings",
                provider=self.PROVIDER_NAME,
                operation="embed_batch",
                details={"error": str(e), "model": self._model, "text_count": len(texts)},
            ) from e

        if len(vectors) != len(texts):
            raise ProviderError(
                message="Embedding count does not match input count",
                provider=self.PROVIDER_NAME,
                operation="embed_batch",
                details={"expected": len(texts), "received": len(vectors)},
            )
        for vector in vectors:
            self._check_dimension(vector)
        return [list(vector) for vector in vectors]

    def _check_dimension(self, vector: list[float]) -> None:
        """Reject vectors whose length differs from the index dimension."""
        if not vector or len(vector) != self.dimension:
            raise ProviderError(
                message="Invalid response from embedding provider: unexpected vector length",
                provider=self.PROVIDER_NAME,
                operation="embed",
                details={"expected": self.dimension, "received": len(vector or [])},
            )
