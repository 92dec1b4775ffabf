"""
Answer stream channel.

AnswerStream runs the upstream completion iterator in a producer task that
writes fragments into a bounded queue; the consumer iterates the stream.
Sources are fixed at construction, before any fragment is produced.

Dependencies: asyncio, knowledge_rag.core.exceptions
System role: Streaming transport between answer generation and callers
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Callable

from knowledge_rag.core.exceptions import StreamInterruptedError
from knowledge_rag.models.retrieval import Source

logger = logging.getLogger(__name__)

STREAM_ERROR_MARKER = "\n\n[The response was interrupted. Please try again.]"

_DONE = object()


class _StreamFailure:
    def __init__(self, error: Exception) -> None:
        self.error = error


class AnswerStream:
    """
    Finite, single-use async iterator of answer text fragments.

    If the upstream fails after starting, the text already emitted stands,
    STREAM_ERROR_MARKER is yielded as the final fragment and `error` holds a
    StreamInterruptedError. Closing the stream cancels the producer, which
    closes the upstream iterator.

    Usage:
        stream = await generator.generate_stream(...)
        send(stream.sources)
        async with stream:
            async for fragment in stream:
                send(fragment)
    """

    def __init__(
        self,
        sources: list[Source],
        fragments: Callable[[], AsyncIterator[str]],
        max_queue_size: int = 32,
    ) -> None:
        """
        Initialize stream.

        Args:
            sources: Sources the answer is grounded on
            fragments: Factory for the upstream fragment iterator, called once
                when iteration starts
            max_queue_size: Fragments buffered ahead of the consumer
        """
        self._sources = list(sources)
        self._fragments = fragments
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._producer: asyncio.Task | None = None
        self._emitted: list[str] = []
        self._error: StreamInterruptedError | None = None
        self._finished = False
        self._completed = False

    @property
    def sources(self) -> list[Source]:
        return list(self._sources)

    @property
    def error(self) -> StreamInterruptedError | None:
        return self._error

    @property
    def emitted_text(self) -> str:
        """Answer text delivered so far, excluding the error marker."""
        return "".join(self._emitted)

    @property
    def completed(self) -> bool:
        """True once the upstream finished without error."""
        return self._completed

    def __aiter__(self) -> "AnswerStream":
        return self

    async def __anext__(self) -> str:
        if self._finished:
            raise StopAsyncIteration
        if self._producer is None:
            self._producer = asyncio.create_task(self._produce())

        item = await self._queue.get()
        if item is _DONE:
            self._finished = True
            self._completed = True
            raise StopAsyncIteration
        if isinstance(item, _StreamFailure):
            self._finished = True
            self._error = StreamInterruptedError(
                f"Answer stream interrupted: {item.error}",
                emitted_chars=len(self.emitted_text),
                details={"cause": type(item.error).__name__},
            )
            return STREAM_ERROR_MARKER

        self._emitted.append(item)
        return item

    async def aclose(self) -> None:
        """Stop the stream and cancel the producer if it is still running."""
        self._finished = True
        producer = self._producer
        if producer is not None and not producer.done():
            producer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await producer

    async def __aenter__(self) -> "AnswerStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _produce(self) -> None:
        upstream = None
        try:
            upstream = self._fragments()
            async for fragment in upstream:
                await self._queue.put(fragment)
        except Exception as e:
            logger.error(f"{__name__}:_produce - Upstream stream failed: {type(e).__name__}: {e}")
            await self._queue.put(_StreamFailure(e))
            return
        finally:
            aclose = getattr(upstream, "aclose", None)
            if aclose is not None:
                await aclose()
        await self._queue.put(_DONE)


def single_fragment(text: str) -> Callable[[], AsyncIterator[str]]:
    """Fragment factory yielding one fixed text."""

    async def _fragments() -> AsyncIterator[str]:
        yield text

    return _fragments
