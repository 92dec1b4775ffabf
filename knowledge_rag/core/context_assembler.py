"""
Context assembler.

Turns ranked retrieval results into a citation-numbered context block:
near-duplicate chunks of the same document are skipped, relevance order is
kept and the block never exceeds the character budget.

Dependencies: knowledge_rag.models.retrieval
System role: Prompt context construction for answer generation
"""

import logging
import re

from knowledge_rag.models.retrieval import AssembledContext, RetrievalResult, Source

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"\w+")
ENTRY_SEPARATOR = "\n\n"


def word_tokens(text: str) -> set[str]:
    return set(WORD_PATTERN.findall(text.lower()))


def token_overlap(a: set[str], b: set[str]) -> float:
    """|A ∩ B| / min(|A|, |B|); 0.0 when either side is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / min(len(a), len(b))


def format_entry(citation_index: int, result: RetrievalResult) -> str:
    topic = result.topic_title or result.topic_id
    return f"[{citation_index}] {result.document_title} (Topic: {topic})\n{result.chunk_text}"


class ContextAssembler:
    """
    Builds the context block handed to the completion provider.

    Deterministic: the same results and budget always give the same block.
    """

    def __init__(self, max_chars: int = 12000, dedup_overlap_threshold: float = 0.9) -> None:
        self._max_chars = max_chars
        self._dedup_overlap_threshold = dedup_overlap_threshold

    def assemble(
        self,
        results: list[RetrievalResult],
        max_chars: int | None = None,
    ) -> AssembledContext:
        """
        Assemble a context block from ranked results.

        The first entry is truncated when it alone exceeds the budget; any
        later entry that does not fit ends assembly.

        Args:
            results: Ranked retrieval results
            max_chars: Character budget (defaults to the instance budget)

        Returns:
            AssembledContext: Block of at most max_chars characters and the
            sources it contains, numbered from 1

        Raises:
            ValueError: If the budget is not positive
        """
        budget = self._max_chars if max_chars is None else max_chars
        if budget <= 0:
            raise ValueError(f"max_chars must be positive, got {budget}")

        entries: list[str] = []
        sources: list[Source] = []
        included_tokens: list[tuple[str, set[str]]] = []
        used = 0

        for result in results:
            tokens = word_tokens(result.chunk_text)
            if any(
                document_id == result.document_id
                and token_overlap(tokens, seen) > self._dedup_overlap_threshold
                for document_id, seen in included_tokens
            ):
                logger.debug(f"{__name__}:assemble - Skipping near-duplicate chunk {result.chunk_id}")
                continue

            entry = format_entry(len(sources) + 1, result)
            separator = ENTRY_SEPARATOR if entries else ""
            needed = len(separator) + len(entry)

            if used + needed > budget:
                if entries:
                    break
                entry = entry[:budget]
                needed = len(entry)

            entries.append(separator + entry)
            used += needed
            included_tokens.append((result.document_id, tokens))
            sources.append(
                Source(
                    citation_index=len(sources) + 1,
                    chunk_id=result.chunk_id,
                    document_id=result.document_id,
                    document_title=result.document_title,
                    chunk_text=result.chunk_text,
                    topic_id=result.topic_id,
                    topic_title=result.topic_title,
                    fused_score=result.fused_score,
                    similarity=result.similarity,
                )
            )

        logger.info(f"{__name__}:assemble - Included {len(sources)}/{len(results)} chunks ({used}/{budget} chars)")
        return AssembledContext(context_block="".join(entries), used_sources=sources)
