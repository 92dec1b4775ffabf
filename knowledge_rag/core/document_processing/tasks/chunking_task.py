"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits document text into retrievable chunks of about 450 tokens with a
70 token overlap, preferring paragraph, then line, then sentence, then word
boundaries.

Dependencies: langchain_text_splitters
System role: First stage of document indexing
"""

import logging
import re

from langchain_text_splitters import RecursiveCharacterTextSplitter

logger = logging.getLogger(__name__)

CHUNKING_VERSION = "v3_sentence_450tok_overlap70"
DEFAULT_CHUNK_TOKENS = 450
DEFAULT_CHUNK_OVERLAP_TOKENS = 70
CHARS_PER_TOKEN = 4

SEPARATORS = ["\n\n", "\n", ". ", "! ", "? ", " ", ""]


def normalize_text(text: str) -> str:
    """Normalize line endings and collapse runs of 3+ newlines to a blank line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return re.sub(r"\n{3,}", "\n\n", text).strip()


class ChunkingTask:
    """Split document text into overlapping chunks."""

    def __init__(
        self,
        chunk_tokens: int = DEFAULT_CHUNK_TOKENS,
        overlap_tokens: int = DEFAULT_CHUNK_OVERLAP_TOKENS,
        chars_per_token: int = CHARS_PER_TOKEN,
    ) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            chunk_tokens: Target chunk size in tokens
            overlap_tokens: Overlap between consecutive chunks in tokens
            chars_per_token: Character estimate per token
        """
        self.chunk_size = chunk_tokens * chars_per_token
        self.chunk_overlap = overlap_tokens * chars_per_token
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            separators=SEPARATORS,
            keep_separator="end",
            length_function=len,
        )

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Raw document text

        Returns:
            list[str]: Non-empty chunks in document order; empty for blank text
        """
        normalized = normalize_text(text)
        if not normalized:
            return []

        chunks = [c.strip() for c in self._splitter.split_text(normalized)]
        chunks = [c for c in chunks if c]
        logger.info(
            f"{__name__}:chunk - {len(normalized)} chars -> {len(chunks)} chunks (policy={CHUNKING_VERSION})"
        )
        return chunks
