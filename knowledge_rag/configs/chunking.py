"""
Chunking configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Document chunking and indexing configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from knowledge_rag.configs.base import BaseSettings


class ChunkingSettings(BaseSettings):
    """Document chunking and embedding batch configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHUNKING_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_tokens: int = Field(default=450, description="Target chunk size in tokens")
    overlap_tokens: int = Field(default=70, description="Overlap between chunks in tokens")
    chars_per_token: int = Field(default=4, description="Approximate characters per token")
    embedding_batch_size: int = Field(default=10, ge=1, description="Chunks embedded per batch")

    @property
    def chunk_size_chars(self) -> int:
        """Chunk size in characters."""
        return self.chunk_tokens * self.chars_per_token

    @property
    def chunk_overlap_chars(self) -> int:
        """Chunk overlap in characters."""
        return self.overlap_tokens * self.chars_per_token
