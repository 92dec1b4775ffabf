"""
Retrieval configuration settings.

Tuning knobs for hybrid retrieval, rank fusion and context assembly.

Dependencies: pydantic, pydantic_settings
System role: Retrieval and context-budget configuration for the RAG core
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from knowledge_rag.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Hybrid retrieval configuration (Postgres for prod, in-memory for dev)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="postgres",
        description="Chunk store type: 'memory' for local dev, 'postgres' for production",
    )

    top_k: int = Field(default=5, description="Results returned for single-topic queries")
    cross_topic_top_k: int = Field(
        default=8,
        description="Results kept after merging a cross-topic query",
    )
    per_topic_k: int = Field(
        default=10,
        description="Results retrieved per topic before the cross-topic merge",
    )
    similarity_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for single-topic retrieval",
    )
    cross_topic_similarity_threshold: float = Field(
        default=0.35,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity for cross-topic retrieval",
    )

    vector_candidates: int = Field(default=20, ge=1, description="Vector candidates per topic")
    fts_candidates: int = Field(default=20, ge=1, description="Full-text candidates per topic")

    rrf_k: int = Field(default=60, ge=1, description="Reciprocal rank fusion constant")
    vector_weight: float = Field(default=1.0, ge=0.0, description="Weight of the vector rank term")
    lexical_weight: float = Field(default=1.0, ge=0.0, description="Weight of the lexical rank term")

    max_context_chars: int = Field(
        default=12000,
        ge=1,
        description="Character budget of the assembled context block",
    )
    dedup_overlap_threshold: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Token overlap above which same-document chunks are duplicates",
    )
