"""
AI provider configuration settings.

Gemini embedding and chat model settings used by the provider adapters.

Dependencies: pydantic, pydantic_settings
System role: Embedding/completion provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from knowledge_rag.configs.base import BaseSettings


class ProviderSettings(BaseSettings):
    """Google Gemini provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Google Gemini API key")

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Embedding vector dimension (must match the vector(768) column)",
    )

    chat_model: str = Field(default="gemini-2.5-pro", description="Gemini chat model ID")
    temperature: float = Field(default=0.3, description="Generation temperature")
    normal_max_output_tokens: int = Field(
        default=1500,
        description="Output token cap for normal mode answers",
    )
    operational_max_output_tokens: int = Field(
        default=500,
        description="Output token cap for operational mode answers",
    )
