"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from knowledge_rag.configs.base import BaseSettings
from knowledge_rag.configs.chunking import ChunkingSettings
from knowledge_rag.configs.database import DatabaseSettings
from knowledge_rag.configs.providers import ProviderSettings
from knowledge_rag.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    providers: ProviderSettings = ProviderSettings()
    chunking: ChunkingSettings = ChunkingSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from knowledge_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
