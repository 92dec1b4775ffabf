"""
Test suite for settings and logging helpers.

System role: Verification of configuration defaults and log formatting
"""

import logging

import pytest

from knowledge_rag.configs.database import DatabaseSettings
from knowledge_rag.configs.retrieval import RetrievalSettings
from knowledge_rag.configs.settings import Settings
from knowledge_rag.observability.log_utils import format_context, log_with_context, safe_log_value
from knowledge_rag.observability.logger import configure_logging


class TestRetrievalSettings:
    """Test suite for RetrievalSettings."""

    def test_defaults_should_match_retrieval_policy(self) -> None:
        """Test default thresholds, limits and fusion constant."""
        settings = RetrievalSettings(_env_file=None)

        assert settings.top_k == 5
        assert settings.cross_topic_top_k == 8
        assert settings.per_topic_k == 10
        assert settings.similarity_threshold == 0.5
        assert settings.cross_topic_similarity_threshold == 0.35
        assert settings.rrf_k == 60
        assert settings.max_context_chars == 12000

    def test_env_should_override_with_prefix(self, monkeypatch) -> None:
        """Test RETRIEVAL_ environment variables are applied."""
        monkeypatch.setenv("RETRIEVAL_STORE_TYPE", "memory")
        monkeypatch.setenv("RETRIEVAL_TOP_K", "7")

        settings = RetrievalSettings(_env_file=None)

        assert settings.store_type == "memory"
        assert settings.top_k == 7

    def test_threshold_should_be_bounded(self, monkeypatch) -> None:
        """Test thresholds outside [0, 1] are rejected."""
        monkeypatch.setenv("RETRIEVAL_SIMILARITY_THRESHOLD", "1.5")

        with pytest.raises(ValueError):
            RetrievalSettings(_env_file=None)


class TestDatabaseSettings:
    """Test suite for DatabaseSettings URLs."""

    def test_async_url_should_use_asyncpg(self) -> None:
        """Test the async URL targets asyncpg without ssl by default."""
        settings = DatabaseSettings(_env_file=None, host="db", port=5433, user="u", password="p", db="kb")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5433/kb"

    def test_async_url_should_require_ssl_when_configured(self) -> None:
        """Test sslmode=require adds the asyncpg ssl parameter."""
        settings = DatabaseSettings(_env_file=None, sslmode="require")

        assert settings.async_database_url.endswith("?ssl=require")


class TestSettings:
    """Test suite for the aggregated Settings."""

    def test_settings_should_expose_sub_settings(self) -> None:
        """Test provider defaults are reachable from the root settings."""
        settings = Settings()

        assert settings.providers.normal_max_output_tokens == 1500
        assert settings.providers.operational_max_output_tokens == 500
        assert settings.chunking.chunk_size_chars == 1800


class TestLogUtils:
    """Test suite for log helpers."""

    def test_safe_log_value_should_summarize_collections(self) -> None:
        """Test lists and dicts are logged by size."""
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_safe_log_value_should_truncate_long_text(self) -> None:
        """Test long values are cut with a total length note."""
        value = safe_log_value("x" * 300, max_length=10)

        assert value.startswith("x" * 10)
        assert "300 total" in value

    def test_log_with_context_should_append_key_values(self, caplog) -> None:
        """Test context is appended as key=value pairs."""
        logger = logging.getLogger("tests.log_utils")

        with caplog.at_level(logging.INFO, logger="tests.log_utils"):
            log_with_context(logger, logging.INFO, "Retrieved", topic="topic-a", count=3)

        assert "Retrieved | topic=topic-a count=3" in caplog.text
        assert format_context() == ""

    def test_configure_logging_should_install_single_handler(self) -> None:
        """Test repeated configuration does not stack handlers."""
        root = logging.getLogger()
        original = root.handlers[:]
        try:
            configure_logging("DEBUG")
            configure_logging("INFO")

            assert len(root.handlers) == 1
            assert root.level == logging.INFO
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in original:
                root.addHandler(handler)
