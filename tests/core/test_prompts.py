"""
Test suite for answer generation prompts.

System role: Verification of prompt composition
"""

from langchain_core.messages import AIMessage, HumanMessage

from knowledge_rag.core.generation.prompts import (
    CROSS_TOPIC_INSTRUCTIONS,
    OPERATIONAL_MODE_INSTRUCTIONS,
    SYSTEM_PROMPT,
    build_messages,
    build_system_prompt,
    history_to_messages,
)
from knowledge_rag.models.retrieval import AnswerMode, ConversationTurn


class TestBuildSystemPrompt:
    """Test suite for build_system_prompt()."""

    def test_should_return_base_prompt_for_normal_single_topic(self) -> None:
        """Test normal mode without multiple topics is the base prompt only."""
        assert build_system_prompt(AnswerMode.NORMAL) == SYSTEM_PROMPT

    def test_should_append_operational_instructions(self) -> None:
        """Test operational mode adds the concise-answer section."""
        prompt = build_system_prompt(AnswerMode.OPERATIONAL)

        assert prompt.startswith(SYSTEM_PROMPT)
        assert OPERATIONAL_MODE_INSTRUCTIONS in prompt

    def test_should_append_cross_topic_instructions(self) -> None:
        """Test multi-topic context asks for per-topic attribution."""
        prompt = build_system_prompt(AnswerMode.NORMAL, multi_topic=True)

        assert CROSS_TOPIC_INSTRUCTIONS in prompt
        assert OPERATIONAL_MODE_INSTRUCTIONS not in prompt

    def test_base_prompt_should_require_citations(self) -> None:
        """Test the grounding prompt asks for bracketed citations."""
        assert "[1]" in SYSTEM_PROMPT


class TestHistoryToMessages:
    """Test suite for history_to_messages()."""

    def test_should_map_roles_and_skip_unknown(self) -> None:
        """Test user/assistant turns map to chat messages and other roles are dropped."""
        # Arrange
        history = [
            ConversationTurn(role="user", content="Q1"),
            ConversationTurn(role="system", content="internal"),
            ConversationTurn(role="assistant", content="A1"),
        ]

        # Act
        messages = history_to_messages(history)

        # Assert
        assert [type(m) for m in messages] == [HumanMessage, AIMessage]
        assert [m.content for m in messages] == ["Q1", "A1"]

    def test_should_handle_missing_history(self) -> None:
        """Test None history yields no messages."""
        assert history_to_messages(None) == []


class TestBuildMessages:
    """Test suite for build_messages()."""

    def test_should_end_with_context_and_question(self) -> None:
        """Test the final human message carries the context block and question."""
        # Act
        messages = build_messages("[1] Doc (Topic: HR)\nText", "What is PTO?")

        # Assert
        assert len(messages) == 1
        assert isinstance(messages[0], HumanMessage)
        assert "[1] Doc (Topic: HR)\nText" in messages[0].content
        assert messages[0].content.endswith("Question: What is PTO?")
