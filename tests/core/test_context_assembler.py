"""
Test suite for ContextAssembler.

Covers citation numbering, entry format, near-duplicate skipping and the
character budget.

System role: Verification of prompt context construction
"""

import pytest

from knowledge_rag.core.context_assembler import ContextAssembler, format_entry, token_overlap
from knowledge_rag.models.retrieval import RetrievalResult


def make_result(
    chunk_id: str,
    chunk_text: str,
    document_id: str | None = None,
    document_title: str = "Handbook",
    topic_title: str | None = "Policies",
    topic_id: str = "topic-a",
) -> RetrievalResult:
    return RetrievalResult(
        chunk_id=chunk_id,
        document_id=document_id or f"doc-{chunk_id}",
        topic_id=topic_id,
        chunk_text=chunk_text,
        document_title=document_title,
        topic_title=topic_title,
        similarity=0.9,
        fused_score=0.03,
    )


@pytest.fixture
def assembler() -> ContextAssembler:
    """Provide assembler with default budget."""
    return ContextAssembler()


class TestFormatEntry:
    """Test suite for format_entry()."""

    def test_format_entry_should_include_marker_title_and_topic(self) -> None:
        """Test the entry header carries citation marker, document title and topic title."""
        entry = format_entry(2, make_result("c1", "Refunds take 14 days."))

        assert entry == "[2] Handbook (Topic: Policies)\nRefunds take 14 days."

    def test_format_entry_should_fall_back_to_topic_id(self) -> None:
        """Test a missing topic title shows the topic id."""
        entry = format_entry(1, make_result("c1", "Text", topic_title=None, topic_id="topic-a"))

        assert entry.startswith("[1] Handbook (Topic: topic-a)")


class TestTokenOverlap:
    """Test suite for token_overlap()."""

    def test_token_overlap_should_use_smaller_set(self) -> None:
        """Test overlap is the intersection over the smaller set."""
        assert token_overlap({"a", "b"}, {"a", "b", "c", "d"}) == 1.0

    def test_token_overlap_should_be_zero_for_empty(self) -> None:
        """Test empty sets do not count as duplicates."""
        assert token_overlap(set(), {"a"}) == 0.0


class TestContextAssemblerAssemble:
    """Test suite for ContextAssembler.assemble()."""

    def test_assemble_should_number_sources_in_relevance_order(self, assembler) -> None:
        """Test citation markers run from 1 in input order."""
        # Arrange
        results = [
            make_result("c1", "Refunds are issued within 14 days."),
            make_result("c2", "Store credit is offered for late returns."),
        ]

        # Act
        context = assembler.assemble(results)

        # Assert
        assert "[1] Handbook" in context.context_block
        assert "[2] Handbook" in context.context_block
        assert context.context_block.index("[1]") < context.context_block.index("[2]")
        assert [s.citation_index for s in context.used_sources] == [1, 2]
        assert [s.chunk_id for s in context.used_sources] == ["c1", "c2"]

    def test_assemble_should_return_empty_context_for_no_results(self, assembler) -> None:
        """Test empty input yields empty block and no sources."""
        context = assembler.assemble([])

        assert context.context_block == ""
        assert context.used_sources == []

    def test_assemble_should_skip_near_duplicate_from_same_document(self, assembler) -> None:
        """Test overlapping chunks of one document are included once, and numbering stays contiguous."""
        # Arrange
        text = "Employees may work remotely two days per week with manager approval"
        results = [
            make_result("c1", text, document_id="doc-1"),
            make_result("c2", text + ".", document_id="doc-1"),
            make_result("c3", "Parking permits are issued by facilities.", document_id="doc-2"),
        ]

        # Act
        context = assembler.assemble(results)

        # Assert
        assert [s.chunk_id for s in context.used_sources] == ["c1", "c3"]
        assert [s.citation_index for s in context.used_sources] == [1, 2]

    def test_assemble_should_keep_identical_text_from_different_documents(self, assembler) -> None:
        """Test duplicate detection is per document."""
        # Arrange
        text = "Expense reports are due on the fifth business day"
        results = [
            make_result("c1", text, document_id="doc-1"),
            make_result("c2", text, document_id="doc-2"),
        ]

        # Act
        context = assembler.assemble(results)

        # Assert
        assert len(context.used_sources) == 2

    def test_assemble_should_never_exceed_budget(self, assembler) -> None:
        """Test the block stays within max_chars and stops at the first entry that does not fit."""
        # Arrange
        results = [make_result(f"c{i}", f"Policy paragraph number {i} " * 10) for i in range(10)]

        # Act
        context = assembler.assemble(results, max_chars=700)

        # Assert
        assert len(context.context_block) <= 700
        assert 0 < len(context.used_sources) < 10
        assert [s.chunk_id for s in context.used_sources] == [f"c{i}" for i in range(len(context.used_sources))]

    def test_assemble_should_truncate_oversized_first_entry(self, assembler) -> None:
        """Test a single chunk larger than the budget is cut to fit rather than dropped."""
        # Arrange
        results = [make_result("c1", "x" * 500)]

        # Act
        context = assembler.assemble(results, max_chars=100)

        # Assert
        assert len(context.context_block) == 100
        assert context.context_block.startswith("[1] Handbook")
        assert len(context.used_sources) == 1

    def test_assemble_should_separate_entries_with_blank_line(self, assembler) -> None:
        """Test entries are joined by a blank line."""
        # Arrange
        results = [make_result("c1", "First."), make_result("c2", "Second.")]

        # Act
        context = assembler.assemble(results)

        # Assert
        assert context.context_block == (
            "[1] Handbook (Topic: Policies)\nFirst.\n\n[2] Handbook (Topic: Policies)\nSecond."
        )

    def test_assemble_should_only_use_input_results(self, assembler) -> None:
        """Test used sources are a subset of the input results."""
        # Arrange
        results = [make_result(f"c{i}", f"Unique text {i} about topic {i}") for i in range(4)]

        # Act
        context = assembler.assemble(results)

        # Assert
        assert {s.chunk_id for s in context.used_sources} <= {r.chunk_id for r in results}

    def test_assemble_should_be_deterministic(self, assembler) -> None:
        """Test same input and budget give the same block."""
        results = [make_result(f"c{i}", f"Text {i}") for i in range(3)]

        assert assembler.assemble(results, 200) == assembler.assemble(results, 200)

    @pytest.mark.parametrize("budget", [0, -5])
    def test_assemble_should_reject_non_positive_budget(self, assembler, budget) -> None:
        """Test zero or negative budgets raise ValueError."""
        with pytest.raises(ValueError):
            assembler.assemble([make_result("c1", "Text")], max_chars=budget)
