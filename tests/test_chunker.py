"""Tests for the paragraph-aware chunker."""

import logging
import re

import pytest

from src.config import ChunkingConfig
from src.ingestion.chunker import TextChunker, chunk_text


@pytest.fixture
def config() -> ChunkingConfig:
    return ChunkingConfig()


@pytest.fixture
def chunker(config: ChunkingConfig) -> TextChunker:
    return TextChunker(config=config)


def _non_whitespace(text: str) -> str:
    return re.sub(r"\s+", "", text)


def _sample_book(paragraphs: int = 40) -> str:
    """Deterministic multi-paragraph text with varied paragraph lengths."""
    sentence = "Habits are the compound interest of self-improvement. "
    parts = []
    for i in range(paragraphs):
        parts.append(f"Section {i}. " + sentence * (1 + (i * 7) % 13))
    return "\n\n".join(parts)


# ── Edge cases ───────────────────────────────────────────────────────────────


class TestChunkTextEdgeCases:
    def test_empty_string(self) -> None:
        assert chunk_text("") == []

    def test_whitespace_only(self) -> None:
        assert chunk_text("   \n\n  \n\t\n") == []

    def test_single_word(self) -> None:
        assert chunk_text("word", 4000) == ["word"]

    def test_default_size_keeps_short_text_whole(self) -> None:
        text = "First paragraph.\n\nSecond paragraph."
        assert chunk_text(text) == ["First paragraph.\n\nSecond paragraph."]

    def test_non_positive_size_raises(self) -> None:
        with pytest.raises(ValueError, match="max_chunk_size"):
            chunk_text("text", 0)

    def test_blank_line_with_spaces_is_a_break(self) -> None:
        a, b = "A" * 30, "B" * 30
        assert chunk_text(f"{a}\n   \n{b}", 50) == [a, b]


# ── Paragraph packing ────────────────────────────────────────────────────────


class TestChunkTextParagraphs:
    def test_two_paragraphs_exceeding_limit_split_in_two(self) -> None:
        a, b = "A" * 30, "B" * 30
        assert chunk_text(f"{a}\n\n{b}", 50) == [a, b]

    def test_small_paragraphs_are_packed_together(self) -> None:
        a, b = "A" * 30, "B" * 30
        assert chunk_text(f"{a}\n\n{b}", 100) == [f"{a}\n\n{b}"]

    def test_empty_paragraphs_discarded(self) -> None:
        a, b = "A" * 30, "B" * 30
        assert chunk_text(f"\n\n{a}\n\n\n\n\n\n{b}\n\n", 50) == [a, b]

    def test_preserves_source_order(self) -> None:
        paragraphs = [f"Paragraph {i} " + "x" * 40 for i in range(10)]
        chunks = chunk_text("\n\n".join(paragraphs), 60)
        assert chunks == paragraphs


# ── Forced splits ────────────────────────────────────────────────────────────


class TestChunkTextForcedSplit:
    def test_splits_after_last_period_in_range(self) -> None:
        text = "aaaa. bbbb. cccc. dddd."
        assert chunk_text(text, 12) == ["aaaa. bbbb.", "cccc. dddd."]

    def test_splits_at_limit_without_period(self) -> None:
        chunks = chunk_text("x" * 25, 10)
        assert chunks == ["x" * 10, "x" * 10, "x" * 5]

    def test_oversized_paragraph_after_flush(self) -> None:
        a = "A" * 30
        chunks = chunk_text(f"{a}\n\n{'y' * 60}", 50)
        assert chunks == [a, "y" * 50, "y" * 10]


# ── Properties ───────────────────────────────────────────────────────────────


class TestChunkTextProperties:
    @pytest.mark.parametrize("max_size", [80, 200, 1000, 4000])
    def test_chunks_within_size_limit(self, max_size: int) -> None:
        for chunk in chunk_text(_sample_book(), max_size):
            assert len(chunk) <= max_size

    @pytest.mark.parametrize("max_size", [80, 200, 1000, 4000])
    def test_chunks_are_trimmed_and_non_empty(self, max_size: int) -> None:
        for chunk in chunk_text(_sample_book(), max_size):
            assert chunk
            assert chunk == chunk.strip()

    @pytest.mark.parametrize("max_size", [7, 80, 200, 1000])
    def test_content_preserved(self, max_size: int) -> None:
        text = _sample_book()
        chunks = chunk_text(text, max_size)
        assert _non_whitespace("".join(chunks)) == _non_whitespace(text)

    def test_unbroken_run_content_preserved(self) -> None:
        text = "z" * 1234
        chunks = chunk_text(text, 100)
        assert "".join(chunks) == text
        assert all(len(c) == 100 for c in chunks[:-1])
        assert len(chunks[-1]) == 34


# ── TextChunker ──────────────────────────────────────────────────────────────


class TestTextChunker:
    def test_indices_are_one_based_and_sequential(self) -> None:
        chunker = TextChunker(ChunkingConfig(max_chunk_size=60))
        paragraphs = [f"Paragraph {i} " + "x" * 40 for i in range(5)]
        chunks = chunker.chunk("\n\n".join(paragraphs))
        assert [c.index for c in chunks] == [1, 2, 3, 4, 5]
        assert [c.text for c in chunks] == paragraphs

    def test_empty_text(self, chunker: TextChunker) -> None:
        assert chunker.chunk("") == []

    def test_uses_configured_size(self) -> None:
        chunker = TextChunker(ChunkingConfig(max_chunk_size=10))
        chunks = chunker.chunk("x" * 25)
        assert [len(c.text) for c in chunks] == [10, 10, 5]

    def test_logs_chunk_count(
        self, chunker: TextChunker, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="src.ingestion.chunker"):
            chunker.chunk("one\n\ntwo")
        assert "into 1 chunks" in caplog.text
