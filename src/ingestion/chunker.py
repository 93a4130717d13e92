"""Paragraph-aware text chunker for extracted book text."""

import logging
import re

from src.config import ChunkingConfig
from src.models.chunk import Chunk

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_END = "."


def chunk_text(text: str, max_chunk_size: int = 4000) -> list[str]:
    """Split text into ordered chunks of at most ``max_chunk_size`` characters.

    Paragraphs (separated by blank lines) are packed greedily into a buffer.
    When adding a paragraph would overflow a non-empty buffer, the buffer is
    flushed first. A buffer that still overflows (a single oversized
    paragraph) is force-split after the last period within the limit, or at
    the limit itself when no period is in range.

    Args:
        text: The raw extracted text.
        max_chunk_size: Maximum chunk length in characters.

    Returns:
        Non-empty, trimmed chunks in source order.

    Raises:
        ValueError: If max_chunk_size is not positive.
    """
    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")

    if not text:
        return []

    chunks: list[str] = []
    buffer = ""

    for paragraph in PARAGRAPH_BREAK.split(text):
        if not paragraph.strip():
            continue

        if buffer and len(buffer) + len(paragraph) > max_chunk_size:
            _emit(chunks, buffer)
            buffer = ""

        buffer += paragraph + PARAGRAPH_SEPARATOR

        while len(buffer) > max_chunk_size:
            break_point = _find_break_point(buffer, max_chunk_size)
            _emit(chunks, buffer[:break_point])
            buffer = buffer[break_point:]

    _emit(chunks, buffer)
    return chunks


def _find_break_point(buffer: str, max_chunk_size: int) -> int:
    """Return the index just past the last period within the size limit.

    Falls back to the limit (or the buffer length, if shorter) when the
    window holds no period.
    """
    period = buffer.rfind(SENTENCE_END, 0, max_chunk_size)
    if period == -1:
        return min(max_chunk_size, len(buffer))
    return period + 1


def _emit(chunks: list[str], piece: str) -> None:
    # Whitespace-only pieces (e.g. a trailing separator) are dropped
    stripped = piece.strip()
    if stripped:
        chunks.append(stripped)


class TextChunker:
    """Splits extracted book text into indexed chunks.

    Args:
        config: ChunkingConfig with the max_chunk_size setting.
    """

    def __init__(self, config: ChunkingConfig) -> None:
        self._config = config

    def chunk(self, text: str) -> list[Chunk]:
        """Split text into chunks tagged with their 1-based position.

        Args:
            text: The raw extracted text.

        Returns:
            List of Chunk objects in source order.
        """
        pieces = chunk_text(text, self._config.max_chunk_size)
        chunks = [Chunk(index=i, text=piece) for i, piece in enumerate(pieces, start=1)]

        logger.info(
            "Split %d characters into %d chunks (max %d chars)",
            len(text),
            len(chunks),
            self._config.max_chunk_size,
        )
        return chunks
