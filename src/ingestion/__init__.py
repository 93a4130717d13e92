"""Book ingestion: text extraction and chunking."""

from src.ingestion.chunker import TextChunker, chunk_text
from src.ingestion.extractor import TextExtractor, title_from_filename

__all__ = ["TextChunker", "TextExtractor", "chunk_text", "title_from_filename"]
