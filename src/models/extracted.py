"""Extracted text data model."""

from pydantic import BaseModel


class ExtractedText(BaseModel):
    """The result of extracting text from a book file."""

    page_count: int = 1
    text: str
    source_path: str
    method: str  # "pymupdf", "remote", "txt"
