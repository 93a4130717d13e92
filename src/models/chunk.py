"""Chunk data model."""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A bounded-length slice of a book's text, tagged with its position."""

    index: int = Field(ge=1)  # 1-based position in the source text
    text: str
