"""Book data model."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class Book(BaseModel):
    """Represents an uploaded book."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    author: str = "Unknown Author"
    source_path: str
    page_count: int = 0
    chunk_count: int = 0
    uploaded_at: datetime = Field(default_factory=datetime.now)
    progress: int = Field(default=0, ge=0, le=100)
    course_generated: bool = False
