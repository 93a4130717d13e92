"""Data models for the Book Course Generator."""

from src.models.book import Book
from src.models.chunk import Chunk
from src.models.course import (
    Course,
    GenerationResult,
    Module,
    ModuleContent,
    Question,
    Quiz,
)
from src.models.extracted import ExtractedText

__all__ = [
    "Book",
    "Chunk",
    "Course",
    "ExtractedText",
    "GenerationResult",
    "Module",
    "ModuleContent",
    "Question",
    "Quiz",
]
