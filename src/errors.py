"""Exception hierarchy for the Book Course Generator.

Every domain exception carries a human-readable ``message`` and an optional
``context`` dict with structured details (file path, book id, ...).
"""

from typing import Any


class CourseGenError(Exception):
    """Base exception for all course generation errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ExtractionError(CourseGenError):
    """Text could not be extracted from a book file."""


class ChunkingError(CourseGenError):
    """Extracted text produced no usable chunks."""


class GenerationError(CourseGenError):
    """The text-generation service failed or returned an unusable reply."""


class ClientNotInitializedError(GenerationError):
    """The text-generation client was used before an API key was set."""


class NotFoundError(CourseGenError):
    """A requested book, module, or quiz does not exist."""
