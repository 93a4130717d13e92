"""End-to-end course generation: extract, chunk, generate, persist."""

import logging
from pathlib import Path

from src.config import AppConfig
from src.errors import ChunkingError, NotFoundError
from src.generation.client import TextGenerator
from src.generation.content import ContentRequester
from src.generation.course import CourseAssembler
from src.ingestion.chunker import TextChunker
from src.ingestion.extractor import TextExtractor, title_from_filename
from src.models.book import Book
from src.models.course import Course
from src.storage.repository import CourseRepository

logger = logging.getLogger(__name__)


class CoursePipeline:
    """Wires the extractor, chunker, and generators to a repository.

    Args:
        config: Application configuration.
        repository: Store that receives books, chunks, modules, and quizzes.
        generator: Text-generation client (already initialized).
        extractor: Optional TextExtractor; built from config when omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        repository: CourseRepository,
        generator: TextGenerator,
        extractor: TextExtractor | None = None,
    ) -> None:
        self._config = config
        self._repository = repository
        self._extractor = extractor or TextExtractor(config.extraction)
        self._chunker = TextChunker(config.chunking)
        requester = ContentRequester(generator, config.generation.system_prompt)
        self._assembler = CourseAssembler(requester, config.generation.max_questions)

    def ingest_book(
        self, file_path: str | Path, title: str | None = None, author: str = ""
    ) -> Book:
        """Extract and chunk a book file, then store the book and its chunks.

        Args:
            file_path: Path to the PDF (or plain text) file.
            title: Book title; derived from the file name when omitted.
            author: Book author; "Unknown Author" when blank.

        Returns:
            The stored Book.

        Raises:
            ExtractionError: If no text could be extracted.
            ChunkingError: If the extracted text yields no chunks.
        """
        extracted = self._extractor.extract(file_path)
        chunks = self._chunker.chunk(extracted.text)
        if not chunks:
            raise ChunkingError(
                "Failed to create content chunks from book",
                context={"source_path": extracted.source_path},
            )

        book = Book(
            title=(title or "").strip() or title_from_filename(file_path),
            author=author.strip() or "Unknown Author",
            source_path=extracted.source_path,
            page_count=extracted.page_count,
            chunk_count=len(chunks),
        )
        self._repository.add_book(book)
        self._repository.save_chunks(book.id, chunks)

        logger.info(
            "Ingested '%s': %d pages, %d chunks (%s)",
            book.title,
            book.page_count,
            len(chunks),
            extracted.method,
        )
        return book

    def generate_course(self, book_id: str) -> Course:
        """Generate and store the modules and quizzes for an ingested book.

        Raises:
            NotFoundError: If the book does not exist.
        """
        book = self._repository.get_book(book_id)
        if book is None:
            raise NotFoundError(f"Book not found: {book_id}", context={"book_id": book_id})

        chunks = [chunk.text for chunk in self._repository.get_chunks(book_id)]
        course = self._assembler.generate_course(book.id, chunks, book.title, book.author)

        self._repository.add_course(book.id, course.modules, course.quizzes)

        logger.info(
            "Generated course for '%s': %d modules, %d with fallback content",
            book.title,
            len(course.modules),
            len(course.fallback_chunks),
        )
        return course

    def process_book(
        self, file_path: str | Path, title: str | None = None, author: str = ""
    ) -> tuple[Book, Course]:
        """Ingest a book and generate its course in one call."""
        book = self.ingest_book(file_path, title=title, author=author)
        course = self.generate_course(book.id)
        return book, course
