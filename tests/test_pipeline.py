"""Tests for the end-to-end course pipeline."""

from pathlib import Path

import pytest

from conftest import RecordingGenerator, is_quiz_prompt, module_reply, quiz_reply
from src.config import AppConfig, ChunkingConfig, GenerationConfig
from src.errors import ChunkingError, NotFoundError
from src.pipeline import CoursePipeline
from src.storage.database import initialize_database
from src.storage.repository import CourseRepository

PARAGRAPHS = [
    "Money is not about intelligence, it's about behavior. " * 3,
    "The line between bold and reckless is thin. " * 3,
    "Compounding rewards patience above all else. " * 3,
]


def _reply(system_prompt: str, user_prompt: str) -> str:
    if is_quiz_prompt(user_prompt):
        return quiz_reply(3)
    return module_reply("A Lesson", "Explanation", "Recap")


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        chunking=ChunkingConfig(max_chunk_size=200),
        generation=GenerationConfig(max_questions=3),
    )


@pytest.fixture
def repository(tmp_path: Path) -> CourseRepository:
    db_path = tmp_path / "app.db"
    initialize_database(db_path)
    return CourseRepository(db_path)


@pytest.fixture
def generator() -> RecordingGenerator:
    return RecordingGenerator(_reply)


@pytest.fixture
def pipeline(
    config: AppConfig, repository: CourseRepository, generator: RecordingGenerator
) -> CoursePipeline:
    return CoursePipeline(config=config, repository=repository, generator=generator)


@pytest.fixture
def book_file(tmp_path: Path) -> Path:
    path = tmp_path / "the-psychology_of-money.txt"
    path.write_text("\n\n".join(PARAGRAPHS), encoding="utf-8")
    return path


class TestIngestBook:
    def test_stores_book_and_chunks(
        self, pipeline: CoursePipeline, repository: CourseRepository, book_file: Path
    ) -> None:
        book = pipeline.ingest_book(book_file, title="The Psychology of Money", author="Morgan Housel")

        assert book.chunk_count == 3
        stored = repository.get_book(book.id)
        assert stored is not None
        assert stored.author == "Morgan Housel"
        assert [c.text for c in repository.get_chunks(book.id)] == [p.strip() for p in PARAGRAPHS]

    def test_title_and_author_defaults(
        self, pipeline: CoursePipeline, book_file: Path
    ) -> None:
        book = pipeline.ingest_book(book_file)
        assert book.title == "The Psychology Of Money"
        assert book.author == "Unknown Author"

    def test_empty_text_raises(self, pipeline: CoursePipeline, tmp_path: Path) -> None:
        path = tmp_path / "blank.txt"
        path.write_text("   \n\n  ", encoding="utf-8")
        with pytest.raises(ChunkingError):
            pipeline.ingest_book(path)

    def test_extraction_failure_propagates(self, pipeline: CoursePipeline) -> None:
        with pytest.raises(FileNotFoundError):
            pipeline.ingest_book("/nonexistent/book.pdf")


class TestGenerateCourse:
    def test_generates_and_stores_course(
        self, pipeline: CoursePipeline, repository: CourseRepository, book_file: Path
    ) -> None:
        book = pipeline.ingest_book(book_file, title="The Psychology of Money")
        course = pipeline.generate_course(book.id)

        assert len(course.modules) == 3
        modules = repository.get_modules_by_book(book.id)
        assert [m.title for m in modules] == [
            "Chapter 1: A Lesson",
            "Chapter 2: A Lesson",
            "Chapter 3: A Lesson",
        ]
        for module in modules:
            quiz = repository.get_quiz_by_module(module.id)
            assert quiz is not None
            assert len(quiz.questions) == 3

        stored = repository.get_book(book.id)
        assert stored is not None
        assert stored.course_generated is True

    def test_uses_configured_system_prompt(
        self, repository: CourseRepository, generator: RecordingGenerator, book_file: Path
    ) -> None:
        config = AppConfig(generation=GenerationConfig(system_prompt="Teach kindly."))
        pipeline = CoursePipeline(config=config, repository=repository, generator=generator)

        pipeline.process_book(book_file)
        assert all(system == "Teach kindly." for system, _ in generator.calls)

    def test_unknown_book_raises(self, pipeline: CoursePipeline) -> None:
        with pytest.raises(NotFoundError):
            pipeline.generate_course("missing")

    def test_failed_generation_still_stores_course(
        self,
        config: AppConfig,
        repository: CourseRepository,
        failing_generator: RecordingGenerator,
        book_file: Path,
    ) -> None:
        pipeline = CoursePipeline(config=config, repository=repository, generator=failing_generator)
        book, course = pipeline.process_book(book_file, title="Money")

        assert course.fallback_chunks == [1, 2, 3]
        modules = repository.get_modules_by_book(book.id)
        assert modules[0].title == "Chapter 1: Content from Money - Part 1"
