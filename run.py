"""Entry point for the Book Course Generator."""

import argparse
import logging
import sys

from src.config import load_config
from src.errors import ChunkingError, ExtractionError
from src.generation.client import GroqTextGenerator
from src.pipeline import CoursePipeline
from src.storage.database import initialize_database
from src.storage.repository import CourseRepository


def main() -> None:
    """Turn a PDF book into a course of modules and quizzes."""
    arg_parser = argparse.ArgumentParser(description="Generate a course from a PDF book.")
    arg_parser.add_argument("file", help="Path to the PDF file")
    arg_parser.add_argument("--title", help="Book title (defaults to the file name)")
    arg_parser.add_argument("--author", default="", help="Book author")
    arg_parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    args = arg_parser.parse_args()

    config = load_config(args.config)
    logging.basicConfig(
        level=config.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not config.groq_api_key:
        sys.exit("GROQ_API_KEY is not set")

    # Initialize SQLite database
    initialize_database(config.storage.sqlite_path)

    generator = GroqTextGenerator(config.generation)
    generator.initialize(config.groq_api_key)

    pipeline = CoursePipeline(
        config=config,
        repository=CourseRepository(config.storage.sqlite_path),
        generator=generator,
    )

    try:
        book, course = pipeline.process_book(args.file, title=args.title, author=args.author)
    except (FileNotFoundError, ValueError, ExtractionError, ChunkingError) as e:
        sys.exit(f"Could not process {args.file}: {e}")

    print(f"{book.title} by {book.author}: {len(course.modules)} modules")
    for module, quiz in zip(course.modules, course.quizzes):
        print(f"  {module.title} ({len(quiz.questions)} questions)")
    if course.fallback_chunks:
        print(f"  Placeholder content used for parts: {course.fallback_chunks}")


if __name__ == "__main__":
    main()
