"""SQLite-backed store for books, chunks, modules, and quizzes."""

import json
import logging
import math
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from src.errors import NotFoundError
from src.models.book import Book
from src.models.chunk import Chunk
from src.models.course import Module, Question, Quiz
from src.storage.database import get_connection

logger = logging.getLogger(__name__)


class CourseRepository:
    """Read and append operations over the course database.

    The schema must already exist (see ``initialize_database``).

    Args:
        db_path: Path to the SQLite database file.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = get_connection(self._db_path)
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ── Books ────────────────────────────────────────────────────────────

    def add_book(self, book: Book) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO books (id, title, author, source_path, page_count,
                                   chunk_count, uploaded_at, progress, course_generated)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    book.id,
                    book.title,
                    book.author,
                    book.source_path,
                    book.page_count,
                    book.chunk_count,
                    book.uploaded_at.isoformat(),
                    book.progress,
                    int(book.course_generated),
                ),
            )
        logger.info("Stored book %s ('%s')", book.id, book.title)

    def get_book(self, book_id: str) -> Book | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        return _row_to_book(row) if row else None

    def list_books(self) -> list[Book]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM books ORDER BY uploaded_at").fetchall()
        return [_row_to_book(row) for row in rows]

    def update_book_progress(self, book_id: str, progress: int) -> None:
        if not 0 <= progress <= 100:
            raise ValueError(f"progress must be between 0 and 100, got {progress}")
        self._update_one(
            "UPDATE books SET progress = ? WHERE id = ?", (progress, book_id), "book", book_id
        )

    def mark_course_generated(self, book_id: str) -> None:
        self._update_one(
            "UPDATE books SET course_generated = 1 WHERE id = ?", (book_id,), "book", book_id
        )

    # ── Chunks ───────────────────────────────────────────────────────────

    def save_chunks(self, book_id: str, chunks: Sequence[Chunk]) -> None:
        with self._connect() as conn:
            conn.executemany(
                "INSERT INTO chunks (book_id, chunk_index, text) VALUES (?, ?, ?)",
                [(book_id, chunk.index, chunk.text) for chunk in chunks],
            )

    def get_chunks(self, book_id: str) -> list[Chunk]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT chunk_index, text FROM chunks WHERE book_id = ? ORDER BY chunk_index",
                (book_id,),
            ).fetchall()
        return [Chunk(index=row["chunk_index"], text=row["text"]) for row in rows]

    # ── Modules ──────────────────────────────────────────────────────────

    def add_modules(self, modules: Sequence[Module]) -> None:
        with self._connect() as conn:
            _insert_modules(conn, modules)

    def get_module(self, module_id: str) -> Module | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM modules WHERE id = ?", (module_id,)).fetchone()
        return _row_to_module(row) if row else None

    def get_modules_by_book(self, book_id: str) -> list[Module]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM modules WHERE book_id = ? ORDER BY sort_order", (book_id,)
            ).fetchall()
        return [_row_to_module(row) for row in rows]

    def mark_module_complete(self, module_id: str) -> None:
        self._update_one(
            "UPDATE modules SET completed = 1 WHERE id = ?", (module_id,), "module", module_id
        )

    # ── Quizzes ──────────────────────────────────────────────────────────

    def add_quizzes(self, quizzes: Sequence[Quiz]) -> None:
        with self._connect() as conn:
            _insert_quizzes(conn, quizzes)

    def add_course(
        self, book_id: str, modules: Sequence[Module], quizzes: Sequence[Quiz]
    ) -> None:
        """Store a generated course and mark its book as generated.

        All writes share one transaction: if any insert fails, nothing is
        stored and the book keeps ``course_generated`` unset.

        Raises:
            NotFoundError: If no book has the given id.
        """
        with self._connect() as conn:
            _insert_modules(conn, modules)
            _insert_quizzes(conn, quizzes)
            cursor = conn.execute(
                "UPDATE books SET course_generated = 1 WHERE id = ?", (book_id,)
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Book not found: {book_id}", context={"book_id": book_id})
        logger.info(
            "Stored course for book %s: %d modules, %d quizzes",
            book_id,
            len(modules),
            len(quizzes),
        )

    def get_quiz_by_module(self, module_id: str) -> Quiz | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM quizzes WHERE module_id = ?", (module_id,)
            ).fetchone()
            if row is None:
                return None
            return self._load_quiz(conn, row)

    def get_quiz(self, quiz_id: str) -> Quiz | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM quizzes WHERE id = ?", (quiz_id,)).fetchone()
            if row is None:
                return None
            return self._load_quiz(conn, row)

    def submit_quiz_answer(self, quiz_id: str, question_id: str, answer_index: int) -> bool:
        """Record a learner's answer and return whether it is correct.

        Raises:
            NotFoundError: If the question does not belong to the quiz.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT correct_answer FROM questions WHERE id = ? AND quiz_id = ?",
                (question_id, quiz_id),
            ).fetchone()
            if row is None:
                raise NotFoundError(
                    f"Question not found: {question_id}",
                    context={"quiz_id": quiz_id, "question_id": question_id},
                )
            conn.execute(
                "UPDATE questions SET user_answer = ? WHERE id = ?",
                (answer_index, question_id),
            )
        return row["correct_answer"] == answer_index

    def calculate_quiz_score(self, quiz_id: str) -> int:
        """Score a quiz as the rounded percentage of correct answers.

        The score is stored and the quiz is marked completed.
        """
        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz not found: {quiz_id}", context={"quiz_id": quiz_id})

        if not quiz.questions:
            score = 0
        else:
            correct = sum(
                1
                for q in quiz.questions
                if q.user_answer is not None and q.user_answer == q.correct_answer
            )
            # Halves round up
            score = math.floor(correct * 100 / len(quiz.questions) + 0.5)

        with self._connect() as conn:
            conn.execute(
                "UPDATE quizzes SET score = ?, completed = 1 WHERE id = ?", (score, quiz_id)
            )
        return score

    def _load_quiz(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Quiz:
        question_rows = conn.execute(
            "SELECT * FROM questions WHERE quiz_id = ? ORDER BY position", (row["id"],)
        ).fetchall()
        return Quiz(
            id=row["id"],
            module_id=row["module_id"],
            questions=[_row_to_question(q) for q in question_rows],
            completed=bool(row["completed"]),
            score=row["score"],
        )

    def _update_one(self, sql: str, params: tuple, kind: str, item_id: str) -> None:
        with self._connect() as conn:
            cursor = conn.execute(sql, params)
            if cursor.rowcount == 0:
                raise NotFoundError(
                    f"{kind.capitalize()} not found: {item_id}", context={"id": item_id}
                )


def _row_to_book(row: sqlite3.Row) -> Book:
    return Book(
        id=row["id"],
        title=row["title"],
        author=row["author"],
        source_path=row["source_path"],
        page_count=row["page_count"],
        chunk_count=row["chunk_count"],
        uploaded_at=row["uploaded_at"],
        progress=row["progress"],
        course_generated=bool(row["course_generated"]),
    )


def _row_to_module(row: sqlite3.Row) -> Module:
    return Module(
        id=row["id"],
        book_id=row["book_id"],
        title=row["title"],
        content=row["content"],
        order=row["sort_order"],
        completed=bool(row["completed"]),
    )


def _row_to_question(row: sqlite3.Row) -> Question:
    return Question(
        id=row["id"],
        question=row["question"],
        options=json.loads(row["options_json"]),
        correct_answer=row["correct_answer"],
        explanation=row["explanation"],
        user_answer=row["user_answer"],
    )


def _insert_modules(conn: sqlite3.Connection, modules: Sequence[Module]) -> None:
    conn.executemany(
        """
        INSERT INTO modules (id, book_id, title, content, sort_order, completed)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [(m.id, m.book_id, m.title, m.content, m.order, int(m.completed)) for m in modules],
    )


def _insert_quizzes(conn: sqlite3.Connection, quizzes: Sequence[Quiz]) -> None:
    for quiz in quizzes:
        conn.execute(
            "INSERT INTO quizzes (id, module_id, completed, score) VALUES (?, ?, ?, ?)",
            (quiz.id, quiz.module_id, int(quiz.completed), quiz.score),
        )
        conn.executemany(
            """
            INSERT INTO questions (id, quiz_id, position, question, options_json,
                                   correct_answer, explanation, user_answer)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    q.id,
                    quiz.id,
                    position,
                    q.question,
                    json.dumps(q.options, ensure_ascii=False),
                    q.correct_answer,
                    q.explanation,
                    q.user_answer,
                )
                for position, q in enumerate(quiz.questions)
            ],
        )
