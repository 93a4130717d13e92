"""Course assembly: a sequential fold over chunks threading a rolling summary."""

import logging
from collections.abc import Sequence
from functools import reduce

from pydantic import BaseModel, Field

from src.generation.content import ContentRequester
from src.models.course import Course, Module, Quiz

logger = logging.getLogger(__name__)


class _AssemblyState(BaseModel):
    """Accumulator carried from one chunk to the next."""

    modules: list[Module] = Field(default_factory=list)
    quizzes: list[Quiz] = Field(default_factory=list)
    previous_summary: str = ""
    fallback_chunks: list[int] = Field(default_factory=list)


class CourseAssembler:
    """Turns an ordered list of chunks into modules and quizzes.

    Chunks are processed strictly in order: the summary produced for chunk
    i is the context for chunk i+1, so iterations never overlap.

    Args:
        requester: ContentRequester used for both generation steps.
        max_questions: Questions requested per quiz.
    """

    def __init__(self, requester: ContentRequester, max_questions: int = 5) -> None:
        self._requester = requester
        self._max_questions = max_questions

    def generate_course(
        self, book_id: str, chunks: Sequence[str], title: str, author: str
    ) -> Course:
        """Generate one module and one quiz per chunk.

        Args:
            book_id: Id of the book the modules belong to.
            chunks: Chunk texts in source order.
            title: Book title.
            author: Book author.

        Returns:
            A Course with len(chunks) modules (order 1..k) and matching quizzes.
        """
        total = len(chunks)

        def step(state: _AssemblyState, item: tuple[int, str]) -> _AssemblyState:
            chunk_index, chunk = item
            logger.info("Generating module %d/%d for '%s'", chunk_index, total, title)

            content = self._requester.generate_module_content(
                chunk, state.previous_summary, chunk_index, total, title, author
            )
            module = Module(
                book_id=book_id,
                title=f"Chapter {chunk_index}: {content.value.title}",
                content=content.value.content,
                order=chunk_index,
            )

            # Same summary as the module step; it advances only afterwards
            questions = self._requester.generate_quiz_questions(
                chunk, state.previous_summary, title, self._max_questions
            )
            quiz = Quiz(module_id=module.id, questions=questions.value)

            fallback_chunks = state.fallback_chunks
            if content.fallback or questions.fallback:
                fallback_chunks = [*fallback_chunks, chunk_index]

            return _AssemblyState(
                modules=[*state.modules, module],
                quizzes=[*state.quizzes, quiz],
                previous_summary=content.value.summary,
                fallback_chunks=fallback_chunks,
            )

        final = reduce(step, enumerate(chunks, start=1), _AssemblyState())

        if final.fallback_chunks:
            logger.warning(
                "Course for '%s' used fallback content for chunks %s",
                title,
                final.fallback_chunks,
            )

        return Course(
            modules=final.modules,
            quizzes=final.quizzes,
            fallback_chunks=final.fallback_chunks,
        )
