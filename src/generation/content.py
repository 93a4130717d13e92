"""Per-chunk module and quiz generation with deterministic fallbacks."""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from src.config import DEFAULT_SYSTEM_PROMPT
from src.errors import GenerationError
from src.generation.client import TextGenerator
from src.generation.prompts import (
    MODULE_ASSISTANT_SUFFIX,
    MODULE_PROMPT,
    QUIZ_PROMPT,
    build_module_context,
    build_quiz_context,
)
from src.models.course import GenerationResult, Module, ModuleContent, Question

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY_CHARS = 200
FALLBACK_OPTIONS = ["Option A", "Option B", "Option C", "Option D"]
FALLBACK_EXPLANATION = "This is a sample explanation for the correct answer."
ASSISTANT_ERROR_REPLY = (
    "I'm sorry, there was an error processing your request. Please try again later."
)

QUESTION_FIELDS = ("question", "options", "correctAnswer", "explanation")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)
_SPANS = {
    "{": re.compile(r"\{.*\}", re.DOTALL),
    "[": re.compile(r"\[.*\]", re.DOTALL),
}


def extract_json(text: str, opener: str) -> Any:
    """Parse the JSON value in a model reply.

    Tries the reply as-is, then any fenced code block, then the widest
    span starting with ``opener`` ("{" or "[").

    Raises:
        GenerationError: If no candidate parses.
    """
    candidates = [text, *_FENCED_BLOCK.findall(text), *_SPANS[opener].findall(text)]
    for candidate in candidates:
        try:
            return json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue

    raise GenerationError(
        "Could not extract JSON from reply", context={"reply": text[:500]}
    )


def fallback_module_content(
    chunk: str, chunk_index: int, total_chunks: int, book_title: str
) -> ModuleContent:
    return ModuleContent(
        title=f"Content from {book_title} - Part {chunk_index}",
        content=(
            f"This section covers part {chunk_index} of {total_chunks} from the book. "
            "The AI has analyzed the content and extracted key concepts to help you "
            "understand the material better."
        ),
        summary=chunk[:FALLBACK_SUMMARY_CHARS] + "...",
    )


def fallback_questions(max_questions: int) -> list[Question]:
    return [
        Question(
            question=f"Sample question {n} about the content?",
            options=list(FALLBACK_OPTIONS),
            correct_answer=0,
            explanation=FALLBACK_EXPLANATION,
        )
        for n in range(1, max_questions + 1)
    ]


class ContentRequester:
    """Generates module content and quiz questions for single chunks.

    Neither generation method raises: a failed call or a reply that does
    not match the expected structure is replaced with fallback content and
    reported through ``GenerationResult.fallback``.

    Args:
        generator: The text-generation client.
        system_prompt: System prompt sent with every request.
    """

    def __init__(
        self, generator: TextGenerator, system_prompt: str = DEFAULT_SYSTEM_PROMPT
    ) -> None:
        self._generator = generator
        self._system_prompt = system_prompt

    def generate_module_content(
        self,
        chunk: str,
        previous_summary: str,
        chunk_index: int,
        total_chunks: int,
        book_title: str,
        author: str,
    ) -> GenerationResult[ModuleContent]:
        """Generate the title, explanation, and forward summary for a chunk.

        Args:
            chunk: The chunk text.
            previous_summary: Summary of the preceding chunk ("" for the first).
            chunk_index: 1-based chunk position.
            total_chunks: Number of chunks in the book.
            book_title: Book title, used in prompts and fallback content.
            author: Book author.

        Returns:
            The parsed module content, or fallback content on failure.
        """
        context = build_module_context(
            chunk, previous_summary, chunk_index, total_chunks, book_title, author
        )
        prompt = MODULE_PROMPT.format(book_title=book_title, author=author, context=context)

        try:
            reply = self._generator.generate(self._system_prompt, prompt)
            data = extract_json(reply, "{")
            if not isinstance(data, dict):
                raise GenerationError("Module reply is not a JSON object")
            content = ModuleContent.model_validate(data)
        except (GenerationError, ValidationError) as e:
            return self._module_fallback(chunk, chunk_index, total_chunks, book_title, e)
        except Exception as e:
            logger.exception("Unexpected error generating module content")
            return self._module_fallback(chunk, chunk_index, total_chunks, book_title, e)

        return GenerationResult[ModuleContent](value=content)

    def generate_quiz_questions(
        self,
        chunk: str,
        previous_summary: str,
        book_title: str,
        max_questions: int = 5,
    ) -> GenerationResult[list[Question]]:
        """Generate up to ``max_questions`` multiple-choice questions for a chunk.

        Returns:
            The parsed questions (truncated to max_questions, fresh ids), or
            exactly max_questions placeholder questions on failure.
        """
        context = build_quiz_context(chunk, previous_summary, book_title)
        prompt = QUIZ_PROMPT.format(
            book_title=book_title, context=context, max_questions=max_questions
        )

        try:
            reply = self._generator.generate(self._system_prompt, prompt)
            questions = self._parse_questions(extract_json(reply, "["), max_questions)
        except (GenerationError, ValidationError) as e:
            return self._quiz_fallback(max_questions, e)
        except Exception as e:
            logger.exception("Unexpected error generating quiz questions")
            return self._quiz_fallback(max_questions, e)

        return GenerationResult[list[Question]](value=questions)

    def answer_question(self, question: str, module: Module | None = None) -> str:
        """Answer a learner's question, optionally scoped to one module.

        Never raises; a failed request yields an apology message.
        """
        system_prompt = self._system_prompt
        if module is not None:
            system_prompt += MODULE_ASSISTANT_SUFFIX.format(
                module_title=module.title, module_content=module.content
            )

        try:
            return self._generator.generate(system_prompt, question)
        except Exception:
            logger.exception("Error generating assistant reply")
            return ASSISTANT_ERROR_REPLY

    def _parse_questions(self, data: Any, max_questions: int) -> list[Question]:
        # Some models wrap the array: {"questions": [...]}
        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            data = data["questions"]
        if not isinstance(data, list):
            raise GenerationError("Quiz reply is not a JSON array")

        questions = []
        for item in data[:max_questions]:
            if not isinstance(item, dict):
                raise GenerationError("Quiz reply item is not a JSON object")
            # Only the known fields are copied; ids are always fresh
            questions.append(
                Question.model_validate({key: item.get(key) for key in QUESTION_FIELDS})
            )
        return questions

    def _module_fallback(
        self,
        chunk: str,
        chunk_index: int,
        total_chunks: int,
        book_title: str,
        error: Exception,
    ) -> GenerationResult[ModuleContent]:
        logger.warning(
            "Using fallback module content for chunk %d/%d: %s",
            chunk_index,
            total_chunks,
            error,
        )
        return GenerationResult[ModuleContent](
            value=fallback_module_content(chunk, chunk_index, total_chunks, book_title),
            fallback=True,
            error=str(error),
        )

    def _quiz_fallback(
        self, max_questions: int, error: Exception
    ) -> GenerationResult[list[Question]]:
        logger.warning("Using %d fallback quiz questions: %s", max_questions, error)
        return GenerationResult[list[Question]](
            value=fallback_questions(max_questions),
            fallback=True,
            error=str(error),
        )
