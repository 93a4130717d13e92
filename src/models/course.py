"""Course data models: modules, quizzes, and quiz questions."""

from __future__ import annotations

from typing import Generic, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

OPTION_COUNT = 4

T = TypeVar("T")


class Question(BaseModel):
    """A multiple-choice question with exactly four options.

    Accepts the camelCase names used in model replies
    (``correctAnswer``, ``userAnswer``) as well as the field names.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    question: str
    options: list[str] = Field(min_length=OPTION_COUNT, max_length=OPTION_COUNT)
    correct_answer: int = Field(alias="correctAnswer", ge=0, lt=OPTION_COUNT)
    explanation: str | None = None
    user_answer: int | None = Field(default=None, alias="userAnswer")


class Quiz(BaseModel):
    """The questions attached to one module."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    module_id: str
    questions: list[Question] = Field(default_factory=list)
    completed: bool = False
    score: int | None = None


class Module(BaseModel):
    """One generated course section, derived from one chunk."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    book_id: str
    title: str
    content: str
    order: int = Field(ge=1)
    completed: bool = False


class ModuleContent(BaseModel):
    """The structured reply expected for a module: title, body and summary."""

    title: str
    content: str
    summary: str


class GenerationResult(BaseModel, Generic[T]):
    """A generated value, or the fallback substituted for it.

    ``fallback`` is True when the generation call failed or its reply could
    not be parsed; ``error`` then holds the reason.
    """

    value: T
    fallback: bool = False
    error: str | None = None


class Course(BaseModel):
    """The modules and quizzes generated for one book, in chunk order."""

    modules: list[Module] = Field(default_factory=list)
    quizzes: list[Quiz] = Field(default_factory=list)
    fallback_chunks: list[int] = Field(default_factory=list)
