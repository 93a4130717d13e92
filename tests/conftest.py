"""Shared test doubles."""

import json
from collections.abc import Callable

import pytest


class RecordingGenerator:
    """Text generator double that records every call.

    ``reply`` is either a fixed string or a callable taking
    (system_prompt, user_prompt) and returning the reply. A callable may
    raise to simulate a failed request.
    """

    def __init__(self, reply: str | Callable[[str, str], str] = "") -> None:
        self._reply = reply
        self.calls: list[tuple[str, str]] = []

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if callable(self._reply):
            return self._reply(system_prompt, user_prompt)
        return self._reply


def module_reply(title: str, content: str, summary: str) -> str:
    return json.dumps({"title": title, "content": content, "summary": summary})


def quiz_reply(count: int, prefix: str = "Question") -> str:
    return json.dumps(
        [
            {
                "question": f"{prefix} {n}?",
                "options": ["A", "B", "C", "D"],
                "correctAnswer": n % 4,
                "explanation": f"Because {n}.",
            }
            for n in range(1, count + 1)
        ]
    )


def is_quiz_prompt(user_prompt: str) -> bool:
    return "multiple-choice quiz questions" in user_prompt


@pytest.fixture
def failing_generator() -> RecordingGenerator:
    def fail(system_prompt: str, user_prompt: str) -> str:
        raise RuntimeError("quota exceeded")

    return RecordingGenerator(fail)
