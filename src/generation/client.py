"""Text-generation client backed by the Groq chat completions API."""

import logging
from typing import Protocol

import groq
from groq import Groq

from src.config import GenerationConfig
from src.errors import ClientNotInitializedError, GenerationError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a system prompt and a user prompt into text."""

    def generate(self, system_prompt: str, user_prompt: str) -> str: ...


class GroqTextGenerator:
    """Single request/response text generation over the Groq API.

    The client must be initialized with an API key before the first call.

    Args:
        config: GenerationConfig with model, temperature and max_tokens.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config = config
        self._client: Groq | None = None

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def initialize(self, api_key: str) -> None:
        """Create the underlying Groq client.

        Raises:
            ValueError: If api_key is empty.
        """
        if not api_key or not api_key.strip():
            raise ValueError("A Groq API key is required")
        self._client = Groq(api_key=api_key.strip())
        logger.info("Groq client initialized (model=%s)", self._config.model)

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Run one chat completion and return the reply text.

        Raises:
            ClientNotInitializedError: If initialize() was not called.
            GenerationError: On API failure or an empty completion.
        """
        if self._client is None:
            raise ClientNotInitializedError(
                "Groq client not initialized. Call initialize() first."
            )

        try:
            completion = self._client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                model=self._config.model,
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except groq.GroqError as e:
            raise GenerationError(
                f"Groq request failed: {e}", context={"model": self._config.model}
            ) from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise GenerationError(
                "Groq returned an empty completion",
                context={"model": self._config.model},
            )
        return content
