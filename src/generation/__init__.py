"""Course generation: LLM client, per-chunk requests, and course assembly."""

from src.generation.client import GroqTextGenerator, TextGenerator
from src.generation.content import ContentRequester
from src.generation.course import CourseAssembler

__all__ = ["ContentRequester", "CourseAssembler", "GroqTextGenerator", "TextGenerator"]
