"""Configuration loader for the Book Course Generator."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI learning assistant that helps users understand "
    "concepts from books and learning materials."
)


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Book Course Generator"
    version: str = "1.0.0"
    log_level: str = "INFO"


class ChunkingConfig(BaseModel):
    """Text chunking configuration."""

    max_chunk_size: int = Field(default=4000, gt=0)


class GenerationConfig(BaseModel):
    """LLM generation configuration."""

    model: str = "llama3-8b-8192"
    max_tokens: int = 1000
    temperature: float = 0.7
    max_questions: int = 5
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


class ExtractionConfig(BaseModel):
    """PDF text extraction configuration."""

    remote_url: str | None = None
    timeout: float = 60.0


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    sqlite_path: str = "./db/app.db"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # API key loaded from environment
    groq_api_key: str | None = None


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override API key from environment
    config.groq_api_key = os.getenv("GROQ_API_KEY")

    return config
