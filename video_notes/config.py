"""
Application configuration and settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

# Built-in prompt templates shipped with the package
BUILTIN_PROMPTS_DIR = Path(__file__).parent / "prompts"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # AI Services
    openai_api_key: str | None = None
    openai_url: str = "https://api.openai.com/v1"
    anthropic_api_key: str | None = None
    whisper_model: str = "whisper-1"
    summarizer_model: str = "gpt-4o-mini"  # "claude-*" models use the Anthropic API
    summarizer_temperature: float = 0.7
    summarizer_max_tokens: int = 1500
    llm_timeout: int = 300
    transcribe_timeout: int = 7200
    max_retries: int = 3

    # Audio extraction
    audio_bitrate: str = "64k"
    ffmpeg_timeout: int = 3600

    # Batch processing
    video_extension: str = ".mp4"
    videos_root: Path | None = None  # Base folder joined with the CLI argument
    max_concurrency: int = Field(default=4, ge=1)
    fail_fast: bool = True
    document_title: str = "# Resumos dos vídeos"

    # Paths
    prompts_dir: Path | None = None  # External prompts directory (overrides built-in)

    # Logging
    log_level: str = "INFO"
    log_format: str = "structured"  # "simple" or "structured"

    # Per-module log levels (optional overrides)
    log_level_ai_client: str | None = None
    log_level_pipeline: str | None = None
    log_level_transcriber: str | None = None
    log_level_summarizer: str | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def resolve_folder(self, folder: str | Path) -> Path:
        """
        Resolve a folder argument against videos_root.

        Absolute paths are returned unchanged.

        Args:
            folder: Folder name or path given on the command line

        Returns:
            Absolute folder path
        """
        folder = Path(folder)
        if self.videos_root is not None and not folder.is_absolute():
            folder = self.videos_root / folder
        return folder.resolve()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_prompt(
    stage: str,
    component: str,
    settings: Settings | None = None,
) -> str:
    """
    Load a prompt template with external folder priority.

    Lookup order (first found wins):
    1. prompts_dir/{stage}/{component}.md (external)
    2. video_notes/prompts/{stage}/{component}.md (built-in)

    Args:
        stage: Pipeline stage ("summary")
        component: Prompt component ("system", "user")
        settings: Optional settings instance

    Returns:
        Prompt template content

    Raises:
        FileNotFoundError: If no matching prompt file is found
    """
    if settings is None:
        settings = get_settings()

    paths_to_check: list[Path] = []

    if settings.prompts_dir and settings.prompts_dir.exists():
        paths_to_check.append(settings.prompts_dir / stage / f"{component}.md")

    paths_to_check.append(BUILTIN_PROMPTS_DIR / stage / f"{component}.md")

    for path in paths_to_check:
        if path.exists():
            return path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt not found: stage={stage}, component={component}. "
        f"Checked paths: {[str(p) for p in paths_to_check]}"
    )
