"""
Whisper transcription client implementation.

Provides async HTTP client for the OpenAI audio transcription API with
retry logic.
"""

import asyncio
import logging
import time
from pathlib import Path

import httpx

from video_notes.config import Settings
from video_notes.services.ai_clients.base import (
    RETRY_DECORATOR,
    AIClientConfig,
    AIClientConnectionError,
    AIClientResponseError,
    AIClientTimeoutError,
)

logger = logging.getLogger(__name__)


def extract_error_message(response: httpx.Response) -> str:
    """Get the error message from an API error payload.

    OpenAI-style errors look like {"error": {"message": "..."}}; anything
    else falls back to the raw body.
    """
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    if error:
        return str(error)
    return response.text[:500]


class WhisperClient:
    """
    Async HTTP client for the Whisper transcription API.

    Example:
        async with WhisperClient.from_settings(settings) as client:
            text = await client.transcribe(audio_path)
    """

    def __init__(
        self,
        config: AIClientConfig,
        model: str = "whisper-1",
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Whisper client.

        Args:
            config: Client configuration with API URL and key
            model: Transcription model name
            http_client: Optional preconfigured HTTP client
        """
        self.config = config
        self.model = model
        self.http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhisperClient":
        """
        Create WhisperClient from application settings.

        Args:
            settings: Application settings

        Returns:
            Configured WhisperClient instance

        Raises:
            ValueError: If OPENAI_API_KEY is not set
        """
        if not settings.openai_api_key:
            raise ValueError(
                "OPENAI_API_KEY not set. Whisper transcription requires authentication."
            )

        config = AIClientConfig(
            base_url=settings.openai_url.rstrip("/"),
            api_key=settings.openai_api_key,
            timeout=settings.transcribe_timeout,
            max_retries=settings.max_retries,
        )
        return cls(config=config, model=settings.whisper_model)

    async def __aenter__(self) -> "WhisperClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http_client.aclose()

    @RETRY_DECORATOR
    async def transcribe(self, file_path: Path) -> str:
        """
        Transcribe an audio file.

        Args:
            file_path: Path to audio file

        Returns:
            Transcript text

        Raises:
            FileNotFoundError: If file doesn't exist
            AIClientError: If transcription fails
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        # Read in thread pool to not block the event loop on large files
        audio_bytes = await asyncio.to_thread(file_path.read_bytes)
        file_size_mb = len(audio_bytes) / 1024 / 1024
        logger.info(f"Transcribing: {file_path.name} ({file_size_mb:.1f} MB)")

        start_time = time.time()

        try:
            response = await self.http_client.post(
                f"{self.config.base_url}/audio/transcriptions",
                headers={"Authorization": f"Bearer {self.config.api_key}"},
                files={"file": (file_path.name, audio_bytes, "audio/mpeg")},
                data={"model": self.model},
            )
        except httpx.TimeoutException as e:
            elapsed = time.time() - start_time
            logger.error(f"Transcription timeout after {elapsed:.1f}s: {e}")
            raise AIClientTimeoutError(
                f"Transcription timeout after {elapsed:.1f}s",
                provider="whisper",
                model=self.model,
                original_error=e,
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Cannot connect to Whisper API: {e}")
            raise AIClientConnectionError(
                f"Cannot connect to {self.config.base_url}: {e}",
                provider="whisper",
                original_error=e,
            ) from e

        elapsed = time.time() - start_time

        if response.is_error:
            message = extract_error_message(response)
            logger.error(
                f"Transcription HTTP error after {elapsed:.1f}s: "
                f"{response.status_code} - {message[:200]}"
            )
            raise AIClientResponseError(
                f"Transcription failed: HTTP {response.status_code}: {message}",
                provider="whisper",
                model=self.model,
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        body = response.json()
        if body.get("error"):
            raise AIClientResponseError(
                f"Transcription failed: {body['error']}",
                provider="whisper",
                model=self.model,
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        text = body.get("text", "")
        logger.info(f"Transcription complete: {len(text)} chars, elapsed: {elapsed:.1f}s")
        return text
