"""
OpenAI chat client implementation.

Provides async HTTP client for OpenAI-compatible chat completion APIs
with retry logic.
"""

import logging

import httpx

from video_notes.config import Settings
from video_notes.services.ai_clients.base import (
    RETRY_DECORATOR,
    AIClientConfig,
    AIClientConnectionError,
    AIClientResponseError,
    AIClientTimeoutError,
    BaseAIClientImpl,
)
from video_notes.services.ai_clients.whisper_client import extract_error_message

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class OpenAIClient(BaseAIClientImpl):
    """
    Async HTTP client for the /chat/completions endpoint.

    Example:
        async with OpenAIClient.from_settings(settings) as client:
            content = await client.chat([
                {"role": "system", "content": "..."},
                {"role": "user", "content": "Hello!"},
            ])
    """

    def __init__(
        self,
        config: AIClientConfig,
        default_model: str = DEFAULT_OPENAI_MODEL,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize OpenAI client.

        Args:
            config: AI client configuration with API URL and key
            default_model: Default model for chat completions
            http_client: Optional preconfigured HTTP client
        """
        super().__init__(config)
        self.default_model = default_model
        self.http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIClient":
        """
        Create OpenAIClient from application settings.

        Args:
            settings: Application settings

        Returns:
            Configured OpenAIClient instance

        Raises:
            ValueError: If OPENAI_API_KEY is not set
        """
        if not settings.openai_api_key:
            raise ValueError(
                "OPENAI_API_KEY not set. Chat completions require authentication."
            )

        config = AIClientConfig(
            base_url=settings.openai_url.rstrip("/"),
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout,
            max_retries=settings.max_retries,
        )
        return cls(config=config, default_model=settings.summarizer_model)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.http_client.aclose()

    @RETRY_DECORATOR
    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.7,
        num_predict: int | None = None,
    ) -> str:
        """
        Chat completion using the OpenAI-compatible endpoint.

        Args:
            messages: List of chat messages [{"role": "user", "content": "..."}]
            model: Model name (default: from settings)
            temperature: Sampling temperature (default: 0.7)
            num_predict: Max tokens to generate (default: None = model default)

        Returns:
            Assistant's response content

        Raises:
            AIClientError: If chat completion fails
        """
        if model is None:
            model = self.default_model

        logger.debug(f"Chat with {model}, {len(messages)} messages")

        request_body: dict = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }

        if num_predict is not None:
            request_body["max_tokens"] = num_predict

        try:
            response = await self.http_client.post(
                f"{self.config.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.config.api_key}"},
                json=request_body,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Chat timeout with {model}: {e}")
            raise AIClientTimeoutError(
                "Chat timeout",
                provider="openai",
                model=model,
                original_error=e,
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Cannot connect to chat API: {e}")
            raise AIClientConnectionError(
                f"Cannot connect to {self.config.base_url}: {e}",
                provider="openai",
                original_error=e,
            ) from e

        if response.is_error:
            message = extract_error_message(response)
            logger.error(f"Chat HTTP error: {response.status_code} - {message[:200]}")
            raise AIClientResponseError(
                f"Chat failed: HTTP {response.status_code}: {message}",
                provider="openai",
                model=model,
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        result = response.json()
        if result.get("error"):
            raise AIClientResponseError(
                f"Chat failed: {result['error']}",
                provider="openai",
                model=model,
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        choices = result.get("choices") or []
        content = choices[0].get("message", {}).get("content") if choices else None
        if not content or not content.strip():
            logger.error(f"Empty response from LLM! Model: {model}")
            raise AIClientResponseError(
                "Chat returned empty content",
                provider="openai",
                model=model,
                status_code=response.status_code,
                response_body=response.text[:500],
            )

        logger.debug(f"Chat response: {len(content)} chars")
        return content
