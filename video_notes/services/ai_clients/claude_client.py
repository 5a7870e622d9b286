"""
Claude API client implementation.

Provides async client for Anthropic's Claude API. Retries on transient
errors are handled by the SDK itself (max_retries).
"""

import logging
import os

from anthropic import APIConnectionError, APIStatusError, APITimeoutError, AsyncAnthropic

from video_notes.config import Settings
from video_notes.services.ai_clients.base import (
    AIClientConfig,
    AIClientConnectionError,
    AIClientResponseError,
    AIClientTimeoutError,
    BaseAIClientImpl,
)

logger = logging.getLogger(__name__)

# Default Claude model (using alias for auto-updates)
DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5"


class ClaudeClient(BaseAIClientImpl):
    """
    Async client for Anthropic's Claude API.

    Example:
        async with ClaudeClient.from_settings(settings) as client:
            content = await client.chat([
                {"role": "system", "content": "..."},
                {"role": "user", "content": "Hello!"},
            ])
    """

    def __init__(
        self,
        config: AIClientConfig,
        default_model: str = DEFAULT_CLAUDE_MODEL,
        client: AsyncAnthropic | None = None,
    ):
        """
        Initialize Claude client.

        Args:
            config: AI client configuration with API key
            default_model: Default Claude model to use
            client: Optional preconfigured SDK client

        Raises:
            ValueError: If API key is not provided
        """
        super().__init__(config)
        self.default_model = default_model

        if client is None:
            if not config.api_key:
                raise ValueError(
                    "ClaudeClient requires API key. "
                    "Set ANTHROPIC_API_KEY environment variable."
                )
            client = AsyncAnthropic(
                api_key=config.api_key,
                timeout=config.timeout,
                max_retries=config.max_retries,
            )

        self.client = client
        logger.info(f"ClaudeClient initialized, model: {default_model}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClaudeClient":
        """
        Create ClaudeClient from application settings.

        Args:
            settings: Application settings

        Returns:
            Configured ClaudeClient instance

        Raises:
            ValueError: If ANTHROPIC_API_KEY not set
        """
        api_key = settings.anthropic_api_key or os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable not set. "
                "Claude API requires authentication."
            )

        config = AIClientConfig(
            base_url="https://api.anthropic.com",
            api_key=api_key,
            timeout=settings.llm_timeout,
            max_retries=settings.max_retries,
        )

        return cls(config=config, default_model=settings.summarizer_model)

    async def close(self) -> None:
        """Close the client and release resources."""
        await self.client.close()
        logger.debug("ClaudeClient closed")

    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.7,
        num_predict: int | None = None,
    ) -> str:
        """
        Chat completion using Claude Messages API.

        "system" messages become the system parameter; "user" and
        "assistant" messages are passed as-is.

        Args:
            messages: List of chat messages [{"role": "user", "content": "..."}]
            model: Model name (default: claude-sonnet)
            temperature: Sampling temperature (default: 0.7)
            num_predict: Max tokens to generate (default: 4096)

        Returns:
            Assistant's response content

        Raises:
            AIClientError: If chat completion fails
        """
        if model is None:
            model = self.default_model

        if num_predict is None:
            num_predict = 4096

        system_content = None
        chat_messages = []

        for msg in messages:
            if msg["role"] == "system":
                system_content = msg["content"]
            else:
                chat_messages.append({
                    "role": msg["role"],
                    "content": msg["content"],
                })

        logger.debug(
            f"Claude chat: model={model}, messages={len(chat_messages)}, "
            f"system={'yes' if system_content else 'no'}, max_tokens={num_predict}"
        )

        kwargs = {
            "model": model,
            "max_tokens": num_predict,
            "temperature": temperature,
            "messages": chat_messages,
        }
        if system_content:
            kwargs["system"] = system_content

        try:
            response = await self.client.messages.create(**kwargs)

        except APITimeoutError as e:
            logger.error(f"Claude timeout: {e}")
            raise AIClientTimeoutError(
                "Claude request timeout",
                provider="claude",
                model=model,
                original_error=e,
            ) from e

        except APIConnectionError as e:
            logger.error(f"Claude connection error: {e}")
            raise AIClientConnectionError(
                f"Cannot connect to Claude API: {e}",
                provider="claude",
                original_error=e,
            ) from e

        except APIStatusError as e:
            logger.error(f"Claude API error: {e.status_code} - {e.message}")
            raise AIClientResponseError(
                f"Claude API error: {e.message}",
                provider="claude",
                model=model,
                status_code=e.status_code,
                response_body=str(e.body) if e.body else None,
                original_error=e,
            ) from e

        content = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.info(f"Claude response: {len(content)} chars")

        if not content.strip():
            raise AIClientResponseError(
                "Claude returned empty content",
                provider="claude",
                model=model,
            )

        return content
