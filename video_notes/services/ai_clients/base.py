"""
Base definitions shared by the AI clients.

Defines the chat interface of LLM providers, the client error hierarchy
and the retry policy for transient and rate-limit failures.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tenacity import (
    RetryCallState,
    before_sleep_log,
    retry,
    retry_if_exception,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# HTTP statuses worth retrying: rate limit and server-side failures
RETRYABLE_STATUS_CODES = frozenset({408, 409, 429, 500, 502, 503, 504})


@dataclass
class AIClientConfig:
    """
    Configuration for AI client instances.

    Attributes:
        base_url: API endpoint URL
        timeout: Request timeout in seconds
        api_key: Optional API key for authenticated services
        max_retries: Total attempts for retryable errors
        retry_wait_min: Base of the exponential backoff in seconds
        retry_wait_max: Upper bound of a single backoff wait in seconds
    """

    base_url: str
    timeout: float = 300.0
    api_key: str | None = None
    max_retries: int = 3
    retry_wait_min: float = 2.0
    retry_wait_max: float = 60.0


@runtime_checkable
class BaseAIClient(Protocol):
    """
    Protocol defining the interface for LLM chat clients.

    Enables swapping between the OpenAI-compatible HTTP client and the
    Claude SDK client without touching the summarizer.
    """

    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.7,
        num_predict: int | None = None,
    ) -> str:
        """
        Chat completion with message history.

        Args:
            messages: List of messages [{"role": "user", "content": "..."}]
            model: Model name (uses default if None)
            temperature: Sampling temperature
            num_predict: Max tokens to generate (model default if None)

        Returns:
            Response content

        Raises:
            AIClientError: If chat completion fails
        """
        ...

    async def close(self) -> None:
        """Close the client and release resources."""
        ...


class AIClientError(Exception):
    """
    Base exception for AI client errors.

    Attributes:
        message: Error description
        provider: AI provider name (openai, whisper, claude)
        model: Model that caused the error
        original_error: Underlying exception if available
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        model: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.provider = provider
        self.model = model
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.provider:
            parts.append(f"provider={self.provider}")
        if self.model:
            parts.append(f"model={self.model}")
        return " | ".join(parts)


class AIClientTimeoutError(AIClientError):
    """Raised when a request times out."""

    pass


class AIClientConnectionError(AIClientError):
    """Raised when connection to AI service fails."""

    pass


class AIClientResponseError(AIClientError):
    """
    Raised when AI service returns an error response.

    Attributes:
        status_code: HTTP status code if available
        response_body: Response body if available
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.response_body = response_body


def is_retryable(error: BaseException) -> bool:
    """Check if an AI client error is worth retrying.

    Timeouts, connection failures, rate limits and 5xx responses are
    retried; other API errors (bad key, bad request) are not.
    """
    if isinstance(error, (AIClientTimeoutError, AIClientConnectionError)):
        return True
    if isinstance(error, AIClientResponseError):
        return error.status_code in RETRYABLE_STATUS_CODES
    return False


def _config_of(state: RetryCallState) -> AIClientConfig | None:
    """Get the client config of a decorated method call."""
    client = state.args[0] if state.args else None
    return getattr(client, "config", None)


def _stop_after_configured_attempts(state: RetryCallState) -> bool:
    config = _config_of(state)
    max_attempts = config.max_retries if config else 3
    return state.attempt_number >= max(1, max_attempts)


def _wait_configured_backoff(state: RetryCallState) -> float:
    config = _config_of(state)
    if config is None:
        return wait_exponential(multiplier=1, min=2, max=60)(state)
    return wait_exponential(
        multiplier=config.retry_wait_min,
        max=config.retry_wait_max,
    )(state)


# Retry configuration for transient and rate-limit errors.
# Attempts and backoff come from the decorated client's AIClientConfig.
RETRY_DECORATOR = retry(
    stop=_stop_after_configured_attempts,
    wait=_wait_configured_backoff,
    retry=retry_if_exception(is_retryable),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class BaseAIClientImpl(ABC):
    """
    Abstract base class for AI client implementations.

    Provides common functionality for context manager protocol.

    Subclasses must implement:
        - chat()
        - close()
    """

    def __init__(self, config: AIClientConfig):
        """
        Initialize AI client with configuration.

        Args:
            config: Client configuration with URL, timeout, etc.
        """
        self.config = config

    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.7,
        num_predict: int | None = None,
    ) -> str:
        """Chat completion with message history."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the client and release resources."""
        pass

    async def __aenter__(self) -> "BaseAIClientImpl":
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
