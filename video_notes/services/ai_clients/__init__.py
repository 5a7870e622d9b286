"""
AI Clients package for speech-to-text and LLM providers.

This package provides:
- WhisperClient: OpenAI audio transcription API
- OpenAIClient: OpenAI-compatible chat completions
- ClaudeClient: Anthropic Claude API

Usage:
    from video_notes.services.ai_clients import OpenAIClient, BaseAIClient

    async def process(client: BaseAIClient) -> str:
        return await client.chat([{"role": "user", "content": "Hello"}])

    async with OpenAIClient.from_settings(settings) as client:
        response = await process(client)
"""

from video_notes.services.ai_clients.base import (
    AIClientConfig,
    AIClientConnectionError,
    AIClientError,
    AIClientResponseError,
    AIClientTimeoutError,
    BaseAIClient,
    BaseAIClientImpl,
    is_retryable,
)
from video_notes.services.ai_clients.claude_client import ClaudeClient
from video_notes.services.ai_clients.openai_client import OpenAIClient
from video_notes.services.ai_clients.whisper_client import WhisperClient

__all__ = [
    # Protocol and base classes
    "BaseAIClient",
    "BaseAIClientImpl",
    "AIClientConfig",
    "is_retryable",
    # Errors
    "AIClientError",
    "AIClientTimeoutError",
    "AIClientConnectionError",
    "AIClientResponseError",
    # Implementations
    "ClaudeClient",
    "OpenAIClient",
    "WhisperClient",
]
