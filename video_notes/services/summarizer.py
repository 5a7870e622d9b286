"""
Transcript summarizer service.

Creates markdown study notes from a transcript with a chat LLM.
"""

import logging
import time

from video_notes.config import Settings, load_prompt
from video_notes.services.ai_clients import BaseAIClientImpl, ClaudeClient, OpenAIClient

logger = logging.getLogger(__name__)

# Models served by the Anthropic API (prefix-based matching)
CLAUDE_MODEL_PREFIXES = ("claude",)

# Placeholder replaced by the transcript in the user prompt
TRANSCRIPT_PLACEHOLDER = "{transcript}"


def create_chat_client(settings: Settings) -> BaseAIClientImpl:
    """
    Create the chat client matching the configured summarizer model.

    Models starting with "claude" use the Claude API, all others the
    OpenAI-compatible endpoint.

    Args:
        settings: Application settings

    Returns:
        Chat client, to be used as an async context manager
    """
    model = settings.summarizer_model.lower()
    if model.startswith(CLAUDE_MODEL_PREFIXES):
        return ClaudeClient.from_settings(settings)
    return OpenAIClient.from_settings(settings)


class VideoSummarizer:
    """
    Transcript summarization service.

    Prompts are loaded once at construction: prompts/summary/system.md and
    prompts/summary/user.md (external prompts_dir wins over built-in).

    Example:
        async with create_chat_client(settings) as client:
            summarizer = VideoSummarizer(client, settings)
            notes = await summarizer.summarize(transcript)
    """

    def __init__(self, ai_client: BaseAIClientImpl, settings: Settings):
        """
        Initialize summarizer.

        Args:
            ai_client: Chat client for LLM calls
            settings: Application settings
        """
        self.ai_client = ai_client
        self.settings = settings
        self.system_prompt = load_prompt("summary", "system", settings).strip()
        self.user_template = load_prompt("summary", "user", settings)

    def build_messages(self, transcript: str) -> list[dict]:
        """Build chat messages for a transcript."""
        user_message = self.user_template.replace(TRANSCRIPT_PLACEHOLDER, transcript)
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": user_message},
        ]

    async def summarize(self, transcript: str) -> str:
        """
        Summarize a transcript into markdown.

        Args:
            transcript: Transcript text

        Returns:
            Markdown study notes

        Raises:
            AIClientError: If the LLM call fails
        """
        logger.info(
            f"Summarizing transcript: {len(transcript)} chars, "
            f"model={self.settings.summarizer_model}"
        )
        start_time = time.time()

        summary = await self.ai_client.chat(
            self.build_messages(transcript),
            model=self.settings.summarizer_model,
            temperature=self.settings.summarizer_temperature,
            num_predict=self.settings.summarizer_max_tokens,
        )

        logger.info(
            f"Summary ready: {len(summary)} chars in {time.time() - start_time:.1f}s"
        )
        return summary
