"""
Whisper transcription service.

Turns an extracted audio file into plain transcript text.
"""

import logging
import time
from pathlib import Path

from video_notes.config import Settings
from video_notes.services.ai_clients import WhisperClient

logger = logging.getLogger(__name__)


class WhisperTranscriber:
    """
    Audio transcription service using the Whisper API.

    Example:
        async with WhisperClient.from_settings(settings) as client:
            transcriber = WhisperTranscriber(client, settings)
            text = await transcriber.transcribe(Path("audios/lecture1.mp3"))
    """

    def __init__(self, whisper_client: WhisperClient, settings: Settings):
        """
        Initialize transcriber.

        Args:
            whisper_client: Whisper client for transcription API calls
            settings: Application settings
        """
        self.whisper_client = whisper_client
        self.settings = settings

    async def transcribe(self, audio_path: Path) -> str:
        """
        Transcribe an audio file.

        Args:
            audio_path: Path to MP3 produced by the audio extractor

        Returns:
            Transcript text, stripped of surrounding whitespace

        Raises:
            FileNotFoundError: If file doesn't exist
            AIClientError: If the API call fails
        """
        start_time = time.time()
        text = await self.whisper_client.transcribe(Path(audio_path))
        text = text.strip()

        if not text:
            logger.warning(f"Empty transcript for {Path(audio_path).name}")

        logger.info(
            f"Transcribed {Path(audio_path).name}: {len(text.split())} words "
            f"in {time.time() - start_time:.1f}s"
        )
        return text
