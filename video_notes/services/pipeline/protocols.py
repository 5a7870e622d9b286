"""
Interfaces of the external collaborators used by the item pipeline.

The pipeline never touches ffmpeg or HTTP directly; adapters in
video_notes.services implement these protocols and tests substitute fakes.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class Transcoder(Protocol):
    """Converts a source video into a compressed audio file."""

    async def extract(self, video_path: Path, audio_path: Path) -> Path:
        """
        Extract audio from video_path into audio_path.

        Must not leave a file at audio_path on failure.

        Returns:
            Path of the written audio file
        """
        ...


@runtime_checkable
class Transcriber(Protocol):
    """Converts an audio file into a plain text transcript."""

    async def transcribe(self, audio_path: Path) -> str:
        """Return the transcript text of audio_path."""
        ...


@runtime_checkable
class Summarizer(Protocol):
    """Converts a transcript into markdown study notes."""

    async def summarize(self, transcript: str) -> str:
        """Return the markdown digest of transcript."""
        ...
