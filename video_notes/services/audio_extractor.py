"""
Audio extraction service using ffmpeg.

Compresses the audio track of a video to MP3 for Whisper transcription.
"""

import asyncio
import logging
import os
import subprocess
from pathlib import Path

from video_notes.config import Settings

logger = logging.getLogger(__name__)


class AudioExtractor:
    """
    Extracts audio from video files using ffmpeg.

    Output is written to a temporary sibling and renamed on success, so a
    failed or interrupted run never leaves a file at the target path.

    Example:
        extractor = AudioExtractor(settings)
        audio_path = await extractor.extract(video_path, audio_path)
    """

    def __init__(self, settings: Settings):
        """
        Initialize audio extractor.

        Args:
            settings: Application settings
        """
        self.settings = settings

    async def extract(self, video_path: Path, audio_path: Path) -> Path:
        """
        Extract audio from video file.

        Args:
            video_path: Path to input video file
            audio_path: Target MP3 path

        Returns:
            Path to extracted audio file

        Raises:
            RuntimeError: If ffmpeg fails
            FileNotFoundError: If video file doesn't exist
        """
        video_path = Path(video_path)
        audio_path = Path(audio_path)

        if not video_path.exists():
            raise FileNotFoundError(f"Video file not found: {video_path}")

        audio_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = audio_path.with_name(f".{audio_path.name}.part")

        video_size_mb = video_path.stat().st_size / 1024 / 1024
        logger.info(
            f"Extracting audio: {video_path.name} ({video_size_mb:.1f} MB) -> {audio_path.name}"
        )

        try:
            # Run ffmpeg in thread pool to not block event loop
            await asyncio.to_thread(self._run_ffmpeg, video_path, tmp_path)

            if not tmp_path.exists():
                raise RuntimeError("Audio extraction failed: output file not created")

            os.replace(tmp_path, audio_path)
        finally:
            tmp_path.unlink(missing_ok=True)

        audio_size_mb = audio_path.stat().st_size / 1024 / 1024
        logger.info(f"Audio extracted: {audio_path.name} ({audio_size_mb:.1f} MB)")

        return audio_path

    def build_command(self, video_path: Path, audio_path: Path) -> list[str]:
        """Build the ffmpeg command line."""
        return [
            "ffmpeg",
            "-i", str(video_path),
            "-vn",                              # No video
            "-acodec", "libmp3lame",            # MP3 codec
            "-b:a", self.settings.audio_bitrate,
            "-f", "mp3",                        # Output name has no .mp3 suffix
            "-y",                               # Overwrite output
            str(audio_path),
        ]

    def _run_ffmpeg(self, video_path: Path, audio_path: Path) -> None:
        """
        Run ffmpeg to extract audio.

        Args:
            video_path: Input video path
            audio_path: Output audio path

        Raises:
            RuntimeError: If ffmpeg is missing, times out or returns non-zero
        """
        cmd = self.build_command(video_path, audio_path)

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.settings.ffmpeg_timeout,
            )
        except FileNotFoundError as e:
            raise RuntimeError("ffmpeg not found in PATH") from e
        except subprocess.TimeoutExpired as e:
            raise RuntimeError(
                f"ffmpeg timed out after {self.settings.ffmpeg_timeout}s"
            ) from e

        if result.returncode != 0:
            stderr_tail = result.stderr[-500:]
            logger.error(f"ffmpeg failed: {stderr_tail}")
            raise RuntimeError(f"ffmpeg error (code {result.returncode}): {stderr_tail}")
