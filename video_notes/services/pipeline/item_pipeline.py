"""
Per-video pipeline.

Runs the minimum work needed to produce one item's summary, given the
artifacts already on disk, and persists every new artifact as soon as its
stage succeeds.
"""

import logging
import time

from video_notes.models.schemas import Item, PipelineResult, StageKind

from .errors import SummarizationError, TranscodeError, TranscriptionError
from .protocols import Summarizer, Transcoder, Transcriber
from .stage_cache import StageCache

logger = logging.getLogger(__name__)


class ItemPipeline:
    """
    Staged state machine for one video.

    Entry point is decided by artifact presence, in priority order:
    1. Summary on disk: render it. A missing transcript is irrelevant.
    2. Transcript on disk: summarize it.
    3. Neither: reuse or extract audio, transcribe, then summarize.

    A failing stage raises its StageError subclass and writes nothing for
    that stage; artifacts of earlier stages stay on disk, so re-running the
    item resumes where it stopped. There is no retry here.

    Example:
        pipeline = ItemPipeline(StageCache(), extractor, transcriber, summarizer)
        result = await pipeline.run(Item.from_path(Path("videos/lecture1.mp4")))
        print(result.fragment)
    """

    def __init__(
        self,
        cache: StageCache,
        transcoder: Transcoder,
        transcriber: Transcriber,
        summarizer: Summarizer,
    ):
        """
        Initialize item pipeline.

        Args:
            cache: Artifact store
            transcoder: Audio extraction adapter
            transcriber: Speech-to-text adapter
            summarizer: Text summarization adapter
        """
        self.cache = cache
        self.transcoder = transcoder
        self.transcriber = transcriber
        self.summarizer = summarizer

    def _resolve_entry_stage(self, item: Item) -> StageKind:
        """Return the first stage whose input is available on disk.

        SUMMARY means nothing has to run, TRANSCRIPT means only summarization
        runs, AUDIO means the whole chain runs.
        """
        if self.cache.exists(StageKind.SUMMARY, item):
            return StageKind.SUMMARY
        if self.cache.exists(StageKind.TRANSCRIPT, item):
            return StageKind.TRANSCRIPT
        return StageKind.AUDIO

    async def run(self, item: Item) -> PipelineResult:
        """
        Produce the rendered result for one item.

        Args:
            item: Video to process

        Returns:
            PipelineResult with summary and the stages executed this run

        Raises:
            TranscodeError: If audio extraction fails
            TranscriptionError: If transcription fails
            SummarizationError: If summarization fails
            ArtifactIOError: If an artifact can't be read or written
        """
        start_time = time.monotonic()
        executed: list[StageKind] = []
        entry = self._resolve_entry_stage(item)

        if entry is StageKind.SUMMARY:
            logger.info(f"{item.display_name}: summary cached, skipping")
            summary = self.cache.read(StageKind.SUMMARY, item)
            return PipelineResult(item=item, summary=summary, executed_stages=executed)

        if entry is StageKind.TRANSCRIPT:
            logger.info(f"{item.display_name}: transcript cached, summarizing")
            transcript = self.cache.read(StageKind.TRANSCRIPT, item)
        else:
            await self._ensure_audio(item, executed)
            transcript = await self._transcribe(item)
            executed.append(StageKind.TRANSCRIPT)

        summary = await self._summarize(item, transcript)
        executed.append(StageKind.SUMMARY)

        elapsed = time.monotonic() - start_time
        logger.info(
            f"{item.display_name}: done in {elapsed:.1f}s, "
            f"stages={[s.value for s in executed]}"
        )
        return PipelineResult(item=item, summary=summary, executed_stages=executed)

    async def _ensure_audio(self, item: Item, executed: list[StageKind]) -> None:
        """Extract audio unless it is already on disk."""
        audio_path = self.cache.path(StageKind.AUDIO, item)

        if self.cache.exists(StageKind.AUDIO, item):
            logger.info(f"{item.display_name}: audio cached ({audio_path.name})")
            return

        logger.info(f"{item.display_name}: extracting audio")
        audio_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            await self.transcoder.extract(item.source_path, audio_path)
        except Exception as e:
            logger.error(f"{item.display_name}: audio extraction failed: {e}")
            raise TranscodeError(item, e) from e

        executed.append(StageKind.AUDIO)

    async def _transcribe(self, item: Item) -> str:
        """Transcribe the item's audio and persist the transcript."""
        audio_path = self.cache.path(StageKind.AUDIO, item)

        logger.info(f"{item.display_name}: transcribing")
        try:
            transcript = await self.transcriber.transcribe(audio_path)
        except Exception as e:
            logger.error(f"{item.display_name}: transcription failed: {e}")
            raise TranscriptionError(item, e) from e

        self.cache.write(StageKind.TRANSCRIPT, item, transcript)
        return transcript

    async def _summarize(self, item: Item, transcript: str) -> str:
        """Summarize a transcript and persist the summary."""
        logger.info(f"{item.display_name}: summarizing ({len(transcript)} chars)")
        try:
            summary = await self.summarizer.summarize(transcript)
        except Exception as e:
            logger.error(f"{item.display_name}: summarization failed: {e}")
            raise SummarizationError(item, e) from e

        self.cache.write(StageKind.SUMMARY, item, summary)
        return summary
