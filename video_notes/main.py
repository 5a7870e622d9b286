"""
Command line entry point.

Usage:
    video-notes /path/to/folder-of-videos
    python -m video_notes.main course-01 --concurrency 8 --continue-on-error
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from video_notes.config import Settings, get_settings
from video_notes.logging_config import setup_logging
from video_notes.models.schemas import BatchReport
from video_notes.services.ai_clients import WhisperClient
from video_notes.services.audio_extractor import AudioExtractor
from video_notes.services.pipeline import BatchRunner, ItemPipeline, PipelineError, StageCache
from video_notes.services.summarizer import VideoSummarizer, create_chat_client
from video_notes.services.transcriber import WhisperTranscriber

logger = logging.getLogger(__name__)


async def process_folder(folder: Path, settings: Settings) -> BatchReport:
    """
    Build the pipeline with real adapters and process a folder.

    Args:
        folder: Folder of videos
        settings: Application settings

    Returns:
        BatchReport of the run
    """
    cache = StageCache()

    async with WhisperClient.from_settings(settings) as whisper_client, \
            create_chat_client(settings) as chat_client:
        pipeline = ItemPipeline(
            cache=cache,
            transcoder=AudioExtractor(settings),
            transcriber=WhisperTranscriber(whisper_client, settings),
            summarizer=VideoSummarizer(chat_client, settings),
        )
        runner = BatchRunner(pipeline, cache=cache, settings=settings)
        return await runner.run(folder)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="video-notes",
        description="Turn a folder of videos into one markdown study-notes document.",
    )
    parser.add_argument(
        "folder",
        help="Folder of videos (relative paths are joined with VIDEOS_ROOT when set)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of videos processed at once",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Write the document from the videos that succeeded instead of aborting",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments (default: sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    args = build_parser().parse_args(argv)

    overrides: dict = {}
    if args.concurrency is not None:
        if args.concurrency < 1:
            build_parser().error("--concurrency must be at least 1")
        overrides["max_concurrency"] = args.concurrency
    if args.continue_on_error:
        overrides["fail_fast"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level

    settings = get_settings().model_copy(update=overrides)
    setup_logging(settings)

    folder = settings.resolve_folder(args.folder)

    try:
        report = asyncio.run(process_folder(folder, settings))
    except ValueError as e:
        # Missing credentials
        logger.error(str(e))
        return 1
    except PipelineError as e:
        logger.error(f"Processing failed: {e}")
        return 1

    return 0 if report.succeeded else 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
