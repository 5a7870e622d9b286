"""
Pipeline module for folder processing.

This package contains the pipeline components:
- stage_cache: Filesystem artifacts per item and stage
- item_pipeline: Per-video staged state machine
- batch_runner: Discovery, worker pool and ordered aggregation
- report_writer: Combined document output and progress lines
- protocols: Interfaces of the transcoder, transcriber and summarizer
- errors: Pipeline error taxonomy

Example:
    from video_notes.services.pipeline import BatchRunner, ItemPipeline, StageCache

    cache = StageCache()
    pipeline = ItemPipeline(cache, extractor, transcriber, summarizer)
    report = await BatchRunner(pipeline, cache, settings=settings).run(folder)
"""

from .batch_runner import BatchRunner
from .errors import (
    ArtifactIOError,
    ArtifactNotFoundError,
    DiscoveryError,
    PipelineError,
    StageError,
    SummarizationError,
    TranscodeError,
    TranscriptionError,
)
from .item_pipeline import ItemPipeline
from .protocols import Summarizer, Transcoder, Transcriber
from .report_writer import ReportWriter
from .stage_cache import StageCache

__all__ = [
    # Main components
    "BatchRunner",
    "ItemPipeline",
    "ReportWriter",
    "StageCache",
    # Collaborator interfaces
    "Summarizer",
    "Transcoder",
    "Transcriber",
    # Errors
    "PipelineError",
    "DiscoveryError",
    "StageError",
    "TranscodeError",
    "TranscriptionError",
    "SummarizationError",
    "ArtifactNotFoundError",
    "ArtifactIOError",
]
