"""
Pipeline error taxonomy.

Stage errors carry the item and stage so a failure can be diagnosed
from the message alone.
"""

from pathlib import Path

from video_notes.models.schemas import Item, StageKind


class PipelineError(Exception):
    """Base class for pipeline errors."""


class DiscoveryError(PipelineError):
    """Raised when the input folder can't be listed.

    Attributes:
        folder: Folder that failed
        cause: Original exception (if any)
    """

    def __init__(self, folder: Path, cause: Exception | None = None):
        self.folder = folder
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot read video folder {folder}{detail}")


class StageError(PipelineError):
    """Error during a stage of one item.

    Attributes:
        item: Item being processed
        stage: Stage that failed
        cause: Original exception (if any)
    """

    def __init__(
        self,
        item: Item,
        stage: StageKind,
        cause: Exception | None = None,
    ):
        self.item = item
        self.stage = stage
        self.cause = cause
        reason = f"{type(cause).__name__}: {cause}" if cause else "failed"
        super().__init__(f"[{stage.value}] {item.display_name}: {reason}")


class TranscodeError(StageError):
    """Audio extraction failed."""

    def __init__(self, item: Item, cause: Exception | None = None):
        super().__init__(item, StageKind.AUDIO, cause)


class TranscriptionError(StageError):
    """Speech-to-text failed."""

    def __init__(self, item: Item, cause: Exception | None = None):
        super().__init__(item, StageKind.TRANSCRIPT, cause)


class SummarizationError(StageError):
    """Summary generation failed."""

    def __init__(self, item: Item, cause: Exception | None = None):
        super().__init__(item, StageKind.SUMMARY, cause)


class ArtifactNotFoundError(PipelineError, FileNotFoundError):
    """Requested artifact is not on disk."""

    def __init__(self, stage: StageKind, path: Path):
        self.stage = stage
        self.path = path
        super().__init__(f"No {stage.value} artifact at {path}")


class ArtifactIOError(PipelineError, OSError):
    """Artifact could not be read or written."""

    def __init__(self, stage: StageKind, path: Path, cause: Exception | None = None):
        self.stage = stage
        self.path = path
        self.cause = cause
        super().__init__(f"I/O error on {stage.value} artifact {path}: {cause}")
