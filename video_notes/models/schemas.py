"""
Pydantic models for the video notes pipeline.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from video_notes.utils.time_utils import humanize_ms


class StageKind(str, Enum):
    """Pipeline stage, one per persisted artifact kind."""
    AUDIO = "audio"
    TRANSCRIPT = "transcript"
    SUMMARY = "summary"

    @property
    def folder(self) -> str:
        """Subfolder holding this stage's artifacts."""
        return _STAGE_FOLDERS[self]

    @property
    def suffix(self) -> str:
        """Filename suffix appended to the item base name."""
        return _STAGE_SUFFIXES[self]

    @property
    def is_binary(self) -> bool:
        """True for artifacts stored as raw bytes."""
        return self is StageKind.AUDIO


_STAGE_FOLDERS = {
    StageKind.AUDIO: "audios",
    StageKind.TRANSCRIPT: "transcripts",
    StageKind.SUMMARY: "summaries",
}

_STAGE_SUFFIXES = {
    StageKind.AUDIO: ".mp3",
    StageKind.TRANSCRIPT: "_transcript.txt",
    StageKind.SUMMARY: "_summary.md",
}


class Item(BaseModel):
    """One source video discovered in the input folder.

    Immutable; never persisted itself, only its artifacts are.

    Attributes:
        source_path: Absolute path to the source video
        base_name: Filename without the video extension
        parent_dir: Folder containing the video
    """

    model_config = {"frozen": True}

    source_path: Path
    base_name: str
    parent_dir: Path

    @property
    def display_name(self) -> str:
        """Source filename as shown in the combined document."""
        return self.source_path.name

    @classmethod
    def from_path(cls, path: Path, extension: str = ".mp4") -> "Item":
        """
        Build an item from a video path.

        Args:
            path: Path to the source video
            extension: Video extension stripped to form the base name

        Returns:
            Item with absolute paths
        """
        path = Path(path).absolute()
        name = path.name
        base_name = name[: -len(extension)] if extension and name.endswith(extension) else name
        return cls(source_path=path, base_name=base_name, parent_dir=path.parent)


class PipelineResult(BaseModel):
    """Rendered result of one item's pipeline run."""

    model_config = {"frozen": True}

    item: Item
    summary: str
    executed_stages: list[StageKind] = Field(
        default_factory=list,
        description="Stages executed in this run (empty when fully cached)",
    )

    @property
    def fragment(self) -> str:
        """Markdown block inserted into the combined document."""
        return f"## {self.item.display_name}\n\n{self.summary}\n\n"


class ItemFailure(BaseModel):
    """Failure of one item when failures are isolated per item."""

    item: Item
    stage: StageKind | None = None
    message: str


class BatchReport(BaseModel):
    """Aggregate outcome of processing one folder."""

    folder: Path
    results: list[PipelineResult] = Field(default_factory=list)
    failures: list[ItemFailure] = Field(default_factory=list)
    document: str = ""
    elapsed_ms: int = 0
    output_path: Path | None = None

    @computed_field
    @property
    def elapsed(self) -> str:
        """Elapsed wall-clock time, human readable."""
        return humanize_ms(self.elapsed_ms)

    @property
    def succeeded(self) -> bool:
        """True if no item failed."""
        return not self.failures
