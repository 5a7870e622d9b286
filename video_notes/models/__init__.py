"""
Pydantic models for the video notes pipeline.
"""

from video_notes.models.schemas import (
    BatchReport,
    Item,
    ItemFailure,
    PipelineResult,
    StageKind,
)

__all__ = [
    "BatchReport",
    "Item",
    "ItemFailure",
    "PipelineResult",
    "StageKind",
]
