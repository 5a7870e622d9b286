"""
Stage artifact cache.

Every artifact lives at a path derived from the item and the stage:

    <folder>/
    ├── lecture1.mp4
    ├── audios/lecture1.mp3
    ├── transcripts/lecture1_transcript.txt
    └── summaries/lecture1_summary.md

The presence of the file is the cache signal; there is no manifest.

Example:
    cache = StageCache()

    if not cache.exists(StageKind.TRANSCRIPT, item):
        cache.write(StageKind.TRANSCRIPT, item, text)

    summary = cache.read(StageKind.SUMMARY, item)
"""

import logging
import os
import tempfile
from pathlib import Path

from video_notes.models.schemas import Item, StageKind

from .errors import ArtifactIOError, ArtifactNotFoundError

logger = logging.getLogger(__name__)


class StageCache:
    """Filesystem-backed store of stage artifacts keyed by item and stage.

    Knows nothing about stage ordering. Writes for distinct items never
    touch the same path, so concurrent use needs no locking.
    """

    def path(self, stage: StageKind, item: Item) -> Path:
        """Get artifact path for an item's stage.

        Args:
            stage: Stage kind
            item: Source item

        Returns:
            Derived artifact path
        """
        return item.parent_dir / stage.folder / f"{item.base_name}{stage.suffix}"

    def exists(self, stage: StageKind, item: Item) -> bool:
        """Check if the artifact for an item's stage is on disk."""
        return self.path(stage, item).is_file()

    def read(self, stage: StageKind, item: Item) -> str | bytes:
        """Read an artifact.

        Args:
            stage: Stage kind (audio is returned as bytes, others as text)
            item: Source item

        Returns:
            Artifact content

        Raises:
            ArtifactNotFoundError: If the artifact is absent
            ArtifactIOError: If reading fails
        """
        path = self.path(stage, item)
        try:
            if stage.is_binary:
                return path.read_bytes()
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(stage, path) from e
        except OSError as e:
            raise ArtifactIOError(stage, path, e) from e

    def write(self, stage: StageKind, item: Item, content: str | bytes) -> Path:
        """Persist an artifact.

        Content goes to a temporary sibling first and is moved into place,
        so a crash never leaves a partial artifact at the derived path.

        Args:
            stage: Stage kind
            item: Source item
            content: Text or bytes to store

        Returns:
            Path of the written artifact

        Raises:
            ArtifactIOError: If writing fails
        """
        path = self.path(stage, item)
        data = content.encode("utf-8") if isinstance(content, str) else content

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.name}.", suffix=".part"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ArtifactIOError(stage, path, e) from e

        logger.debug(f"Saved {stage.value}: {path} ({len(data)} bytes)")
        return path

    def ensure_folders(self, folder: Path) -> None:
        """Create the stage subfolders of a video folder.

        Args:
            folder: Video folder

        Raises:
            ArtifactIOError: If a folder can't be created
        """
        for stage in StageKind:
            stage_dir = folder / stage.folder
            try:
                stage_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ArtifactIOError(stage, stage_dir, e) from e
