"""
Combined document output and progress reporting.
"""

import logging
from pathlib import Path

from video_notes.models.schemas import BatchReport, Item

logger = logging.getLogger(__name__)

SEPARATOR_LINE = "-" * 18


class ReportWriter:
    """
    Writes the combined notes document and emits progress lines.

    Example:
        writer = ReportWriter()
        writer.announce_discovery(folder, items)
        path = writer.write(folder, document)
        writer.summarize(report)
    """

    def output_path(self, folder: Path) -> Path:
        """Get combined document path: <folder>/<folder-name>.md."""
        return folder / f"{folder.name}.md"

    def announce_discovery(self, folder: Path, items: list[Item]) -> None:
        """Log the videos found in a folder."""
        names = [item.display_name for item in items]
        logger.info(SEPARATOR_LINE)
        logger.info(f"Found {len(items)} video files in {folder}: {names}")
        logger.info(SEPARATOR_LINE)

    def write(self, folder: Path, document: str) -> Path:
        """
        Write the combined document.

        Args:
            folder: Video folder
            document: Markdown content

        Returns:
            Path of the written document

        Raises:
            OSError: If the file can't be written
        """
        output_path = self.output_path(folder)
        output_path.write_text(document, encoding="utf-8")
        logger.debug(f"Wrote {len(document)} chars to {output_path}")
        return output_path

    def summarize(self, report: BatchReport) -> None:
        """Log the outcome of a batch."""
        logger.info(SEPARATOR_LINE)
        if report.output_path is not None:
            logger.info(f"Output written to: {report.output_path}")
        if report.failures:
            logger.warning(
                f"{len(report.failures)} of "
                f"{len(report.failures) + len(report.results)} videos failed:"
            )
            for failure in report.failures:
                stage = failure.stage.value if failure.stage else "pipeline"
                logger.warning(f"  {failure.item.display_name} [{stage}]: {failure.message}")
        logger.info(SEPARATOR_LINE)
        logger.info(
            f"Total processing time for folder '{report.folder}': {report.elapsed}"
        )
        logger.info(SEPARATOR_LINE)
