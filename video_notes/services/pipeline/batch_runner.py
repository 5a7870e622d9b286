"""
Folder-level batch processing.

Discovers the videos of a folder, runs each through the ItemPipeline on a
bounded pool of asyncio workers and assembles one markdown document whose
order follows the sorted filenames, not completion order.
"""

import asyncio
import logging
import time
from pathlib import Path

from video_notes.config import Settings, get_settings
from video_notes.models.schemas import BatchReport, Item, ItemFailure, PipelineResult
from video_notes.utils.media_utils import list_videos

from .errors import DiscoveryError
from .item_pipeline import ItemPipeline
from .report_writer import ReportWriter
from .stage_cache import StageCache

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = "\n\n---\n\n"

# Outcome slot per item: result, error, or None if never started
Outcome = PipelineResult | Exception | None


class BatchRunner:
    """
    Runs every video of a folder through the item pipeline.

    Failure policy follows settings.fail_fast:
    - True: after the first failure no new item is started, in-flight items
      finish (keeping their artifacts), then the first failure in discovery
      order is raised and no document is written.
    - False: failures are collected into the report and the document is
      built from the items that succeeded.

    Example:
        runner = BatchRunner(pipeline, settings=settings)
        report = await runner.run(Path("/videos/course"))
        print(report.output_path, report.elapsed)
    """

    def __init__(
        self,
        pipeline: ItemPipeline,
        cache: StageCache | None = None,
        report_writer: ReportWriter | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize batch runner.

        Args:
            pipeline: Per-item pipeline
            cache: Artifact store (shared with the pipeline)
            report_writer: Document writer (default: ReportWriter())
            settings: Application settings (uses defaults if None)
        """
        self.pipeline = pipeline
        self.cache = cache or pipeline.cache
        self.report_writer = report_writer or ReportWriter()
        self.settings = settings or get_settings()

    def discover(self, folder: Path) -> list[Item]:
        """
        List the folder's videos in document order.

        Args:
            folder: Folder to scan (direct children only)

        Returns:
            Items sorted by filename

        Raises:
            DiscoveryError: If the folder is missing or unreadable
        """
        try:
            paths = list_videos(folder, self.settings.video_extension)
        except OSError as e:
            raise DiscoveryError(folder, e) from e

        return [Item.from_path(p, self.settings.video_extension) for p in paths]

    def assemble(self, results: list[PipelineResult]) -> str:
        """Join result fragments under the document title."""
        fragments = [result.fragment for result in results]
        return f"{self.settings.document_title}\n\n" + FRAGMENT_SEPARATOR.join(fragments)

    async def run(self, folder: Path) -> BatchReport:
        """
        Process a folder into a combined notes document.

        Args:
            folder: Folder containing the videos

        Returns:
            BatchReport with ordered results, failures and timing

        Raises:
            DiscoveryError: If the folder can't be listed
            StageError: First item failure, when fail_fast is enabled
        """
        folder = Path(folder).absolute()
        start_time = time.monotonic()

        items = self.discover(folder)
        self.report_writer.announce_discovery(folder, items)
        if not items:
            logger.warning(f"No {self.settings.video_extension} files in {folder}")

        self.cache.ensure_folders(folder)

        outcomes = await self._process_all(items)

        results: list[PipelineResult] = []
        failures: list[ItemFailure] = []
        first_error: Exception | None = None

        for item, outcome in zip(items, outcomes):
            if isinstance(outcome, PipelineResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                first_error = first_error or outcome
                failures.append(
                    ItemFailure(
                        item=item,
                        stage=getattr(outcome, "stage", None),
                        message=str(outcome),
                    )
                )

        if first_error is not None and self.settings.fail_fast:
            logger.error(
                f"Batch aborted: {len(failures)} failed, {len(results)} completed"
            )
            raise first_error

        document = self.assemble(results)
        elapsed_ms = int((time.monotonic() - start_time) * 1000)

        output_path = self.report_writer.write(folder, document)

        report = BatchReport(
            folder=folder,
            results=results,
            failures=failures,
            document=document,
            elapsed_ms=elapsed_ms,
            output_path=output_path,
        )
        self.report_writer.summarize(report)
        return report

    async def _process_all(self, items: list[Item]) -> list[Outcome]:
        """
        Run the pipeline for every item on a bounded worker pool.

        Args:
            items: Items in discovery order

        Returns:
            One outcome per item, index-aligned with items
        """
        outcomes: list[Outcome] = [None] * len(items)
        if not items:
            return outcomes

        queue: asyncio.Queue[tuple[int, Item]] = asyncio.Queue()
        for entry in enumerate(items):
            queue.put_nowait(entry)

        abort = asyncio.Event()
        worker_count = min(len(items), self.settings.max_concurrency)

        async def worker(worker_id: int) -> None:
            while not abort.is_set():
                try:
                    index, item = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                logger.debug(f"worker-{worker_id}: {item.display_name}")
                try:
                    outcomes[index] = await self.pipeline.run(item)
                except Exception as e:
                    logger.error(f"{item.display_name} failed: {e}")
                    outcomes[index] = e
                    if self.settings.fail_fast:
                        abort.set()

        logger.info(f"Processing {len(items)} videos with {worker_count} workers")
        await asyncio.gather(*(worker(i) for i in range(worker_count)))

        skipped = sum(1 for outcome in outcomes if outcome is None)
        if skipped:
            logger.warning(f"{skipped} videos not started after failure")

        return outcomes
