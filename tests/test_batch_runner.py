import asyncio
from pathlib import Path

import pytest

from conftest import FakeSummarizer, FakeTranscoder, FakeTranscriber, make_video
from video_notes.models.schemas import StageKind
from video_notes.services.pipeline import (
    BatchRunner,
    DiscoveryError,
    ItemPipeline,
    StageCache,
    SummarizationError,
)


class EchoSummarizer(FakeSummarizer):
    """Summary derived from the transcript so items are distinguishable."""

    async def summarize(self, transcript: str) -> str:
        await super().summarize(transcript)
        return f"notes for {transcript}"


class NamedTranscriber(FakeTranscriber):
    """Transcript names the audio file, with per-item latency."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.completed: list[str] = []

    async def transcribe(self, audio_path: Path) -> str:
        await super().transcribe(audio_path)
        self.completed.append(audio_path.stem)
        return audio_path.stem


class TrackingTranscriber(FakeTranscriber):
    def __init__(self) -> None:
        super().__init__()
        self.active = 0
        self.peak = 0

    async def transcribe(self, audio_path: Path) -> str:
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(0.02)
            return await super().transcribe(audio_path)
        finally:
            self.active -= 1


def _runner(settings, transcriber=None, summarizer=None, transcoder=None) -> BatchRunner:
    cache = StageCache()
    pipeline = ItemPipeline(
        cache,
        transcoder or FakeTranscoder(),
        transcriber or NamedTranscriber(),
        summarizer or EchoSummarizer(),
    )
    return BatchRunner(pipeline, cache=cache, settings=settings)


@pytest.mark.asyncio
async def test_end_to_end_single_video(video_folder: Path, settings) -> None:
    make_video(video_folder, "lecture1.mp4")
    runner = _runner(settings, transcriber=FakeTranscriber(), summarizer=FakeSummarizer())

    report = await runner.run(video_folder)

    expected = "# Resumos dos vídeos\n\n## lecture1.mp4\n\n# Hello\n- world\n\n\n"
    assert report.document == expected
    assert report.output_path == video_folder / "course.md"
    assert report.output_path.read_text(encoding="utf-8") == expected
    assert (video_folder / "audios" / "lecture1.mp3").is_file()
    assert (video_folder / "transcripts" / "lecture1_transcript.txt").read_text() == "hello world"
    assert (video_folder / "summaries" / "lecture1_summary.md").read_text() == "# Hello\n- world\n"
    assert report.failures == []
    assert report.elapsed_ms >= 0


@pytest.mark.asyncio
async def test_document_follows_filename_order(video_folder: Path, settings) -> None:
    for name in ("b.mp4", "a.mp4", "c.mp4"):
        make_video(video_folder, name)
    # a finishes last, c first
    transcriber = NamedTranscriber(delays={"a": 0.15, "b": 0.08, "c": 0.0})
    runner = _runner(settings.model_copy(update={"max_concurrency": 3}), transcriber=transcriber)

    report = await runner.run(video_folder)

    assert [r.item.display_name for r in report.results] == ["a.mp4", "b.mp4", "c.mp4"]
    assert report.document == (
        "# Resumos dos vídeos\n\n"
        "## a.mp4\n\nnotes for a\n\n"
        "\n\n---\n\n"
        "## b.mp4\n\nnotes for b\n\n"
        "\n\n---\n\n"
        "## c.mp4\n\nnotes for c\n\n"
    )
    assert transcriber.completed == ["c", "b", "a"]


@pytest.mark.asyncio
async def test_concurrency_is_bounded(video_folder: Path, settings) -> None:
    for i in range(6):
        make_video(video_folder, f"v{i}.mp4")
    transcriber = TrackingTranscriber()
    runner = _runner(settings.model_copy(update={"max_concurrency": 2}), transcriber=transcriber)

    report = await runner.run(video_folder)

    assert len(report.results) == 6
    assert transcriber.peak == 2


@pytest.mark.asyncio
async def test_items_run_in_parallel(video_folder: Path, settings) -> None:
    for i in range(3):
        make_video(video_folder, f"v{i}.mp4")
    transcriber = TrackingTranscriber()
    runner = _runner(settings.model_copy(update={"max_concurrency": 8}), transcriber=transcriber)

    await runner.run(video_folder)

    assert transcriber.peak == 3


def test_discovery_ignores_other_files(video_folder: Path, settings) -> None:
    make_video(video_folder, "lecture.mp4")
    (video_folder / "notes.txt").write_text("x")
    (video_folder / "upper.MP4").write_bytes(b"x")
    (video_folder / "nested.mp4").mkdir()
    (video_folder / "sub").mkdir()
    make_video(video_folder / "sub", "deep.mp4")

    items = _runner(settings).discover(video_folder)

    assert [item.display_name for item in items] == ["lecture.mp4"]


@pytest.mark.asyncio
async def test_empty_folder_gives_title_only(video_folder: Path, settings) -> None:
    report = await _runner(settings).run(video_folder)

    assert report.results == []
    assert report.document == "# Resumos dos vídeos\n\n"
    assert report.output_path.read_text(encoding="utf-8") == "# Resumos dos vídeos\n\n"
    assert {p.name for p in video_folder.iterdir()} == {
        "audios", "transcripts", "summaries", "course.md",
    }


@pytest.mark.asyncio
async def test_missing_folder_raises_discovery_error(tmp_path: Path, settings) -> None:
    missing = tmp_path / "nope"

    with pytest.raises(DiscoveryError):
        await _runner(settings).run(missing)

    assert not missing.exists()


@pytest.mark.asyncio
async def test_fail_fast_aborts_without_document(video_folder: Path, settings) -> None:
    for name in ("a.mp4", "b.mp4", "c.mp4"):
        make_video(video_folder, name)
    summarizer = EchoSummarizer(fail_on={"b"})
    runner = _runner(settings.model_copy(update={"max_concurrency": 3}), summarizer=summarizer)

    with pytest.raises(SummarizationError) as exc_info:
        await runner.run(video_folder)

    assert exc_info.value.item.display_name == "b.mp4"
    assert not (video_folder / "course.md").exists()
    # In-flight items still committed their artifacts
    assert (video_folder / "transcripts" / "b_transcript.txt").is_file()
    assert (video_folder / "summaries" / "a_summary.md").is_file()
    assert (video_folder / "summaries" / "c_summary.md").is_file()


@pytest.mark.asyncio
async def test_fail_fast_stops_starting_new_items(video_folder: Path, settings) -> None:
    for name in ("a.mp4", "b.mp4", "c.mp4"):
        make_video(video_folder, name)
    transcriber = NamedTranscriber(fail=RuntimeError("quota exceeded"))
    runner = _runner(settings.model_copy(update={"max_concurrency": 1}), transcriber=transcriber)

    with pytest.raises(Exception, match="quota exceeded"):
        await runner.run(video_folder)

    assert [p.stem for p in transcriber.calls] == ["a"]


@pytest.mark.asyncio
async def test_isolated_failures_produce_partial_document(video_folder: Path, settings) -> None:
    for name in ("a.mp4", "b.mp4", "c.mp4"):
        make_video(video_folder, name)
    runner = _runner(
        settings.model_copy(update={"fail_fast": False}),
        summarizer=EchoSummarizer(fail_on={"b"}),
    )

    report = await runner.run(video_folder)

    assert [r.item.display_name for r in report.results] == ["a.mp4", "c.mp4"]
    assert len(report.failures) == 1
    failure = report.failures[0]
    assert failure.item.display_name == "b.mp4"
    assert failure.stage is StageKind.SUMMARY
    assert "summarizer rejected" in failure.message
    assert not report.succeeded
    assert "## b.mp4" not in report.document
    assert report.output_path.read_text(encoding="utf-8") == report.document


@pytest.mark.asyncio
async def test_rerun_after_failure_resumes(video_folder: Path, settings) -> None:
    for name in ("a.mp4", "b.mp4"):
        make_video(video_folder, name)
    transcriber = NamedTranscriber()
    first = _runner(
        settings.model_copy(update={"fail_fast": False}),
        transcriber=transcriber,
        summarizer=EchoSummarizer(fail_on={"b"}),
    )
    await first.run(video_folder)

    transcoder = FakeTranscoder()
    second_transcriber = NamedTranscriber()
    summarizer = EchoSummarizer()
    second = _runner(settings, transcriber=second_transcriber, summarizer=summarizer, transcoder=transcoder)
    report = await second.run(video_folder)

    assert transcoder.calls == []
    assert second_transcriber.calls == []
    assert summarizer.calls == ["b"]
    assert [r.item.display_name for r in report.results] == ["a.mp4", "b.mp4"]


@pytest.mark.asyncio
async def test_concurrent_items_write_disjoint_paths(video_folder: Path, settings, monkeypatch) -> None:
    for i in range(5):
        make_video(video_folder, f"v{i}.mp4")
    written: list[Path] = []
    original_write = StageCache.write

    def recording_write(self, stage, item, content):
        path = original_write(self, stage, item, content)
        written.append(path)
        return path

    monkeypatch.setattr(StageCache, "write", recording_write)
    await _runner(settings).run(video_folder)

    assert len(written) == 10
    assert len(set(written)) == len(written)
    by_item: dict[str, set[Path]] = {}
    for path in written:
        by_item.setdefault(path.name.split("_")[0], set()).add(path)
    assert len(by_item) == 5
