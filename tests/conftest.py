from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from video_notes.config import Settings
from video_notes.models.schemas import Item
from video_notes.services.pipeline import ItemPipeline, StageCache


class FakeTranscoder:
    def __init__(self, audio: bytes = b"ID3fake-audio", fail: Exception | None = None) -> None:
        self.audio = audio
        self.fail = fail
        self.calls: list[tuple[Path, Path]] = []

    async def extract(self, video_path: Path, audio_path: Path) -> Path:
        self.calls.append((video_path, audio_path))
        if self.fail is not None:
            raise self.fail
        audio_path.write_bytes(self.audio)
        return audio_path


class FakeTranscriber:
    def __init__(
        self,
        text: str = "hello world",
        fail: Exception | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.text = text
        self.fail = fail
        self.delays = delays or {}
        self.calls: list[Path] = []

    async def transcribe(self, audio_path: Path) -> str:
        self.calls.append(audio_path)
        await asyncio.sleep(self.delays.get(audio_path.stem, 0))
        if self.fail is not None:
            raise self.fail
        return self.text


class FakeSummarizer:
    def __init__(
        self,
        summary: str = "# Hello\n- world\n",
        fail: Exception | None = None,
        fail_on: set[str] | None = None,
    ) -> None:
        self.summary = summary
        self.fail = fail
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    async def summarize(self, transcript: str) -> str:
        self.calls.append(transcript)
        if self.fail is not None:
            raise self.fail
        if transcript in self.fail_on:
            raise RuntimeError(f"summarizer rejected {transcript!r}")
        return self.summary


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        max_concurrency=4,
        fail_fast=True,
        prompts_dir=None,
        videos_root=None,
    )


@pytest.fixture()
def video_folder(tmp_path) -> Path:
    folder = tmp_path / "course"
    folder.mkdir()
    return folder


def make_video(folder: Path, name: str, content: bytes = b"\x00\x00\x00\x18ftypmp42") -> Item:
    path = folder / name
    path.write_bytes(content)
    return Item.from_path(path)


@pytest.fixture()
def cache() -> StageCache:
    return StageCache()


@pytest.fixture()
def fakes() -> tuple[FakeTranscoder, FakeTranscriber, FakeSummarizer]:
    return FakeTranscoder(), FakeTranscriber(), FakeSummarizer()


@pytest.fixture()
def pipeline(cache, fakes) -> ItemPipeline:
    transcoder, transcriber, summarizer = fakes
    return ItemPipeline(cache, transcoder, transcriber, summarizer)
