from pathlib import Path
from types import SimpleNamespace

import pytest

from video_notes.config import load_prompt
from video_notes.services.ai_clients import (
    AIClientConfig,
    AIClientResponseError,
    ClaudeClient,
    OpenAIClient,
)
from video_notes.services.summarizer import VideoSummarizer, create_chat_client
from video_notes.services.transcriber import WhisperTranscriber


class RecordingChatClient:
    def __init__(self, reply: str = "# Resumo\n- ponto") -> None:
        self.reply = reply
        self.calls: list[dict] = []

    async def chat(self, messages, model=None, temperature=0.7, num_predict=None) -> str:
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "temperature": temperature,
                "num_predict": num_predict,
            }
        )
        return self.reply

    async def close(self) -> None:
        pass


class FakeMessages:
    def __init__(self, blocks) -> None:
        self.blocks = blocks
        self.kwargs: dict = {}

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(content=self.blocks)


class FakeAnthropic:
    def __init__(self, blocks) -> None:
        self.messages = FakeMessages(blocks)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class FakeWhisperClient:
    def __init__(self, text: str) -> None:
        self.text = text

    async def transcribe(self, file_path: Path) -> str:
        return self.text


def test_builtin_prompts_are_packaged(settings) -> None:
    assert "{transcript}" in load_prompt("summary", "user", settings)
    assert load_prompt("summary", "system", settings).strip()


def test_external_prompts_take_priority(settings, tmp_path: Path) -> None:
    prompts = tmp_path / "prompts" / "summary"
    prompts.mkdir(parents=True)
    (prompts / "user.md").write_text("Resuma: {transcript}", encoding="utf-8")
    custom = settings.model_copy(update={"prompts_dir": tmp_path / "prompts"})

    assert load_prompt("summary", "user", custom) == "Resuma: {transcript}"
    # Missing external component falls back to the built-in one
    assert load_prompt("summary", "system", custom) == load_prompt("summary", "system", settings)


def test_unknown_prompt_raises(settings) -> None:
    with pytest.raises(FileNotFoundError):
        load_prompt("nope", "user", settings)


def test_messages_embed_transcript(settings) -> None:
    summarizer = VideoSummarizer(RecordingChatClient(), settings)

    messages = summarizer.build_messages("aula sobre {chaves} e grafos")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert "aula sobre {chaves} e grafos" in messages[1]["content"]
    assert "{transcript}" not in messages[1]["content"]


@pytest.mark.asyncio
async def test_summarize_uses_configured_model(settings) -> None:
    client = RecordingChatClient()
    summarizer = VideoSummarizer(client, settings)

    notes = await summarizer.summarize("texto da aula")

    assert notes == "# Resumo\n- ponto"
    call = client.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["temperature"] == 0.7
    assert call["num_predict"] == 1500


@pytest.mark.asyncio
async def test_chat_client_follows_model_name(settings) -> None:
    openai = create_chat_client(settings)
    claude = create_chat_client(settings.model_copy(update={"summarizer_model": "claude-haiku-4-5"}))
    try:
        assert isinstance(openai, OpenAIClient)
        assert isinstance(claude, ClaudeClient)
        assert claude.default_model == "claude-haiku-4-5"
    finally:
        await openai.close()
        await claude.close()


def test_chat_client_requires_key(settings) -> None:
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        create_chat_client(settings.model_copy(update={"openai_api_key": None}))


@pytest.mark.asyncio
async def test_claude_chat_moves_system_prompt() -> None:
    sdk = FakeAnthropic([SimpleNamespace(type="text", text="# Notas")])
    client = ClaudeClient(AIClientConfig(base_url="https://api.anthropic.com"), client=sdk)

    async with client:
        content = await client.chat(
            [{"role": "system", "content": "sys"}, {"role": "user", "content": "oi"}],
            temperature=0.2,
            num_predict=100,
        )

    assert content == "# Notas"
    assert sdk.messages.kwargs["system"] == "sys"
    assert sdk.messages.kwargs["messages"] == [{"role": "user", "content": "oi"}]
    assert sdk.messages.kwargs["max_tokens"] == 100
    assert sdk.closed


@pytest.mark.asyncio
async def test_claude_empty_reply_raises() -> None:
    sdk = FakeAnthropic([])
    client = ClaudeClient(AIClientConfig(base_url="https://api.anthropic.com"), client=sdk)

    with pytest.raises(AIClientResponseError):
        await client.chat([{"role": "user", "content": "oi"}])


@pytest.mark.asyncio
async def test_transcriber_strips_whitespace(settings, tmp_path: Path) -> None:
    transcriber = WhisperTranscriber(FakeWhisperClient("  olá turma \n"), settings)

    assert await transcriber.transcribe(tmp_path / "a.mp3") == "olá turma"
