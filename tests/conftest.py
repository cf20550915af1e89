"""
Test Configuration and Fixtures
===============================

Shared pytest fixtures and fakes for the external collaborators: chat model,
speech-to-text, subprocess tools and a cache store with a controllable clock.
"""

import os
from pathlib import Path

import pytest

from link_summarizer.cache import MemoryCacheStore
from link_summarizer.downloader import AudioFetcher
from link_summarizer.summarizer_video import VideoPipeline
from link_summarizer.summarizer_webpage import WebpagePipeline


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests (may require API keys)")
    config.addinivalue_line("markers", "unit: marks tests as unit tests (no external dependencies)")


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeChat:
    """Records prompts and answers with the configured choice contents."""

    def __init__(self, *choices: str):
        self.choices = list(choices)
        self.calls: list[tuple[str, str]] = []

    def create(self, system_prompt: str, user_prompt: str) -> list[str]:
        self.calls.append((system_prompt, user_prompt))
        return list(self.choices)


class FakeSpeech:
    def __init__(self, srt: str):
        self.srt = srt
        self.calls: list[str] = []

    def transcribe(self, audio_path: str) -> str:
        self.calls.append(audio_path)
        return self.srt


class RecordingRunner:
    """Stands in for ``run_tool``. Creates the files a successful tool would write."""

    def __init__(self, download_ok: bool = True, transcode_ok: bool = True):
        self.download_ok = download_ok
        self.transcode_ok = transcode_ok
        self.calls: list[list[str]] = []

    @property
    def tools(self) -> list[str]:
        return ["ffmpeg" if args[0] == "ffmpeg" else "yt-dlp" for args in self.calls]

    def __call__(self, args: list[str], cwd: str, timeout: float) -> bool:
        self.calls.append(args)
        if args[0] == "ffmpeg":
            Path(cwd, args[-1]).write_bytes(b"opus")
            return self.transcode_ok
        output = args[args.index("--output") + 1]
        Path(cwd, output).write_bytes(b"partial" if not self.download_ok else b"m4a")
        return self.download_ok


SAMPLE_SRT = """1
00:00:00,000 --> 00:00:04,000
Welcome to the channel.

2
00:05:00,000 --> 00:05:06,500
Now the main topic.
"""


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def sample_srt():
    return SAMPLE_SRT


@pytest.fixture
def runner():
    return RecordingRunner()


@pytest.fixture
def make_webpage(cache):
    def factory(chat, html="<html><body><p>Hello world</p></body></html>", fetch_html=None):
        fetched: list[tuple[str, str]] = []

        def fake_fetch(url: str, host: str) -> str:
            fetched.append((url, host))
            return html

        pipeline = WebpagePipeline(cache=cache, chat=chat, fetch_html=fetch_html or fake_fetch)
        pipeline.fetched = fetched
        return pipeline

    return factory


@pytest.fixture
def make_video(cache, tmp_path, sample_srt):
    def factory(chat, runner=None, speech=None):
        runner = runner or RecordingRunner()
        fetcher = AudioFetcher(storage_dir=str(tmp_path), runner=runner)
        return VideoPipeline(cache=cache, chat=chat, audio_fetcher=fetcher, speech=speech or FakeSpeech(sample_srt))

    return factory


@pytest.fixture
def client():
    """FastAPI test client fixture with the app's dependency overrides reset afterwards."""
    from fastapi.testclient import TestClient

    from app import app

    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def clean_env():
    """Fixture to clear environment variables for testing."""
    original_env = dict(os.environ)
    os.environ.clear()
    yield
    os.environ.clear()
    os.environ.update(original_env)
