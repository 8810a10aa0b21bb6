"""Shared pytest fixtures for studio tests."""

from __future__ import annotations

import base64
import io

import pytest
from PIL import Image

from photolab.config import GenerationConfig, reset_config
from photolab.session import StudioSession
from photolab.utils.file_handler import to_data_uri


class ScriptedGenerator:
    """Stand-in for GeminiClient returning queued outcomes in call order."""

    def __init__(self, outcomes: list | None = None):
        self.outcomes = list(outcomes or [])
        self.calls: list[tuple[str, str, str]] = []

    async def generate_angle(self, source_image: str, angle_prompt: str, style_prompt: str = "") -> str:
        self.calls.append((source_image, angle_prompt, style_prompt))
        outcome = self.outcomes.pop(0) if self.outcomes else None
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            encoded = base64.b64encode(f"render:{angle_prompt}".encode()).decode()
            return f"data:image/png;base64,{encoded}"
        return outcome


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real credentials and config files out of tests."""
    for name in ("GEMINI_API_KEY", "API_KEY", "GEMINI_MODEL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def png_bytes() -> bytes:
    """Create a small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def source_uri(png_bytes: bytes) -> str:
    return to_data_uri(png_bytes, "image/png")


@pytest.fixture
def session(source_uri: str) -> StudioSession:
    studio = StudioSession()
    studio.set_source_image(source_uri, token="upload-1")
    return studio


@pytest.fixture
def generation_config() -> GenerationConfig:
    return GenerationConfig(request_delay_seconds=2.5, rate_limit_cooldown_seconds=60)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def scripted_generator() -> type[ScriptedGenerator]:
    """Factory for generators with queued outcomes."""
    return ScriptedGenerator
