import asyncio
import io
from types import SimpleNamespace
from typing import List, Optional

import pytest
from PIL import Image

from models.relay_models import RelayResult
from services.relay_client import RelayClient
from utils.app_config import AppConfig


class FakeRelay(RelayClient):
    """Relay double that records calls and can hold them open until released."""

    def __init__(self, description: str = "A cat on a windowsill.", audio_url: str = "/audio/cat.mp3") -> None:
        self.analyze_calls: List[str] = []
        self.synthesize_calls: List[tuple] = []
        self.analyze_result = RelayResult.success(description)
        self.synthesize_result = RelayResult.success(audio_url)
        self.analyze_gate: Optional[asyncio.Event] = None
        self.synthesize_gate: Optional[asyncio.Event] = None
        self.analyze_error: Optional[Exception] = None
        self.synthesize_error: Optional[Exception] = None
        self.discarded: List[str] = []

    async def analyze(self, image_data_url: str) -> RelayResult:
        self.analyze_calls.append(image_data_url)
        if self.analyze_gate is not None:
            await self.analyze_gate.wait()
        if self.analyze_error is not None:
            raise self.analyze_error
        return self.analyze_result

    async def synthesize(self, text: str, voice: Optional[str] = None) -> RelayResult:
        self.synthesize_calls.append((text, voice))
        if self.synthesize_gate is not None:
            await self.synthesize_gate.wait()
        if self.synthesize_error is not None:
            raise self.synthesize_error
        return self.synthesize_result

    def discard_audio(self, audio_url: str) -> None:
        self.discarded.append(audio_url)


class FakeOpenAI:
    """Stand-in for AsyncOpenAI exposing only responses.create and audio.speech.create."""

    def __init__(self, description: str = "A dog on a sofa.", audio: bytes = b"ID3fake-mp3") -> None:
        self.description = description
        self.response_calls: List[dict] = []
        self.speech_calls: List[dict] = []
        self.fail_responses = False
        self.fail_speech = False
        self.responses = SimpleNamespace(create=self._create_response)
        self.audio = SimpleNamespace(speech=SimpleNamespace(create=self._create_speech))
        self._audio_bytes = audio

    async def _create_response(self, **kwargs):
        self.response_calls.append(kwargs)
        if self.fail_responses:
            raise RuntimeError("provider unavailable")
        usage = SimpleNamespace(input_tokens=120, output_tokens=30)
        return SimpleNamespace(output_text=self.description, output=[], usage=usage)

    async def _create_speech(self, **kwargs):
        self.speech_calls.append(kwargs)
        if self.fail_speech:
            raise RuntimeError("voice unavailable")
        return SimpleNamespace(content=self._audio_bytes)


def make_png(size=(8, 6), color=(200, 30, 30)) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_relay() -> FakeRelay:
    return FakeRelay()


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(openai_api_key="test-key", audio_cache_dir=tmp_path / "audio")
