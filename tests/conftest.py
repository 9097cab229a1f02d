"""Pytest fixtures for audio combine service tests."""

import asyncio
from pathlib import Path
from typing import Optional

import pytest

from audio_combine.config import Settings
from audio_combine.exceptions import AudioConcatenationError, AudioSynthesisError
from audio_combine.services import AudioCombiner


class FakeSynthesizer:
    """Stands in for AudioSynthesizer; returns b"<text>" for each line."""

    def __init__(
        self,
        delays: Optional[dict[str, float]] = None,
        fail_on: Optional[dict[str, Exception]] = None,
    ):
        self.delays = delays or {}
        self.fail_on = fail_on or {}
        self.calls: list[str] = []
        self.completed: list[str] = []
        self.cancelled: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.is_configured = True

    async def synthesize(self, text: str) -> bytes:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(text, 0))
            if text in self.fail_on:
                raise self.fail_on[text]
            self.completed.append(text)
            return f"<{text}>".encode()
        except asyncio.CancelledError:
            self.cancelled.append(text)
            raise
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        pass


class FakeConcatenator:
    """Stands in for FfmpegConcatenator; joins input bytes verbatim."""

    name = "fake"

    def __init__(self, error: Optional[Exception] = None, available: bool = True):
        self.error = error
        self.available = available
        self.calls: list[tuple[list[Path], Path]] = []

    def is_available(self) -> bool:
        return self.available

    async def concatenate(self, inputs: list[Path], output: Path) -> Path:
        self.calls.append((list(inputs), output))
        if self.error is not None:
            # Leave a partial file behind, as a crashed ffmpeg would
            output.write_bytes(b"partial")
            raise self.error
        output.write_bytes(b"".join(path.read_bytes() for path in inputs))
        return output


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Test settings with a mock API key and an isolated temp directory."""
    return Settings(
        elevenlabs_api_key="test-elevenlabs-key",
        elevenlabs_voice_id="test-voice-id",
        temp_dir=str(tmp_path),
        ffmpeg_path="/usr/bin/ffmpeg",
        debug=True,
    )


@pytest.fixture
def fake_synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def fake_concatenator() -> FakeConcatenator:
    return FakeConcatenator()


@pytest.fixture
def combiner(
    settings: Settings,
    fake_synthesizer: FakeSynthesizer,
    fake_concatenator: FakeConcatenator,
) -> AudioCombiner:
    """Combiner wired to fakes, writing into tmp_path."""
    return AudioCombiner(
        settings=settings,
        synthesizer=fake_synthesizer,
        concatenator=fake_concatenator,
    )


@pytest.fixture
def synthesis_error() -> AudioSynthesisError:
    return AudioSynthesisError("ElevenLabs API error: boom", voice_id="test-voice-id")


@pytest.fixture
def concatenation_error() -> AudioConcatenationError:
    return AudioConcatenationError("ffmpeg concatenation failed", backend="fake", return_code=1)
