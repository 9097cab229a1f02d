"""ElevenLabs text-to-speech synthesis."""

import logging
from typing import Optional

import httpx
from elevenlabs import VoiceSettings
from elevenlabs.client import AsyncElevenLabs
from elevenlabs.core import ApiError as ElevenLabsAPIError

from audio_combine.config import Settings, get_settings
from audio_combine.exceptions import (
    AudioSynthesisError,
    ConfigurationError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class AudioSynthesizer:
    """
    Synthesizes one line of speech using the ElevenLabs API.

    Every call uses the configured voice, model and voice settings; callers
    only choose the text. The SDK client is created on first use so that a
    missing API key fails fast without touching the network.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.voice_id = self.settings.elevenlabs_voice_id
        self.model = self.settings.elevenlabs_model
        self.output_format = self.settings.elevenlabs_output_format
        self.voice_settings = VoiceSettings(
            stability=self.settings.voice_stability,
            similarity_boost=self.settings.voice_similarity_boost,
        )
        self.timeout = httpx.Timeout(self.settings.elevenlabs_timeout, connect=10.0)

        self._client: Optional[AsyncElevenLabs] = None
        self._http_client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.settings.elevenlabs_api_key)

    def _get_client(self) -> AsyncElevenLabs:
        if not self.is_configured:
            raise ConfigurationError(
                message="ELEVENLABS_API_KEY is not set",
                missing_key="ELEVENLABS_API_KEY",
            )
        if self._client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
            self._client = AsyncElevenLabs(
                api_key=self.settings.elevenlabs_api_key,
                httpx_client=self._http_client,
            )
        return self._client

    async def synthesize(self, text: str) -> bytes:
        """
        Convert one line of text to audio using ElevenLabs.

        Args:
            text: Line to speak

        Returns:
            MP3 audio bytes

        Raises:
            ConfigurationError: If no API key is configured
            RateLimitError: If rate limited
            AudioSynthesisError: If synthesis fails
        """
        client = self._get_client()

        logger.info(f"Synthesizing audio with voice {self.voice_id}, text length: {len(text)}")

        try:
            audio_chunks = []
            async for chunk in client.text_to_speech.convert(
                voice_id=self.voice_id,
                model_id=self.model,
                text=text,
                output_format=self.output_format,
                voice_settings=self.voice_settings,
            ):
                audio_chunks.append(chunk)

        except ElevenLabsAPIError as e:
            error_str = str(e).lower()
            if e.status_code == 429 or "rate" in error_str or "quota" in error_str:
                logger.error(f"ElevenLabs rate limit: {e}")
                raise RateLimitError(
                    message="ElevenLabs rate limit exceeded",
                    service="elevenlabs",
                    retry_after=60,
                    cause=e,
                )
            logger.error(f"ElevenLabs API error: {e}")
            raise AudioSynthesisError(
                message=f"ElevenLabs API error: {str(e)}",
                voice_id=self.voice_id,
                text_length=len(text),
                cause=e,
            )
        except httpx.HTTPError as e:
            logger.error(f"ElevenLabs request failed: {e!r}")
            raise AudioSynthesisError(
                message=f"ElevenLabs request failed: {e!r}",
                voice_id=self.voice_id,
                text_length=len(text),
                cause=e,
            )

        audio_bytes = b"".join(audio_chunks)
        if not audio_bytes:
            logger.error(f"ElevenLabs returned no audio for text length {len(text)}")
            raise AudioSynthesisError(
                message="ElevenLabs returned an empty audio payload",
                voice_id=self.voice_id,
                text_length=len(text),
            )

        logger.info(f"Generated audio: {len(audio_bytes)} bytes")
        return audio_bytes

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was opened."""
        if self._http_client is not None:
            await self._http_client.aclose()
        self._http_client = None
        self._client = None
