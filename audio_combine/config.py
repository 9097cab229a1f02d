"""Application configuration from environment variables."""

import shutil
import tempfile
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


def _default_ffmpeg_path() -> str:
    return shutil.which("ffmpeg") or "/usr/bin/ffmpeg"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4
    debug: bool = False
    log_level: str = "INFO"

    # ElevenLabs
    elevenlabs_api_key: str = ""
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"  # Rachel
    elevenlabs_model: str = "eleven_multilingual_v2"
    elevenlabs_output_format: str = "mp3_44100_128"
    elevenlabs_timeout: float = 60.0
    voice_stability: float = Field(default=0.5, ge=0.0, le=1.0)
    voice_similarity_boost: float = Field(default=0.75, ge=0.0, le=1.0)

    # Pipeline
    synthesis_concurrency: int = Field(
        default=0,
        ge=0,
        description="Max in-flight synthesis calls per request (0 = no limit)",
    )
    max_lines: int = Field(
        default=0,
        ge=0,
        description="Max lines per request (0 = no limit)",
    )
    temp_dir: str = Field(default_factory=tempfile.gettempdir)
    stream_chunk_size: int = 64 * 1024

    # Concatenation
    concat_backend: str = "ffmpeg"  # "ffmpeg" (stream copy) or "pydub" (re-encode)
    ffmpeg_path: str = Field(default_factory=_default_ffmpeg_path)
    pydub_bitrate: str = "128k"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
