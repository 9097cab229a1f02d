"""API response models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from audio_combine import __version__


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default=__version__)
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Result of each dependency check",
    )
