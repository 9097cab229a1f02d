"""Health check endpoints."""

from fastapi import APIRouter, Depends, Response

from audio_combine.api.routes.combine import get_combiner
from audio_combine.models import HealthResponse, ReadinessResponse
from audio_combine.services import AudioCombiner

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns service health status.
    """
    return HealthResponse(status="healthy")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    response: Response,
    combiner: AudioCombiner = Depends(get_combiner),
) -> ReadinessResponse:
    """
    Readiness check for container orchestration.

    Ready when an ElevenLabs API key is configured and the concatenation
    backend can run; otherwise responds 503.
    """
    checks = {
        "elevenlabs_api_key": combiner.synthesizer.is_configured,
        "concatenator": combiner.concatenator.is_available(),
    }
    ready = all(checks.values())
    if not ready:
        response.status_code = 503
    return ReadinessResponse(ready=ready, checks=checks)


@router.get("/live")
async def liveness_check() -> dict:
    """
    Liveness check for container orchestration.

    Returns alive status if service is running.
    """
    return {"alive": True}
