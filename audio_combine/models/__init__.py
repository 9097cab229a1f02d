"""Data models for the audio combine service."""

from .requests import CombineAudioRequest
from .responses import HealthResponse, ReadinessResponse

__all__ = [
    "CombineAudioRequest",
    "HealthResponse",
    "ReadinessResponse",
]
