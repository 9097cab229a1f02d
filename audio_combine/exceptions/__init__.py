"""Custom exceptions for the audio combine service."""

from .errors import (
    AudioCombineError,
    AudioConcatenationError,
    AudioSynthesisError,
    ConfigurationError,
    RateLimitError,
)

__all__ = [
    "AudioCombineError",
    "AudioConcatenationError",
    "AudioSynthesisError",
    "ConfigurationError",
    "RateLimitError",
]
