"""Custom exception classes for the audio combine service."""

from typing import Any, Optional


class AudioCombineError(Exception):
    """Base exception for audio combine errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(AudioCombineError):
    """Invalid or missing configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        missing_key: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if missing_key:
            details["missing_key"] = missing_key
        super().__init__(message, details=details, **kwargs)


class AudioSynthesisError(AudioCombineError):
    """Failed to synthesize audio via ElevenLabs."""

    def __init__(
        self,
        message: str = "Failed to synthesize audio",
        voice_id: Optional[str] = None,
        text_length: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if voice_id:
            details["voice_id"] = voice_id
        if text_length is not None:
            details["text_length"] = text_length
        super().__init__(message, details=details, **kwargs)


class RateLimitError(AudioSynthesisError):
    """Rate limit or quota exceeded for the synthesis API."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        service: Optional[str] = None,
        retry_after: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if service:
            details["service"] = service
        if retry_after:
            details["retry_after_seconds"] = retry_after
        super().__init__(message, details=details, **kwargs)


class AudioConcatenationError(AudioCombineError):
    """Failed to concatenate staged audio files."""

    def __init__(
        self,
        message: str = "Failed to concatenate audio",
        backend: Optional[str] = None,
        return_code: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", {})
        if backend:
            details["backend"] = backend
        if return_code is not None:
            details["return_code"] = return_code
        super().__init__(message, details=details, **kwargs)
