"""FastAPI application entry point for the Audio Combine Service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from audio_combine import __version__
from audio_combine.api.routes import combine_router, health_router
from audio_combine.api.routes.combine import (
    INVALID_INPUT_MESSAGE,
    PROCESSING_ERROR_MESSAGE,
    close_combiner,
)
from audio_combine.config import get_settings
from audio_combine.exceptions import AudioCombineError

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Audio Combine Service")
    settings = get_settings()
    logger.info(
        f"Environment: debug={settings.debug}, concat_backend={settings.concat_backend}, "
        f"temp_dir={settings.temp_dir}"
    )
    if not settings.elevenlabs_api_key:
        logger.warning("ELEVENLABS_API_KEY is not set; combine requests will fail")

    yield

    # Shutdown
    await close_combiner()
    logger.info("Shutting down Audio Combine Service")


# Create FastAPI application
app = FastAPI(
    title="Audio Combine Service",
    description="""
## Overview

Turns an ordered list of text lines into a single spoken MP3.

## Workflow

1. **Synthesize**: Every line is sent to ElevenLabs TTS concurrently
2. **Stage**: Each clip is written to a temporary file, named by position
3. **Concatenate**: ffmpeg joins the clips in request order (stream copy)
4. **Deliver**: The merged file is streamed back as `audio/mpeg`, then deleted
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> PlainTextResponse:
    """Reject malformed request bodies with a plain-text 400."""
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return PlainTextResponse(INVALID_INPUT_MESSAGE, status_code=400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> PlainTextResponse:
    """Render HTTP errors (404, 405, ...) as plain text."""
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(AudioCombineError)
async def audio_combine_error_handler(
    request: Request,
    exc: AudioCombineError,
) -> PlainTextResponse:
    """Handle combine errors raised outside the route body."""
    logger.error(f"Unhandled audio combine error: {exc.to_dict()}")
    return PlainTextResponse(PROCESSING_ERROR_MESSAGE, status_code=500)


# Include routers
app.include_router(health_router, prefix="/api")
app.include_router(combine_router, prefix="/api")


# Root endpoint
@app.get("/")
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": "Audio Combine Service",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "audio_combine.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.api_workers,
        log_level=settings.log_level.lower(),
    )
