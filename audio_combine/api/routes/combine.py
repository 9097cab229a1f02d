"""Audio combine endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask

from audio_combine.exceptions import AudioCombineError
from audio_combine.models import CombineAudioRequest
from audio_combine.services import AudioCombiner
from audio_combine.utils import remove_quietly, stream_then_remove

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Audio"])

INVALID_INPUT_MESSAGE = "Invalid input"
PROCESSING_ERROR_MESSAGE = "An error occurred while processing audio"

# Singleton combiner instance
_combiner: Optional[AudioCombiner] = None


def get_combiner() -> AudioCombiner:
    """Get or create combiner instance."""
    global _combiner
    if _combiner is None:
        _combiner = AudioCombiner()
    return _combiner


async def close_combiner() -> None:
    """Release the combiner's HTTP client on shutdown."""
    global _combiner
    if _combiner is not None:
        await _combiner.synthesizer.aclose()
        _combiner = None


@router.post(
    "/combine-audio",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"audio/mpeg": {}}, "description": "Combined MP3 audio"},
        400: {"content": {"text/plain": {}}, "description": "Invalid input"},
        500: {"content": {"text/plain": {}}, "description": "Processing failed"},
    },
)
async def combine_audio(
    request: CombineAudioRequest,
    combiner: AudioCombiner = Depends(get_combiner),
):
    """
    Speak each line and return all of them as one MP3.

    Lines are synthesized concurrently and joined in request order.

    **Request Body:**
    ```json
    {
        "lines": ["Hello", "World"]
    }
    ```
    """
    max_lines = combiner.settings.max_lines
    if max_lines and len(request.lines) > max_lines:
        logger.info(f"Rejected combine request: {len(request.lines)} lines > {max_lines}")
        return PlainTextResponse(INVALID_INPUT_MESSAGE, status_code=400)

    logger.info(f"Combine audio request: {len(request.lines)} lines")

    try:
        combined_path = await combiner.combine(request.lines)
    except AudioCombineError as e:
        logger.error(f"Error processing audio: {e.to_dict()}")
        return PlainTextResponse(PROCESSING_ERROR_MESSAGE, status_code=500)
    except Exception as e:
        logger.exception(f"Unexpected error processing audio: {e}")
        return PlainTextResponse(PROCESSING_ERROR_MESSAGE, status_code=500)

    # The generator deletes the file when it closes; the background task covers
    # a client that disconnects before the first chunk is read.
    return StreamingResponse(
        stream_then_remove(combined_path, combiner.settings.stream_chunk_size),
        media_type="audio/mpeg",
        background=BackgroundTask(remove_quietly, combined_path),
    )
