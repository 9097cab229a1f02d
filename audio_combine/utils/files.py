"""Temporary file helpers."""

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable

logger = logging.getLogger(__name__)


def remove_quietly(path: Path) -> bool:
    """
    Delete a file, logging instead of raising on failure.

    Args:
        path: File to delete

    Returns:
        True if the file was removed, False if it was missing or removal failed
    """
    try:
        path.unlink()
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Failed to remove temporary file {path}: {e}")
        return False


def remove_all_quietly(paths: Iterable[Path]) -> int:
    """Delete every path in order, returning how many were removed."""
    return sum(1 for path in paths if remove_quietly(path))


async def stream_then_remove(path: Path, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
    """
    Yield a file's contents in chunks and delete it once iteration stops.

    The file is removed whether the stream is exhausted, closed early by a
    disconnecting client, or interrupted by an error.

    Args:
        path: File to stream
        chunk_size: Bytes per chunk

    Yields:
        File contents
    """
    try:
        with open(path, "rb") as f:
            while True:
                chunk = await asyncio.to_thread(f.read, chunk_size)
                if not chunk:
                    break
                yield chunk
        logger.info(f"Streamed {path.name}")
    finally:
        remove_quietly(path)
