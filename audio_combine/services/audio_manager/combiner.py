"""Synthesize lines concurrently and merge them into one audio file."""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Optional

from audio_combine.config import Settings, get_settings
from audio_combine.exceptions import AudioCombineError
from audio_combine.services.audio_manager.concatenator import (
    AudioConcatenator,
    build_concatenator,
)
from audio_combine.services.audio_manager.synthesizer import AudioSynthesizer
from audio_combine.utils import remove_all_quietly, remove_quietly

logger = logging.getLogger(__name__)


class AudioCombiner:
    """
    Runs the combine pipeline for one request.

    Workflow:
    1. Synthesize every line concurrently (all-or-nothing)
    2. Stage each result as audio_<token>_<index>.mp3
    3. Concatenate staged files, in input order, into combined_<token>.mp3
    4. Delete staged files; the caller owns and deletes the merged file

    The token is unique per call, so concurrent requests never share files.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        synthesizer: Optional[AudioSynthesizer] = None,
        concatenator: Optional[AudioConcatenator] = None,
    ):
        self.settings = settings or get_settings()
        self.synthesizer = synthesizer or AudioSynthesizer(self.settings)
        self.concatenator = concatenator or build_concatenator(self.settings)
        self.temp_dir = Path(self.settings.temp_dir)
        self.concurrency = self.settings.synthesis_concurrency

    def staged_path(self, token: str, index: int) -> Path:
        return self.temp_dir / f"audio_{token}_{index}.mp3"

    def output_path(self, token: str) -> Path:
        return self.temp_dir / f"combined_{token}.mp3"

    async def synthesize_all(self, lines: list[str]) -> list[bytes]:
        """
        Synthesize all lines concurrently.

        Results are indexed by input position, not completion order. On the
        first failure the remaining calls are cancelled and the error is
        re-raised.

        Args:
            lines: Text lines in playback order

        Returns:
            Audio bytes, one entry per line, in input order
        """
        semaphore = asyncio.Semaphore(self.concurrency) if self.concurrency else None

        async def synthesize_line(text: str) -> bytes:
            if semaphore is None:
                return await self.synthesizer.synthesize(text)
            async with semaphore:
                return await self.synthesizer.synthesize(text)

        tasks = [asyncio.create_task(synthesize_line(line)) for line in lines]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if pending:
                logger.info(f"Cancelled {len(pending)} outstanding synthesis calls")
            raise

    def stage(self, token: str, buffers: list[bytes], staged: list[Path]) -> None:
        """
        Write each buffer to its positional staged file.

        Paths are appended to ``staged`` before writing, so the caller can
        clean up whatever was created even if a write fails part way.
        """
        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            for index, audio in enumerate(buffers):
                path = self.staged_path(token, index)
                staged.append(path)
                path.write_bytes(audio)
        except OSError as e:
            logger.error(f"[{token[:8]}] Failed to stage audio in {self.temp_dir}: {e}")
            raise AudioCombineError(
                message=f"Failed to stage audio: {str(e)}",
                details={"temp_dir": str(self.temp_dir)},
                cause=e,
            )

    async def combine(self, lines: list[str]) -> Path:
        """
        Produce one merged audio file for the given lines.

        Args:
            lines: Non-empty list of text lines in playback order

        Returns:
            Path of the merged file; the caller must delete it

        Raises:
            AudioCombineError: If any synthesis call, staging or concatenation fails
        """
        token = uuid.uuid4().hex
        logger.info(f"[{token[:8]}] Synthesizing {len(lines)} lines...")

        buffers = await self.synthesize_all(lines)

        output = self.output_path(token)
        staged: list[Path] = []

        try:
            self.stage(token, buffers, staged)
            logger.info(f"[{token[:8]}] Staged {len(staged)} files in {self.temp_dir}")

            await self.concatenator.concatenate(staged, output)

        except BaseException:
            remove_quietly(output)
            raise
        finally:
            remove_all_quietly(staged)

        logger.info(f"[{token[:8]}] ✓ Combined audio ready: {output.name}")
        return output
