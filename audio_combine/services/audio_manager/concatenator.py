"""Audio concatenation backends: ordered staged files in, one merged file out."""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional, Protocol

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError, CouldntEncodeError

from audio_combine.config import Settings, get_settings
from audio_combine.exceptions import AudioConcatenationError, ConfigurationError
from audio_combine.utils import remove_quietly

logger = logging.getLogger(__name__)

# Keep the end of ffmpeg's stderr, that's where the failing reason is printed
STDERR_TAIL_CHARS = 2000


class AudioConcatenator(Protocol):
    """Joins audio files, in the given order, into a single output file."""

    name: str

    async def concatenate(self, inputs: list[Path], output: Path) -> Path:
        ...

    def is_available(self) -> bool:
        ...


def _binary_exists(executable: str) -> bool:
    return Path(executable).is_file() or shutil.which(executable) is not None


def quote_concat_path(path: Path) -> str:
    """Quote a path for an ffmpeg concat demuxer list file."""
    return "'" + str(path).replace("'", "'\\''") + "'"


class FfmpegConcatenator:
    """
    Lossless concatenation with ffmpeg's concat demuxer.

    Streams are copied, not re-encoded, so all inputs must share codec,
    sample rate and channel layout. ElevenLabs output in a single configured
    format always does.
    """

    name = "ffmpeg"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.ffmpeg_path = self.settings.ffmpeg_path

    def is_available(self) -> bool:
        return _binary_exists(self.ffmpeg_path)

    def build_command(self, list_file: Path, output: Path) -> list[str]:
        """Build the ffmpeg argument vector for a concat list file."""
        return [
            self.ffmpeg_path,
            "-y",
            "-hide_banner",
            "-loglevel", "error",
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_file),
            "-c", "copy",
            str(output),
        ]

    def write_list_file(self, inputs: list[Path], list_file: Path) -> None:
        lines = [f"file {quote_concat_path(path.resolve())}\n" for path in inputs]
        list_file.write_text("".join(lines), encoding="utf-8")

    async def _wait(self, process: asyncio.subprocess.Process) -> bytes:
        """Collect ffmpeg's stderr; kill the child if the wait is interrupted."""
        try:
            _, stderr = await process.communicate()
        except BaseException:
            if process.returncode is None:
                logger.warning(f"Killing ffmpeg (pid {process.pid}) after interrupted concatenation")
                process.kill()
                await process.wait()
            raise
        return stderr

    async def concatenate(self, inputs: list[Path], output: Path) -> Path:
        """
        Merge inputs into output with stream copy.

        Args:
            inputs: Audio files in playback order
            output: Destination file (overwritten if present)

        Returns:
            The output path

        Raises:
            AudioConcatenationError: If ffmpeg is missing, fails, or writes nothing
        """
        if not inputs:
            raise AudioConcatenationError(
                message="No input files to concatenate",
                backend=self.name,
            )

        list_file = output.with_suffix(".txt")
        command = self.build_command(list_file, output)

        logger.info(f"Concatenating {len(inputs)} files into {output.name} with ffmpeg")
        logger.debug(f"ffmpeg command: {' '.join(command)}")

        try:
            self.write_list_file(inputs, list_file)
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
            stderr = await self._wait(process)
        except OSError as e:
            logger.error(f"Could not run ffmpeg at {self.ffmpeg_path}: {e}")
            raise AudioConcatenationError(
                message=f"Could not run ffmpeg: {str(e)}",
                backend=self.name,
                cause=e,
            )
        finally:
            remove_quietly(list_file)

        if process.returncode != 0:
            stderr_text = (stderr or b"").decode("utf-8", errors="replace")
            logger.error(f"ffmpeg exited with code {process.returncode}: {stderr_text.strip()}")
            raise AudioConcatenationError(
                message="ffmpeg concatenation failed",
                backend=self.name,
                return_code=process.returncode,
                details={"stderr": stderr_text[-STDERR_TAIL_CHARS:]},
            )

        if not output.exists():
            raise AudioConcatenationError(
                message="ffmpeg reported success but produced no output",
                backend=self.name,
                return_code=process.returncode,
            )

        logger.info(f"Concatenated audio: {output.stat().st_size} bytes")
        return output


class PydubConcatenator:
    """
    Decode-and-re-encode concatenation with pydub.

    Slower than stream copy, but tolerates inputs whose sample rate or
    channel layout differ.
    """

    name = "pydub"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.bitrate = self.settings.pydub_bitrate
        self.ffmpeg_path = self.settings.ffmpeg_path
        # AudioSegment.converter is process-global; bind the binary on a subclass instead
        self.segment_cls = type(
            "ConfiguredAudioSegment",
            (AudioSegment,),
            {"converter": self.ffmpeg_path},
        )

    def is_available(self) -> bool:
        return _binary_exists(self.ffmpeg_path)

    def _merge(self, inputs: list[Path], output: Path) -> None:
        merged = self.segment_cls.empty()
        for path in inputs:
            merged += self.segment_cls.from_file(str(path), format="mp3")

        with open(output, "wb") as f:
            merged.export(f, format="mp3", bitrate=self.bitrate)

        logger.info(f"Merged audio: {len(merged) / 1000.0:.1f} seconds at {self.bitrate}")

    async def concatenate(self, inputs: list[Path], output: Path) -> Path:
        """
        Merge inputs into output by decoding and re-encoding as MP3.

        Raises:
            AudioConcatenationError: If decoding or encoding fails
        """
        if not inputs:
            raise AudioConcatenationError(
                message="No input files to concatenate",
                backend=self.name,
            )

        logger.info(f"Concatenating {len(inputs)} files into {output.name} with pydub")

        try:
            await asyncio.to_thread(self._merge, inputs, output)
        except CouldntDecodeError as e:
            logger.error(f"Failed to decode audio: {e}")
            raise AudioConcatenationError(
                message=f"Failed to decode audio file: {str(e)}",
                backend=self.name,
                cause=e,
            )
        except (CouldntEncodeError, OSError) as e:
            logger.error(f"Audio merging failed: {e}")
            raise AudioConcatenationError(
                message=f"Failed to merge audio: {str(e)}",
                backend=self.name,
                cause=e,
            )

        return output


CONCATENATORS = {
    FfmpegConcatenator.name: FfmpegConcatenator,
    PydubConcatenator.name: PydubConcatenator,
}


def build_concatenator(settings: Optional[Settings] = None) -> AudioConcatenator:
    """
    Create the concatenator selected by ``settings.concat_backend``.

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    settings = settings or get_settings()
    backend = settings.concat_backend.lower()
    try:
        concatenator_cls = CONCATENATORS[backend]
    except KeyError:
        raise ConfigurationError(
            message=f"Unknown concat backend '{settings.concat_backend}'",
            missing_key="CONCAT_BACKEND",
            details={"choices": sorted(CONCATENATORS)},
        )
    return concatenator_cls(settings)
