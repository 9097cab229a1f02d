"""Tests for the temporary file helpers."""

import asyncio
import logging
from pathlib import Path

import pytest
from starlette.background import BackgroundTask

from audio_combine.utils import remove_all_quietly, remove_quietly, stream_then_remove


@pytest.fixture
def merged_file(tmp_path: Path) -> Path:
    path = tmp_path / "combined_tok.mp3"
    path.write_bytes(b"0123456789" * 10)
    return path


class TestRemoveQuietly:
    def test_removes_existing_file(self, merged_file: Path):
        assert remove_quietly(merged_file) is True
        assert not merged_file.exists()

    def test_missing_file_is_not_an_error(self, tmp_path: Path):
        assert remove_quietly(tmp_path / "gone.mp3") is False

    def test_failure_is_logged(self, tmp_path: Path, caplog):
        directory = tmp_path / "not_a_file"
        directory.mkdir()

        with caplog.at_level(logging.WARNING):
            assert remove_quietly(directory) is False

        assert "Failed to remove temporary file" in caplog.text
        assert directory.exists()

    def test_remove_all_counts_removed(self, tmp_path: Path):
        present = [tmp_path / "audio_tok_0.mp3", tmp_path / "audio_tok_1.mp3"]
        for path in present:
            path.write_bytes(b"x")

        assert remove_all_quietly([*present, tmp_path / "audio_tok_2.mp3"]) == 2
        assert list(tmp_path.iterdir()) == []


class TestStreamThenRemove:
    def test_full_read_streams_everything_then_removes(self, merged_file: Path):
        expected = merged_file.read_bytes()

        async def collect() -> list[bytes]:
            return [chunk async for chunk in stream_then_remove(merged_file, chunk_size=7)]

        chunks = asyncio.run(collect())

        assert b"".join(chunks) == expected
        assert all(len(chunk) <= 7 for chunk in chunks)
        assert not merged_file.exists()

    def test_early_close_removes_file(self, merged_file: Path):
        """A client that disconnects after one chunk still leaves nothing behind."""

        async def read_one_then_close() -> bytes:
            stream = stream_then_remove(merged_file, chunk_size=4)
            first = await stream.__anext__()
            assert merged_file.exists()
            await stream.aclose()
            return first

        assert asyncio.run(read_one_then_close()) == b"0123"
        assert not merged_file.exists()

    def test_background_task_removes_unread_file(self, merged_file: Path):
        # A response that never starts iterating only has the background delete
        stream = stream_then_remove(merged_file)
        task = BackgroundTask(remove_quietly, merged_file)

        asyncio.run(task())

        assert not merged_file.exists()
        # Closing the never-started generator afterwards is harmless
        asyncio.run(stream.aclose())
