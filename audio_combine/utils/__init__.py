"""Utility functions for the audio combine service."""

from .files import remove_all_quietly, remove_quietly, stream_then_remove

__all__ = [
    "remove_all_quietly",
    "remove_quietly",
    "stream_then_remove",
]
