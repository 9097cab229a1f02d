"""Audio synthesis, concatenation and combine pipeline."""

from .combiner import AudioCombiner
from .concatenator import (
    AudioConcatenator,
    FfmpegConcatenator,
    PydubConcatenator,
    build_concatenator,
)
from .synthesizer import AudioSynthesizer

__all__ = [
    "AudioCombiner",
    "AudioConcatenator",
    "AudioSynthesizer",
    "FfmpegConcatenator",
    "PydubConcatenator",
    "build_concatenator",
]
