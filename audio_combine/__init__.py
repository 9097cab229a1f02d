"""Text lines in, one combined spoken MP3 out."""

__version__ = "1.0.0"
