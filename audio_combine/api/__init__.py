"""HTTP API for the audio combine service."""
