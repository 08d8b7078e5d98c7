"""Phrase Trainer - spaced repetition scheduling for song phrases."""

__version__ = "0.1.0"
