"""Chunker module for splitting extracted text into retrievable pieces."""

from .base import BaseChunker
from .factory import ChunkerFactory
from .sliding_window import SlidingWindowChunker, chunk_text, iter_windows

__all__ = ["BaseChunker", "ChunkerFactory", "SlidingWindowChunker", "chunk_text", "iter_windows"]
