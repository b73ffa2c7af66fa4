"""Fixed-size sliding window chunker with character overlap."""

from collections.abc import Iterator

from loguru import logger

from .base import BaseChunker

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200


def iter_windows(text: str, chunk_size: int, chunk_overlap: int) -> Iterator[tuple[int, int]]:
    """Yield the ``(start, end)`` character windows covering ``text``.

    Consecutive windows share ``chunk_overlap`` characters. The window always
    advances by at least one character, so an overlap greater than or equal
    to the chunk size still terminates.

    Raises:
        ValueError: If chunk_size is not positive or chunk_overlap is negative
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if chunk_overlap < 0:
        raise ValueError(f"chunk_overlap must be non-negative, got {chunk_overlap}")

    length = len(text)
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        yield start, end
        if end >= length:
            break
        next_start = end - chunk_overlap
        if next_start <= start:
            next_start = start + 1
        start = next_start


def chunk_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split ``text`` into overlapping chunks of at most ``chunk_size`` characters.

    Windows are trimmed of surrounding whitespace and dropped when empty.
    Empty input yields an empty list.

    Example:
        >>> chunk_text("abcdefghij", chunk_size=4, chunk_overlap=1)
        ['abcd', 'defg', 'ghij']
    """
    chunks = []
    for start, end in iter_windows(text, chunk_size, chunk_overlap):
        piece = text[start:end].strip()
        if piece:
            chunks.append(piece)
    return chunks


class SlidingWindowChunker(BaseChunker):
    """Character window chunker used for all study documents.

    Attributes:
        chunk_size: Maximum characters per chunk
        chunk_overlap: Characters shared by consecutive chunks
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, chunk_overlap: int = DEFAULT_CHUNK_OVERLAP):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap must be non-negative, got {chunk_overlap}")
        if chunk_overlap >= chunk_size:
            logger.warning(
                f"chunk_overlap ({chunk_overlap}) >= chunk_size ({chunk_size}); "
                "windows will advance one character at a time"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk(self, text: str) -> list[str]:
        chunks = chunk_text(text, self.chunk_size, self.chunk_overlap)
        logger.debug(f"Split {len(text)} chars into {len(chunks)} chunks")
        return chunks

    def windows(self, text: str) -> list[tuple[int, int]]:
        return list(iter_windows(text, self.chunk_size, self.chunk_overlap))
