"""Base chunker interface."""

from abc import ABC, abstractmethod


class BaseChunker(ABC):
    """Abstract base class for text chunking.

    Chunkers split extracted document text into smaller pieces suitable
    for embedding and retrieval.
    """

    @abstractmethod
    def chunk(self, text: str) -> list[str]:
        """Split text into chunks.

        Args:
            text: Extracted document text

        Returns:
            Ordered list of non-empty chunk strings
        """
        pass
