"""Mock embedder for testing (no external API)."""

import hashlib
import random

from loguru import logger

from ..base import BaseEmbedder


class MockEmbedder(BaseEmbedder):
    """Generates deterministic pseudo-random embeddings for testing.

    WARNING: This embedder is NOT suitable for production use.
    Identical texts always map to identical unit vectors, across processes.

    Attributes:
        dimension: Embedding vector dimension
        seed: Seed mixed into every text's vector
    """

    def __init__(self, dimension: int = 1536, seed: int = 42):
        self._dimension = dimension
        self.seed = seed
        self.calls: list[list[str]] = []
        logger.warning(
            "Using MockEmbedder - NOT for production use! "
            "Replace with real embedder for actual applications."
        )

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate mock embeddings for texts.

        Raises:
            ValueError: If texts is empty
        """
        if not texts:
            raise ValueError("texts cannot be empty")

        self.calls.append(list(texts))
        logger.debug(f"Generating {len(texts)} mock embeddings")
        return [self.vector_for(text) for text in texts]

    def vector_for(self, text: str) -> list[float]:
        # sha256 rather than hash() so vectors survive PYTHONHASHSEED changes
        digest = hashlib.sha256(f"{self.seed}:{text}".encode("utf-8")).digest()
        rng = random.Random(int.from_bytes(digest[:8], "big"))

        vec = [rng.gauss(0, 1) for _ in range(self._dimension)]
        magnitude = sum(x**2 for x in vec) ** 0.5
        if magnitude > 0:
            return [x / magnitude for x in vec]
        return [0.0] * self._dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return f"mock-{self._dimension}"
