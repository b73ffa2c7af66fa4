"""Embedding gateway: the single entry point for turning text into vectors."""

from typing import Any

from loguru import logger

from ..entities.chunk import ChunkRecord
from ..errors import DimensionMismatchError, EmbeddingError, StudyRAGError
from ..observability import trace_span
from .base import BaseEmbedder


class EmbeddingGateway:
    """
    Wraps an embedder with dimension checks and error normalisation.

    Every vector leaving the gateway has exactly ``expected_dimension``
    entries; anything else is a configuration error, not a data error.
    Failures from the embedder that are not already StudyRAG errors are
    wrapped in ``EmbeddingError``.
    """

    def __init__(self, embedder: BaseEmbedder, expected_dimension: int | None = None):
        self.embedder = embedder
        self.expected_dimension = expected_dimension or embedder.dimension
        if embedder.dimension != self.expected_dimension:
            raise DimensionMismatchError(self.expected_dimension, embedder.dimension)

    @property
    def model_name(self) -> str:
        return self.embedder.model_name

    def check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self.expected_dimension:
            raise DimensionMismatchError(self.expected_dimension, len(vector))

    @trace_span("embedding.embed")
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts, preserving order.

        Raises:
            EmbeddingError: If the embedder fails for a non-classified reason
            ProviderError: If the embedding provider rejected the call
            DimensionMismatchError: If a vector has the wrong length
        """
        if not texts:
            return []

        try:
            vectors = await self.embedder.embed(texts)
        except StudyRAGError:
            raise
        except Exception as e:
            logger.error(f"Embedding {len(texts)} texts failed: {e}")
            raise EmbeddingError(f"Failed to embed {len(texts)} texts", original_error=e) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Embedder returned {len(vectors)} vectors for {len(texts)} texts"
            )
        for vector in vectors:
            self.check_dimension(vector)
        return vectors

    async def embed_query(self, query: str) -> list[float]:
        vectors = await self.embed([query])
        return vectors[0]

    async def embed_records(
        self,
        texts: list[str],
        base_metadata: dict[str, Any] | None = None,
    ) -> list[ChunkRecord]:
        """Embed texts and pair each with its vector and a copy of ``base_metadata``."""
        vectors = await self.embed(texts)
        metadata = dict(base_metadata or {})
        metadata.setdefault("embedding_model", self.model_name)
        return [
            ChunkRecord(text=text, embedding=vector, metadata=dict(metadata))
            for text, vector in zip(texts, vectors)
        ]
