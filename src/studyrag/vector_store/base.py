"""Base vector store interface."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from ..entities.chunk import ChunkRecord
from ..entities.search_result import SearchResult
from ..errors import DimensionMismatchError

_CHUNK_ID_NAMESPACE = uuid.UUID("6f1c2b8e-4a57-4f0e-9a51-6c0e3d1b7f42")


@dataclass(frozen=True)
class MetadataFilter:
    """Equality condition on a chunk attribute, applied together with the namespace."""

    name: str
    value: Any


def chunk_id_for(namespace: str, entry_id: str, order: int) -> str:
    """Stable id for the chunk at ``order`` within an entry."""
    return str(uuid.uuid5(_CHUNK_ID_NAMESPACE, f"{namespace}:{entry_id}:{order}"))


class BaseVectorStore(ABC):
    """Abstract base class for namespaced vector storage and similarity search.

    Every operation is scoped to a namespace. A search never returns a chunk
    stored under a different namespace, and filters are applied in the same
    query as the namespace condition, not afterwards.

    Attributes:
        dimension: Length every stored and query vector must have
    """

    def __init__(self, dimension: int):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension

    def _check_vector(self, vector: list[float]) -> None:
        if len(vector) != self.dimension:
            raise DimensionMismatchError(self.dimension, len(vector))

    @abstractmethod
    async def insert(
        self,
        namespace: str,
        entry_id: str,
        records: list[ChunkRecord],
        start_order: int = 0,
    ) -> list[str]:
        """Store records as chunks of ``entry_id``.

        The i-th record gets ``chunk_index = start_order + i``, which lets a
        caller insert one document in several batches.

        Returns:
            Ids of the stored chunks, in record order

        Raises:
            DimensionMismatchError: If any embedding has the wrong length
        """
        pass

    @abstractmethod
    async def search(
        self,
        namespace: str,
        query_vector: list[float],
        limit: int = 10,
        filters: list[MetadataFilter] | None = None,
    ) -> list[SearchResult]:
        """Return up to ``limit`` chunks of ``namespace`` ranked by cosine similarity.

        Results are sorted by score descending. An empty namespace yields an
        empty list, never an error.

        Raises:
            DimensionMismatchError: If the query vector has the wrong length
        """
        pass

    @abstractmethod
    async def delete_entry(self, namespace: str, entry_id: str) -> int:
        """Remove every chunk of ``entry_id``; returns how many were removed."""
        pass

    @abstractmethod
    async def list_entry(self, namespace: str, entry_id: str) -> list[SearchResult]:
        """Return every chunk of ``entry_id`` ordered by chunk index, with score 1.0."""
        pass

    @abstractmethod
    async def count(self, namespace: str | None = None) -> int:
        """Number of chunks in ``namespace``, or in the whole store when None."""
        pass
