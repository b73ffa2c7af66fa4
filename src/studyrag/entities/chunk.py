"""Chunk entities: the stored unit of retrieval and its pre-storage record."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .document import utc_now

# Keys the vector store owns; caller metadata may not override them.
RESERVED_KEYS = frozenset({
    "namespace",
    "document_id",
    "chunk_index",
    "total_chunks",
    "owner_id",
    "collection_id",
    "embedding_model",
    "created_at",
})


class ChunkRecord(BaseModel):
    """A piece of text with its embedding, ready to be inserted into a store."""

    text: str = Field(..., min_length=1)
    embedding: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)


class Chunk(BaseModel):
    """
    A stored chunk of a document.

    ``chunk_index`` is the chunk's position within its document and is always
    smaller than ``total_chunks``. ``namespace`` scopes the chunk to one
    owner and content kind; it is never shared across owners.
    """

    id: str
    namespace: str
    document_id: str
    chunk_index: int = Field(..., ge=0)
    total_chunks: int = Field(..., ge=1)
    owner_id: str
    collection_id: str | None = None
    text: str
    embedding: list[float]
    embedding_model: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
    }

    @model_validator(mode="after")
    def _index_within_total(self) -> "Chunk":
        if self.chunk_index >= self.total_chunks:
            raise ValueError(
                f"chunk_index {self.chunk_index} must be smaller than total_chunks {self.total_chunks}"
            )
        return self

    @classmethod
    def from_record(
        cls,
        chunk_id: str,
        namespace: str,
        document_id: str,
        order: int,
        record: ChunkRecord,
    ) -> "Chunk":
        """Build a stored chunk from an insert record at position ``order``."""
        meta = dict(record.metadata)
        return cls(
            id=chunk_id,
            namespace=namespace,
            document_id=document_id,
            chunk_index=order,
            total_chunks=int(meta.pop("total_chunks", order + 1)),
            owner_id=str(meta.pop("owner_id", "")),
            collection_id=meta.pop("collection_id", None),
            text=record.text,
            embedding=list(record.embedding),
            embedding_model=str(meta.pop("embedding_model", "")),
            metadata={k: v for k, v in meta.items() if k not in RESERVED_KEYS},
        )

    def attribute(self, name: str) -> Any:
        """Look up a filterable attribute, falling back to free-form metadata."""
        if name in RESERVED_KEYS:
            return getattr(self, name)
        return self.metadata.get(name)

    def to_metadata(self) -> dict[str, Any]:
        """Flatten into scalar metadata for stores that cannot hold nested values."""
        flat: dict[str, Any] = {
            key: value for key, value in self.metadata.items()
            if isinstance(value, (str, int, float, bool))
        }
        flat.update({
            "namespace": self.namespace,
            "document_id": self.document_id,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
            "owner_id": self.owner_id,
            "embedding_model": self.embedding_model,
            "created_at": self.created_at.isoformat(),
        })
        if self.collection_id is not None:
            flat["collection_id"] = self.collection_id
        return flat

    @classmethod
    def from_metadata(
        cls,
        chunk_id: str,
        text: str,
        embedding: list[float],
        metadata: dict[str, Any],
    ) -> "Chunk":
        """Inverse of ``to_metadata``."""
        meta = dict(metadata)
        created_raw = meta.pop("created_at", None)
        return cls(
            id=chunk_id,
            namespace=meta.pop("namespace"),
            document_id=meta.pop("document_id"),
            chunk_index=int(meta.pop("chunk_index")),
            total_chunks=int(meta.pop("total_chunks")),
            owner_id=str(meta.pop("owner_id", "")),
            collection_id=meta.pop("collection_id", None),
            text=text,
            embedding=[float(x) for x in embedding],
            embedding_model=str(meta.pop("embedding_model", "")),
            created_at=datetime.fromisoformat(created_raw) if created_raw else utc_now(),
            metadata=meta,
        )
