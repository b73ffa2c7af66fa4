"""Vector store module: namespaced chunk storage and similarity search."""

from .base import BaseVectorStore, MetadataFilter, chunk_id_for
from .factory import VectorStoreFactory
from .providers.chroma import ChromaVectorStore
from .providers.in_memory import InMemoryVectorStore

__all__ = [
    "BaseVectorStore",
    "MetadataFilter",
    "chunk_id_for",
    "VectorStoreFactory",
    "ChromaVectorStore",
    "InMemoryVectorStore",
]
