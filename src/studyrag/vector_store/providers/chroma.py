"""Chroma vector store implementation.

All owners share one Chroma collection. Each chunk carries its namespace
as metadata, and every read combines the namespace condition with any
caller filters into a single ``where`` clause, so isolation is enforced by
the database query itself.
"""

import asyncio
from typing import Any

from loguru import logger

try:
    import chromadb
    CHROMA_AVAILABLE = True
except ImportError as e:
    CHROMA_AVAILABLE = False
    logger.warning(f"chromadb not installed - ChromaVectorStore unavailable: {e}")

from ...entities.chunk import Chunk, ChunkRecord
from ...entities.search_result import SearchResult
from ...errors import VectorStoreError
from ..base import BaseVectorStore, MetadataFilter, chunk_id_for


def build_where(namespace: str, filters: list[MetadataFilter] | None = None) -> dict[str, Any]:
    """Combine the namespace with equality filters into one Chroma where clause."""
    conditions = [{"namespace": {"$eq": namespace}}]
    conditions.extend({f.name: {"$eq": f.value}} for f in filters or [])
    if len(conditions) == 1:
        return conditions[0]
    return {"$and": conditions}


class ChromaVectorStore(BaseVectorStore):
    """Chroma-backed store using cosine distance.

    Attributes:
        collection_name: Name of the Chroma collection
        persist_directory: Directory for persistent storage
    """

    def __init__(
        self,
        dimension: int = 1536,
        persist_directory: str = "storage/chroma_db",
        collection_name: str = "studyrag_chunks",
        client: Any | None = None,
    ):
        super().__init__(dimension)

        if client is None:
            if not CHROMA_AVAILABLE:
                raise ImportError(
                    "chromadb is required for ChromaVectorStore. "
                    "Install with: pip install chromadb"
                )
            client = chromadb.PersistentClient(path=persist_directory)
            logger.info(f"Initialized Chroma in persistent mode: {persist_directory}")

        self.collection_name = collection_name
        self.persist_directory = persist_directory
        self._client = client
        self._collection = client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        logger.info(f"ChromaVectorStore ready: collection={collection_name}")

    async def insert(
        self,
        namespace: str,
        entry_id: str,
        records: list[ChunkRecord],
        start_order: int = 0,
    ) -> list[str]:
        if not records:
            return []
        for record in records:
            self._check_vector(record.embedding)

        chunks = [
            Chunk.from_record(
                chunk_id_for(namespace, entry_id, start_order + offset),
                namespace,
                entry_id,
                start_order + offset,
                record,
            )
            for offset, record in enumerate(records)
        ]

        try:
            await asyncio.to_thread(
                self._collection.upsert,
                ids=[c.id for c in chunks],
                embeddings=[c.embedding for c in chunks],
                documents=[c.text for c in chunks],
                metadatas=[c.to_metadata() for c in chunks],
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to insert chunks for {entry_id}", original_error=e) from e

        logger.debug(f"Upserted {len(chunks)} chunks into {namespace} (entry={entry_id})")
        return [c.id for c in chunks]

    async def search(
        self,
        namespace: str,
        query_vector: list[float],
        limit: int = 10,
        filters: list[MetadataFilter] | None = None,
    ) -> list[SearchResult]:
        self._check_vector(query_vector)
        if limit <= 0:
            return []

        try:
            results = await asyncio.to_thread(
                self._collection.query,
                query_embeddings=[query_vector],
                n_results=limit,
                where=build_where(namespace, filters),
                include=["documents", "metadatas", "distances", "embeddings"],
            )
        except Exception as e:
            raise VectorStoreError(f"Chroma query failed in {namespace}", original_error=e) from e

        if not results["ids"] or not len(results["ids"][0]):
            logger.debug(f"No results in {namespace}")
            return []

        # Chroma returns nested lists (one per query)
        ids = results["ids"][0]
        documents = results["documents"][0]
        metadatas = results["metadatas"][0]
        distances = results["distances"][0]
        embeddings = results["embeddings"][0]

        search_results = []
        for i, chunk_id in enumerate(ids):
            chunk = self._to_chunk(chunk_id, documents[i], embeddings[i], metadatas[i], namespace)
            # cosine distance = 1 - cosine similarity
            score = max(-1.0, min(1.0, 1.0 - float(distances[i])))
            search_results.append(SearchResult(chunk=chunk, score=score))

        search_results.sort()
        return search_results

    async def delete_entry(self, namespace: str, entry_id: str) -> int:
        where = build_where(namespace, [MetadataFilter("document_id", entry_id)])
        try:
            found = await asyncio.to_thread(self._collection.get, where=where, include=[])
            ids = list(found["ids"])
            if ids:
                await asyncio.to_thread(self._collection.delete, ids=ids)
        except Exception as e:
            raise VectorStoreError(f"Failed to delete chunks of {entry_id}", original_error=e) from e

        logger.info(f"Deleted {len(ids)} chunks of {entry_id} from {namespace}")
        return len(ids)

    async def list_entry(self, namespace: str, entry_id: str) -> list[SearchResult]:
        where = build_where(namespace, [MetadataFilter("document_id", entry_id)])
        try:
            found = await asyncio.to_thread(
                self._collection.get,
                where=where,
                include=["documents", "metadatas", "embeddings"],
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to list chunks of {entry_id}", original_error=e) from e

        chunks = [
            self._to_chunk(chunk_id, found["documents"][i], found["embeddings"][i], found["metadatas"][i], namespace)
            for i, chunk_id in enumerate(found["ids"])
        ]
        chunks.sort(key=lambda c: c.chunk_index)
        return [SearchResult(chunk=chunk, score=1.0) for chunk in chunks]

    async def count(self, namespace: str | None = None) -> int:
        if namespace is None:
            return await asyncio.to_thread(self._collection.count)
        found = await asyncio.to_thread(self._collection.get, where=build_where(namespace), include=[])
        return len(found["ids"])

    def _to_chunk(
        self,
        chunk_id: str,
        text: str,
        embedding: Any,
        metadata: dict[str, Any],
        namespace: str,
    ) -> Chunk:
        if metadata.get("namespace") != namespace:
            # The where clause should make this impossible; refuse to leak if it happens.
            raise VectorStoreError(
                f"Chroma returned chunk {chunk_id} from another namespace",
                details={"expected": namespace, "actual": metadata.get("namespace")},
            )
        return Chunk.from_metadata(chunk_id, text, list(embedding), metadata)
