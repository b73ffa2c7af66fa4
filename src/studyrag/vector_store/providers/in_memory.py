"""In-memory vector store implementation.

Chunks are partitioned by namespace, so a search only ever looks at the
caller's partition. Suitable for tests and single-process deployments.
"""

from loguru import logger

from ...entities.chunk import Chunk, ChunkRecord
from ...entities.search_result import SearchResult
from ...utils.similarity import cosine_similarity
from ..base import BaseVectorStore, MetadataFilter, chunk_id_for


class InMemoryVectorStore(BaseVectorStore):
    """Dictionary-backed store with exact cosine search.

    Attributes:
        _partitions: namespace -> chunk id -> chunk
    """

    def __init__(self, dimension: int = 1536):
        super().__init__(dimension)
        self._partitions: dict[str, dict[str, Chunk]] = {}

    async def insert(
        self,
        namespace: str,
        entry_id: str,
        records: list[ChunkRecord],
        start_order: int = 0,
    ) -> list[str]:
        for record in records:
            self._check_vector(record.embedding)

        partition = self._partitions.setdefault(namespace, {})
        ids = []
        for offset, record in enumerate(records):
            order = start_order + offset
            chunk_id = chunk_id_for(namespace, entry_id, order)
            partition[chunk_id] = Chunk.from_record(chunk_id, namespace, entry_id, order, record)
            ids.append(chunk_id)

        logger.debug(f"Inserted {len(ids)} chunks into {namespace} (entry={entry_id})")
        return ids

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

        results = []
        for chunk in self._partitions.get(namespace, {}).values():
            if not _matches(chunk, filters):
                continue
            score = cosine_similarity(query_vector, chunk.embedding)
            results.append(SearchResult(chunk=chunk, score=score))

        results.sort(key=lambda r: (-r.score, r.chunk.document_id, r.chunk.chunk_index))
        logger.debug(f"In-memory search in {namespace}: {len(results)} candidates, returning {min(limit, len(results))}")
        return results[:limit]

    async def delete_entry(self, namespace: str, entry_id: str) -> int:
        partition = self._partitions.get(namespace, {})
        doomed = [cid for cid, chunk in partition.items() if chunk.document_id == entry_id]
        for chunk_id in doomed:
            del partition[chunk_id]
        logger.info(f"Deleted {len(doomed)} chunks of {entry_id} from {namespace}")
        return len(doomed)

    async def list_entry(self, namespace: str, entry_id: str) -> list[SearchResult]:
        chunks = [
            chunk for chunk in self._partitions.get(namespace, {}).values()
            if chunk.document_id == entry_id
        ]
        chunks.sort(key=lambda c: c.chunk_index)
        return [SearchResult(chunk=chunk, score=1.0) for chunk in chunks]

    async def count(self, namespace: str | None = None) -> int:
        if namespace is not None:
            return len(self._partitions.get(namespace, {}))
        return sum(len(partition) for partition in self._partitions.values())


def _matches(chunk: Chunk, filters: list[MetadataFilter] | None) -> bool:
    return all(chunk.attribute(f.name) == f.value for f in filters or [])
