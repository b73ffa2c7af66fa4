"""Context assembly: turns a query or a whole collection into prompt context."""

from pydantic import BaseModel, Field
from loguru import logger

from ..embedder import EmbeddingGateway
from ..entities.document import ContentKind
from ..entities.search_result import SearchResult
from ..namespace import namespace_for
from ..observability import trace_span
from ..repository import BaseDocumentRepository
from ..vector_store import BaseVectorStore, MetadataFilter

CHUNK_SEPARATOR = "\n\n"
# Characters of a document used as its representative query.
DOCUMENT_QUERY_CHARS = 500


class AssembledContext(BaseModel):
    """Concatenated chunk text plus what went into it."""

    text: str = ""
    chunks: list[SearchResult] = Field(default_factory=list, repr=False)
    document_count: int = 0
    truncated: bool = False

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def build_context(results: list[SearchResult], max_chars: int) -> AssembledContext:
    """Join chunk texts with blank lines, stopping before ``max_chars`` is exceeded.

    Whole chunks are kept or dropped; only a first chunk that alone exceeds
    the limit is cut.
    """
    parts: list[str] = []
    kept: list[SearchResult] = []
    length = 0
    truncated = False

    for result in results:
        text = result.chunk.text
        added = len(text) + (len(CHUNK_SEPARATOR) if parts else 0)
        if length + added > max_chars:
            if not parts:
                parts.append(text[:max_chars])
                kept.append(result)
            truncated = True
            break
        parts.append(text)
        kept.append(result)
        length += added

    return AssembledContext(
        text=CHUNK_SEPARATOR.join(parts),
        chunks=kept,
        document_count=len({r.chunk.document_id for r in kept}),
        truncated=truncated,
    )


class ContextAssembler:
    """Retrieves chunks from the owner's namespace and assembles bounded context.

    Attributes:
        max_chars: Hard upper bound on assembled context length
        collection_limit: Max chunks gathered for a whole collection
        min_score: Chunks scoring below this are dropped (None keeps all)
    """

    def __init__(
        self,
        gateway: EmbeddingGateway,
        vector_store: BaseVectorStore,
        repository: BaseDocumentRepository,
        max_chars: int = 12000,
        collection_limit: int = 50,
        min_score: float | None = None,
    ):
        self.gateway = gateway
        self.vector_store = vector_store
        self.repository = repository
        self.max_chars = max_chars
        self.collection_limit = collection_limit
        self.min_score = min_score

    def _keep(self, results: list[SearchResult]) -> list[SearchResult]:
        if self.min_score is None:
            return results
        return [r for r in results if r.score >= self.min_score]

    @trace_span("retrieval.assemble_for_query")
    async def assemble_for_query(
        self,
        owner_id: str,
        collection_id: str | None,
        query: str,
        limit: int = 5,
        content_kind: ContentKind = ContentKind.MATERIALS,
    ) -> AssembledContext:
        """Top ``limit`` chunks for ``query``, optionally restricted to one collection."""
        namespace = namespace_for(owner_id, content_kind)
        if not query.strip():
            return AssembledContext()

        query_vector = await self.gateway.embed_query(query)
        filters = [MetadataFilter("collection_id", collection_id)] if collection_id else None
        results = await self.vector_store.search(namespace, query_vector, limit=limit, filters=filters)
        results = self._keep(results)

        context = build_context(results, self.max_chars)
        logger.debug(f"Assembled {context.chunk_count} chunks ({len(context.text)} chars) for query in {namespace}")
        return context

    @trace_span("retrieval.assemble_for_collection")
    async def assemble_for_collection(
        self,
        owner_id: str,
        collection_id: str | None,
        limit: int | None = None,
        content_kind: ContentKind = ContentKind.MATERIALS,
    ) -> AssembledContext:
        """Representative chunks from every document in a collection, in source order.

        Each document is searched with its own opening text as the query,
        restricted to that document's chunks. Results are de-duplicated and
        ordered by document upload order, then chunk index.
        """
        limit = limit or self.collection_limit
        namespace = namespace_for(owner_id, content_kind)
        documents = [
            doc for doc in self.repository.list_by_collection(owner_id, collection_id, content_kind)
            if doc.text and doc.has_embeddings
        ]
        if not documents:
            logger.debug(f"No embedded documents in collection {collection_id} ({namespace})")
            return AssembledContext()

        per_document = max(1, limit // len(documents))
        query_vectors = await self.gateway.embed([doc.text[:DOCUMENT_QUERY_CHARS] for doc in documents])

        seen: set[str] = set()
        gathered: list[SearchResult] = []
        for document, vector in zip(documents, query_vectors):
            filters = [MetadataFilter("document_id", document.id)]
            if collection_id:
                filters.append(MetadataFilter("collection_id", collection_id))
            results = await self.vector_store.search(namespace, vector, limit=per_document, filters=filters)
            for result in self._keep(results):
                if result.chunk.id not in seen:
                    seen.add(result.chunk.id)
                    gathered.append(result)

        order = {doc.id: position for position, doc in enumerate(documents)}
        gathered.sort(key=lambda r: (order[r.chunk.document_id], r.chunk.chunk_index))
        context = build_context(gathered[:limit], self.max_chars)
        logger.debug(
            f"Assembled {context.chunk_count} chunks from {context.document_count} documents "
            f"({len(context.text)} chars) in {namespace}"
        )
        return context
