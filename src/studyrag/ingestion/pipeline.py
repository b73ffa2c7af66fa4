"""Ingestion pipeline: extracted text → chunks → embeddings → vector store."""

from pydantic import BaseModel, Field, computed_field
from loguru import logger

from ..chunker import BaseChunker
from ..embedder import EmbeddingGateway
from ..entities.document import ContentKind, Document, ProcessingStatus, utc_now
from ..errors import EmbeddingError, ExtractionError, StudyRAGError
from ..namespace import namespace_for
from ..observability import trace_span
from ..repository import BaseDocumentRepository
from ..vector_store import BaseVectorStore
from .cleaner import MIN_TEXT_LENGTH, clean_extracted_text


class IngestionResult(BaseModel):
    document_id: str
    status: ProcessingStatus
    chunks_processed: int = 0
    embeddings_generated: int = 0
    chunk_ids: list[str] = Field(default_factory=list)


class ReprocessSummary(BaseModel):
    processed: int = 0
    failed: int = 0
    total_chunks: int = 0


class CollectionStats(BaseModel):
    total_documents: int = 0
    documents_with_embeddings: int = 0
    total_chunks: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    pending: int = 0

    @computed_field
    @property
    def ready_for_rag(self) -> bool:
        return self.documents_with_embeddings > 0


class DocumentIngestionPipeline:
    """Drives documents through the processing states.

    ``pending → processing → completed | failed``. Chunks are embedded and
    inserted one batch at a time, so a failure part-way through leaves the
    earlier batches stored and the document's counters reflecting them.

    Attributes:
        repository: Document records
        chunker: Splits text into chunks
        gateway: Embeds chunk text
        vector_store: Receives embedded chunks under the owner's namespace
        batch_size: Chunks per embed/insert round
    """

    def __init__(
        self,
        repository: BaseDocumentRepository,
        chunker: BaseChunker,
        gateway: EmbeddingGateway,
        vector_store: BaseVectorStore,
        batch_size: int = 10,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.repository = repository
        self.chunker = chunker
        self.gateway = gateway
        self.vector_store = vector_store
        self.batch_size = batch_size

    def register_document(
        self,
        owner_id: str,
        title: str,
        collection_id: str | None = None,
        content_kind: ContentKind = ContentKind.MATERIALS,
    ) -> Document:
        """Create a pending document record for a freshly uploaded file."""
        namespace_for(owner_id, content_kind)  # validates the owner id
        document = Document(
            owner_id=owner_id,
            collection_id=collection_id,
            title=title,
            content_kind=content_kind,
        )
        self.repository.add(document)
        logger.info(f"Registered document {document.id} ({title!r}) for owner {owner_id}")
        return document

    def record_extracted_text(self, document_id: str, owner_id: str, text: str) -> Document:
        """Store cleaned extraction output on the document.

        Raises:
            ExtractionError: If fewer than 10 characters survive cleaning;
                the document is marked failed
        """
        cleaned = clean_extracted_text(text)
        if len(cleaned) < MIN_TEXT_LENGTH:
            reason = "No readable text could be extracted from this document"
            self.record_extraction_failure(document_id, owner_id, reason)
            raise ExtractionError(reason, details={"document_id": document_id, "length": len(cleaned)})

        document = self.repository.get(owner_id, document_id)
        return self.repository.update(document.model_copy(update={"text": cleaned}))

    def record_extraction_failure(self, document_id: str, owner_id: str, reason: str) -> Document:
        logger.warning(f"Extraction failed for document {document_id}: {reason}")
        return self.repository.set_status(
            owner_id,
            document_id,
            ProcessingStatus.FAILED,
            error_message=reason,
            completed_at=utc_now(),
        )

    @trace_span("ingestion.process_document")
    async def process_document(self, document_id: str, owner_id: str) -> IngestionResult:
        """Chunk, embed and store a document's extracted text.

        Raises:
            DocumentNotFoundError: If the owner has no such document
            ExtractionError: If the document has no extracted text
            EmbeddingError: If a batch fails; earlier batches stay stored
        """
        document = self.repository.get(owner_id, document_id)
        if not document.text:
            raise ExtractionError(
                f"Document {document_id} has no extracted text",
                details={"document_id": document_id},
            )

        namespace = namespace_for(document.owner_id, document.content_kind)
        document = self.repository.set_status(
            owner_id,
            document_id,
            ProcessingStatus.PROCESSING,
            started_at=utc_now(),
            completed_at=None,
            error_message=None,
            chunks_processed=0,
            embeddings_generated=0,
        )

        chunks = self.chunker.chunk(document.text)
        total = len(chunks)
        logger.info(f"Processing document {document_id}: {total} chunks in {namespace}")

        base_metadata = {
            "owner_id": document.owner_id,
            "total_chunks": total,
            "title": document.title,
            "content_kind": document.content_kind.value,
        }
        if document.collection_id is not None:
            base_metadata["collection_id"] = document.collection_id

        chunk_ids: list[str] = []
        for start in range(0, total, self.batch_size):
            batch = chunks[start:start + self.batch_size]
            try:
                records = await self.gateway.embed_records(batch, base_metadata)
                ids = await self.vector_store.insert(namespace, document_id, records, start_order=start)
            except StudyRAGError as e:
                self._mark_partial_failure(document, len(chunk_ids), e)
                raise EmbeddingError(
                    f"Processing stopped at chunk {start} of {total}",
                    details={
                        "document_id": document_id,
                        "chunks_processed": len(chunk_ids),
                        "embeddings_generated": len(chunk_ids),
                    },
                    original_error=e,
                ) from e
            chunk_ids.extend(ids)

        self.repository.set_status(
            owner_id,
            document_id,
            ProcessingStatus.COMPLETED,
            chunks_processed=len(chunk_ids),
            embeddings_generated=len(chunk_ids),
            completed_at=utc_now(),
        )
        logger.info(f"Document {document_id} completed with {len(chunk_ids)} chunks")

        return IngestionResult(
            document_id=document_id,
            status=ProcessingStatus.COMPLETED,
            chunks_processed=len(chunk_ids),
            embeddings_generated=len(chunk_ids),
            chunk_ids=chunk_ids,
        )

    def _mark_partial_failure(self, document: Document, stored: int, error: StudyRAGError) -> None:
        logger.error(f"Document {document.id} failed after {stored} chunks: {error.message}")
        self.repository.set_status(
            document.owner_id,
            document.id,
            ProcessingStatus.FAILED,
            error_message=error.message,
            chunks_processed=stored,
            embeddings_generated=stored,
            completed_at=utc_now(),
        )

    async def delete_document(self, document_id: str, owner_id: str) -> int:
        """Delete a document and every chunk stored for it.

        Returns:
            Number of chunks removed from the vector store
        """
        document = self.repository.get(owner_id, document_id)
        removed = await self.vector_store.delete_entry(
            namespace_for(document.owner_id, document.content_kind),
            document_id,
        )
        self.repository.delete(owner_id, document_id)
        logger.info(f"Deleted document {document_id} and {removed} chunks")
        return removed

    async def reprocess_collection(self, owner_id: str, collection_id: str | None) -> ReprocessSummary:
        """Re-run processing for every unfinished document that has text."""
        summary = ReprocessSummary()
        for document in self.repository.list_by_collection(owner_id, collection_id):
            if not document.text or document.status == ProcessingStatus.COMPLETED:
                continue

            await self.vector_store.delete_entry(
                namespace_for(document.owner_id, document.content_kind),
                document.id,
            )
            try:
                result = await self.process_document(document.id, owner_id)
            except StudyRAGError as e:
                logger.warning(f"Reprocessing {document.id} failed: {e.message}")
                summary.failed += 1
                continue
            summary.processed += 1
            summary.total_chunks += result.chunks_processed

        logger.info(
            f"Reprocessed collection {collection_id}: "
            f"{summary.processed} ok, {summary.failed} failed, {summary.total_chunks} chunks"
        )
        return summary

    def collection_stats(self, owner_id: str, collection_id: str | None) -> CollectionStats:
        stats = CollectionStats()
        for document in self.repository.list_by_collection(owner_id, collection_id):
            stats.total_documents += 1
            stats.total_chunks += document.chunks_processed
            if document.has_embeddings:
                stats.documents_with_embeddings += 1
            if document.status == ProcessingStatus.PROCESSING:
                stats.processing += 1
            elif document.status == ProcessingStatus.COMPLETED:
                stats.completed += 1
            elif document.status == ProcessingStatus.FAILED:
                stats.failed += 1
            else:
                stats.pending += 1
        return stats
