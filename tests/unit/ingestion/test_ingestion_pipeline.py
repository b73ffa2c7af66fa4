"""Tests for the document ingestion pipeline."""

import pytest

from studyrag.chunker import SlidingWindowChunker
from studyrag.embedder import EmbeddingGateway, MockEmbedder
from studyrag.entities import ContentKind, ProcessingStatus
from studyrag.errors import (
    AccessDeniedError,
    DocumentNotFoundError,
    EmbeddingError,
    ExtractionError,
    RateLimitError,
)
from studyrag.ingestion import DocumentIngestionPipeline
from studyrag.namespace import namespace_for

from tests.utils.fakes import TEST_DIMENSION

# Five distinct ten-character chunks with a 10/0 window
FIVE_CHUNK_TEXT = "".join(letter * 10 for letter in "abcde")


class FlakyEmbedder(MockEmbedder):
    """Fails on the given (1-based) call."""

    def __init__(self, fail_on_call: int):
        super().__init__(dimension=TEST_DIMENSION)
        self.fail_on_call = fail_on_call

    async def embed(self, texts):
        if len(self.calls) + 1 == self.fail_on_call:
            self.calls.append(list(texts))
            raise RateLimitError(provider="openai")
        return await super().embed(texts)


def small_pipeline(repository, vector_store, embedder, batch_size=2):
    return DocumentIngestionPipeline(
        repository,
        SlidingWindowChunker(chunk_size=10, chunk_overlap=0),
        EmbeddingGateway(embedder, TEST_DIMENSION),
        vector_store,
        batch_size=batch_size,
    )


class TestRegistration:

    def test_register_creates_pending_document(self, pipeline, repository):
        doc = pipeline.register_document("1", "Cells", collection_id="bio")

        stored = repository.get("1", doc.id)
        assert stored.status == ProcessingStatus.PENDING
        assert stored.collection_id == "bio"

    def test_owner_id_validated(self, pipeline):
        with pytest.raises(AccessDeniedError):
            pipeline.register_document("a:b", "Cells")

    def test_extracted_text_is_cleaned(self, pipeline, repository):
        doc = pipeline.register_document("1", "Cells")

        pipeline.record_extracted_text(doc.id, "1", "The  cell\r\nmembrane.")

        assert repository.get("1", doc.id).text == "The cell\nmembrane."

    def test_short_extraction_fails_document(self, pipeline, repository):
        doc = pipeline.register_document("1", "Scan")

        with pytest.raises(ExtractionError):
            pipeline.record_extracted_text(doc.id, "1", "  tiny \n")

        stored = repository.get("1", doc.id)
        assert stored.status == ProcessingStatus.FAILED
        assert stored.error_message
        assert stored.completed_at is not None


class TestProcessDocument:

    @pytest.mark.asyncio
    async def test_completes_and_stores_chunks(self, repository, vector_store):
        embedder = MockEmbedder(dimension=TEST_DIMENSION)
        pipe = small_pipeline(repository, vector_store, embedder)
        doc = pipe.register_document("1", "Letters", collection_id="bio")
        pipe.record_extracted_text(doc.id, "1", FIVE_CHUNK_TEXT)

        result = await pipe.process_document(doc.id, "1")

        assert result.status == ProcessingStatus.COMPLETED
        assert result.chunks_processed == 5
        assert len(embedder.calls) == 3  # batches of 2, 2, 1

        stored = repository.get("1", doc.id)
        assert stored.status == ProcessingStatus.COMPLETED
        assert stored.embeddings_generated == 5
        assert stored.started_at is not None and stored.completed_at is not None

        listed = await vector_store.list_entry(namespace_for("1"), doc.id)
        assert [r.chunk.chunk_index for r in listed] == [0, 1, 2, 3, 4]
        assert all(r.chunk.total_chunks == 5 for r in listed)
        assert all(r.chunk.collection_id == "bio" for r in listed)
        assert listed[0].chunk.metadata["title"] == "Letters"

    @pytest.mark.asyncio
    async def test_past_papers_use_their_own_namespace(self, pipeline, vector_store):
        doc = pipeline.register_document("1", "2023 paper", content_kind=ContentKind.PAST_PAPERS)
        pipeline.record_extracted_text(doc.id, "1", "Question 1: explain osmosis.")

        await pipeline.process_document(doc.id, "1")

        assert await vector_store.count(namespace_for("1", ContentKind.PAST_PAPERS)) == 1
        assert await vector_store.count(namespace_for("1")) == 0

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_earlier_batches(self, repository, vector_store):
        pipe = small_pipeline(repository, vector_store, FlakyEmbedder(fail_on_call=2))
        doc = pipe.register_document("1", "Letters")
        pipe.record_extracted_text(doc.id, "1", FIVE_CHUNK_TEXT)

        with pytest.raises(EmbeddingError) as exc_info:
            await pipe.process_document(doc.id, "1")

        assert isinstance(exc_info.value.original_error, RateLimitError)
        assert exc_info.value.details["chunks_processed"] == 2

        stored = repository.get("1", doc.id)
        assert stored.status == ProcessingStatus.FAILED
        assert stored.chunks_processed == 2
        assert stored.embeddings_generated == 2
        assert await vector_store.count(namespace_for("1")) == 2

    @pytest.mark.asyncio
    async def test_document_without_text(self, pipeline):
        doc = pipeline.register_document("1", "Empty")
        with pytest.raises(ExtractionError):
            await pipeline.process_document(doc.id, "1")

    @pytest.mark.asyncio
    async def test_other_owner_cannot_process(self, pipeline):
        doc = pipeline.register_document("1", "Cells")
        pipeline.record_extracted_text(doc.id, "1", "The cell membrane regulates transport.")
        with pytest.raises(DocumentNotFoundError):
            await pipeline.process_document(doc.id, "2")


class TestDeleteAndReprocess:

    @pytest.mark.asyncio
    async def test_delete_removes_chunks_and_record(self, repository, vector_store):
        pipe = small_pipeline(repository, vector_store, MockEmbedder(dimension=TEST_DIMENSION))
        doc = pipe.register_document("1", "Letters")
        pipe.record_extracted_text(doc.id, "1", FIVE_CHUNK_TEXT)
        await pipe.process_document(doc.id, "1")

        removed = await pipe.delete_document(doc.id, "1")

        assert removed == 5
        assert await vector_store.count() == 0
        with pytest.raises(DocumentNotFoundError):
            repository.get("1", doc.id)

    @pytest.mark.asyncio
    async def test_reprocess_only_unfinished_documents(self, repository, vector_store):
        flaky = FlakyEmbedder(fail_on_call=2)
        pipe = small_pipeline(repository, vector_store, flaky, batch_size=10)
        done = pipe.register_document("1", "Done", collection_id="bio")
        pipe.record_extracted_text(done.id, "1", "Osmosis moves water across membranes.")
        await pipe.process_document(done.id, "1")

        broken = pipe.register_document("1", "Broken", collection_id="bio")
        pipe.record_extracted_text(broken.id, "1", FIVE_CHUNK_TEXT)
        with pytest.raises(EmbeddingError):
            await pipe.process_document(broken.id, "1")

        summary = await pipe.reprocess_collection("1", "bio")

        assert summary.processed == 1
        assert summary.failed == 0
        assert summary.total_chunks == 5
        assert repository.get("1", broken.id).status == ProcessingStatus.COMPLETED
        assert len(flaky.calls) == 3  # done, failed attempt, reprocess

    @pytest.mark.asyncio
    async def test_collection_stats(self, pipeline):
        ready = pipeline.register_document("1", "Ready", collection_id="bio")
        pipeline.record_extracted_text(ready.id, "1", "Osmosis moves water across membranes.")
        await pipeline.process_document(ready.id, "1")
        pipeline.register_document("1", "Waiting", collection_id="bio")

        stats = pipeline.collection_stats("1", "bio")

        assert stats.total_documents == 2
        assert stats.completed == 1
        assert stats.pending == 1
        assert stats.documents_with_embeddings == 1
        assert stats.total_chunks == 1
        assert stats.ready_for_rag is True
