"""Pytest configuration and global fixtures for StudyRAG tests."""

from pathlib import Path

import pytest

from studyrag.chunker import SlidingWindowChunker
from studyrag.config.credentials import ResolvedCredentials
from studyrag.config.settings import Settings
from studyrag.embedder import EmbeddingGateway, MockEmbedder
from studyrag.ingestion import DocumentIngestionPipeline
from studyrag.repository import InMemoryDocumentRepository
from studyrag.retrieval import ContextAssembler
from studyrag.vector_store import InMemoryVectorStore
from tests.utils.fakes import TEST_DIMENSION


@pytest.fixture
def settings() -> Settings:
    """Settings with no API keys and small in-memory components."""
    return Settings(
        ENV="testing",
        EMBEDDING_PROVIDER="mock",
        EMBEDDING_DIMENSION=TEST_DIMENSION,
        VECTOR_STORE="memory",
        DATABASE_URL="sqlite://",
    )


# ==================== Component Fixtures ====================

@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder(dimension=TEST_DIMENSION)


@pytest.fixture
def gateway(mock_embedder) -> EmbeddingGateway:
    return EmbeddingGateway(mock_embedder, TEST_DIMENSION)


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(dimension=TEST_DIMENSION)


@pytest.fixture
def repository() -> InMemoryDocumentRepository:
    return InMemoryDocumentRepository()


@pytest.fixture
def chunker() -> SlidingWindowChunker:
    return SlidingWindowChunker(chunk_size=1000, chunk_overlap=200)


@pytest.fixture
def pipeline(repository, chunker, gateway, vector_store) -> DocumentIngestionPipeline:
    return DocumentIngestionPipeline(repository, chunker, gateway, vector_store, batch_size=10)


@pytest.fixture
def assembler(gateway, vector_store, repository) -> ContextAssembler:
    return ContextAssembler(gateway, vector_store, repository, max_chars=12000)


@pytest.fixture
def openai_credentials() -> ResolvedCredentials:
    return ResolvedCredentials(
        provider="openai",
        api_key="sk-test-0000000000abcd",
        model="gpt-4o-mini",
        base_url="https://api.openai.com/v1",
    )


@pytest.fixture
def anthropic_credentials() -> ResolvedCredentials:
    return ResolvedCredentials(
        provider="anthropic",
        api_key="sk-ant-test-000000wxyz",
        model="claude-3-5-sonnet-20241022",
        base_url="https://api.anthropic.com/v1",
    )


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "e2e" in rel_path.parts:
            item.add_marker(pytest.mark.e2e)
