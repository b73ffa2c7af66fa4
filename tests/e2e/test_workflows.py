"""
End-to-end workflows through StudyRAGEngine.

Everything runs in-process: in-memory repository and vector store, the mock
embedder, and provider HTTP answered by an httpx mock transport.
"""

import json

import pytest

from studyrag import ContentKind, GenerationParams, GenerationRequest, StudyRAGEngine, TaskKind
from studyrag.config.credentials import UserPreferences
from studyrag.entities.generation import ChatTurn
from studyrag.errors import AccessDeniedError, InsufficientContextError, MissingAPIKeyError
from studyrag.llm import ChatClient
from studyrag.namespace import namespace_for
from studyrag.repository import InMemoryDocumentRepository
from studyrag.vector_store import InMemoryVectorStore
from tests.utils.fakes import RecordingTransport, anthropic_body, openai_chat_body

SENTENCE = "The mitochondria is the powerhouse of the cell."
FLASHCARDS_REPLY = json.dumps([
    {"front": "What is the powerhouse of the cell?", "back": "The mitochondria."},
])


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def engine(settings, mock_embedder, transport):
    return StudyRAGEngine(
        settings=settings,
        repository=InMemoryDocumentRepository(),
        vector_store=InMemoryVectorStore(dimension=settings.EMBEDDING_DIMENSION),
        embedder=mock_embedder,
        chat_client=ChatClient(http_client=transport.client()),
    )


class TestUploadToFlashcards:

    @pytest.mark.asyncio
    async def test_mitochondria_scenario(self, engine, mock_embedder, transport):
        ingested = await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")

        assert ingested.chunks_processed == 1
        assert len(mock_embedder.calls) == 1

        stored = await engine.vector_store.list_entry(namespace_for("1"), ingested.document_id)
        assert len(stored) == 1
        assert stored[0].chunk.chunk_index == 0
        assert stored[0].chunk.total_chunks == 1
        assert stored[0].chunk.text == SENTENCE

        transport.responses.append(openai_chat_body(FLASHCARDS_REPLY))
        result = await engine.generate(
            GenerationRequest(
                task=TaskKind.FLASHCARDS,
                owner_id="1",
                collection_id="bio",
                params=GenerationParams(count=5),
                api_key="sk-test-key-1234",
            )
        )

        assert result.ok, result.error
        assert result.value.content[0].back == "The mitochondria."
        assert result.value.context_chunk_count == 1
        prompt = transport.body()["messages"][0]["content"]
        assert SENTENCE in prompt

    @pytest.mark.asyncio
    async def test_stats_after_upload(self, engine):
        await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")

        stats = engine.collection_stats("1", "bio")

        assert stats.completed == 1
        assert stats.ready_for_rag


class TestMissingKey:

    @pytest.mark.asyncio
    async def test_short_circuits_before_any_network_call(self, engine, mock_embedder, transport):
        await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")
        embed_calls = len(mock_embedder.calls)

        result = await engine.generate(
            GenerationRequest(task=TaskKind.QUIZ, owner_id="1", collection_id="bio")
        )

        assert not result.ok
        assert isinstance(result.error, MissingAPIKeyError)
        assert result.error.remediation == "add your API key in settings"
        assert transport.requests == []
        assert len(mock_embedder.calls) == embed_calls

    def test_engine_without_embedding_key_is_a_configuration_error(self, settings):
        no_key = settings.model_copy(update={"EMBEDDING_PROVIDER": "openai", "OPENAI_API_KEY": None})

        with pytest.raises(MissingAPIKeyError) as exc_info:
            StudyRAGEngine(settings=no_key, repository=InMemoryDocumentRepository())
        assert exc_info.value.remediation == "add your API key in settings"


class TestProviderDispatch:

    @pytest.mark.asyncio
    async def test_anthropic_preference_shapes_request(self, engine, transport):
        await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")
        transport.responses.append(anthropic_body("Mitochondria make ATP."))
        preferences = UserPreferences(provider="claude", api_keys={"anthropic": "sk-ant-stored-9999"})

        result = await engine.chat_with_tutor(
            "1",
            [ChatTurn(role="user", content="What does the mitochondria do?")],
            collection_id="bio",
            preferences=preferences,
        )

        assert result.value.content == "Mitochondria make ATP."
        request = transport.requests[0]
        body = transport.body()
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "sk-ant-stored-9999"
        assert SENTENCE in body["system"]
        assert all(m["role"] != "system" for m in body["messages"])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider,url", [
        ("openai", "https://api.openai.com/v1/chat/completions"),
        ("openrouter", "https://openrouter.ai/api/v1/chat/completions"),
    ])
    async def test_openai_compatible_shape(self, engine, transport, provider, url):
        await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")
        transport.responses.append(openai_chat_body("Mitochondria make ATP."))

        result = await engine.chat_with_tutor(
            "1",
            [ChatTurn(role="user", content="What does the mitochondria do?")],
            collection_id="bio",
            provider=provider,
            api_key="sk-explicit-0000",
        )

        assert result.ok
        assert str(transport.requests[0].url) == url
        messages = transport.body()["messages"]
        assert messages[0]["role"] == "system"
        assert SENTENCE in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "What does the mitochondria do?"}


class TestIsolationAndGrounding:

    @pytest.mark.asyncio
    async def test_malformed_owner_is_a_failure_result(self, engine, transport):
        result = await engine.generate(GenerationRequest(
            task=TaskKind.NOTES, owner_id="a:b", collection_id="bio", api_key="sk-test-0000000000abcd",
        ))

        assert not result.ok
        assert isinstance(result.error, AccessDeniedError)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_other_owner_gets_no_grounding(self, engine, transport):
        await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")

        result = await engine.generate(
            GenerationRequest(task=TaskKind.NOTES, owner_id="2", collection_id="bio", api_key="sk-test-key-1234")
        )

        assert isinstance(result.error, InsufficientContextError)
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_search_is_owner_scoped(self, engine):
        await engine.upload_document("1", "Plants", "Photosynthesis converts light into chemical energy.")
        await engine.upload_document("2", "Cells", SENTENCE)

        context = await engine.search("1", None, "mitochondria powerhouse", limit=10)

        assert SENTENCE not in context.text
        assert all(r.chunk.owner_id == "1" for r in context.chunks)

    @pytest.mark.asyncio
    async def test_past_paper_analysis_reads_past_papers(self, engine, transport):
        await engine.upload_document("1", "Notes", SENTENCE, collection_id="bio")
        await engine.upload_document(
            "1", "2022 paper", "Q3. Explain the role of mitochondria in respiration.",
            collection_id="bio", content_kind=ContentKind.PAST_PAPERS,
        )
        transport.responses.append(openai_chat_body("Respiration appears every year."))

        result = await engine.analyze_past_papers("1", "respiration", collection_id="bio", api_key="sk-test-key-1234")

        assert result.value.content == "Respiration appears every year."
        prompt = transport.body()["messages"][0]["content"]
        assert "Q3. Explain the role of mitochondria" in prompt
        assert SENTENCE not in prompt

    @pytest.mark.asyncio
    async def test_delete_then_generate_has_no_context(self, engine, transport):
        ingested = await engine.upload_document("1", "Cells", SENTENCE, collection_id="bio")
        await engine.delete_document("1", ingested.document_id)

        result = await engine.generate(
            GenerationRequest(task=TaskKind.FLASHCARDS, owner_id="1", collection_id="bio", api_key="sk-test-key-1234")
        )

        assert isinstance(result.error, InsufficientContextError)
        assert await engine.vector_store.count() == 0
