"""Tests for the OpenAI-compatible embedder over a mocked transport."""

import httpx
import pytest

from studyrag.embedder import EmbedderFactory, OpenAIEmbedder
from studyrag.errors import (
    EmbeddingError,
    MissingAPIKeyError,
    RateLimitError,
    UnauthorizedError,
    UnknownProviderError,
)
from tests.utils.fakes import RecordingTransport, embeddings_body


def vectors(n: int, dim: int = 4, offset: int = 0) -> list[list[float]]:
    return [[float(offset + i)] * dim for i in range(n)]


class TestOpenAIEmbedder:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        transport = RecordingTransport([embeddings_body(vectors(2))])
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=transport.client())

        result = await embedder.embed(["a", "b"])

        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.openai.com/v1/embeddings"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert transport.body() == {"model": "text-embedding-3-small", "input": ["a", "b"]}
        assert result == vectors(2)

    @pytest.mark.asyncio
    async def test_response_reordered_by_index(self):
        transport = RecordingTransport([embeddings_body(vectors(3), reverse=True)])
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=transport.client())

        assert await embedder.embed(["a", "b", "c"]) == vectors(3)

    @pytest.mark.asyncio
    async def test_batches_preserve_order(self):
        transport = RecordingTransport([
            embeddings_body(vectors(2, offset=0)),
            embeddings_body(vectors(2, offset=2)),
            embeddings_body(vectors(1, offset=4)),
        ])
        embedder = OpenAIEmbedder(
            api_key="sk-test", dimension=4, batch_size=2, max_concurrency=1, client=transport.client()
        )

        result = await embedder.embed(["a", "b", "c", "d", "e"])

        assert len(transport.requests) == 3
        assert [transport.body(i)["input"] for i in range(3)] == [["a", "b"], ["c", "d"], ["e"]]
        assert result == vectors(5)

    @pytest.mark.asyncio
    async def test_rate_limit_classified(self):
        transport = RecordingTransport([
            httpx.Response(429, headers={"Retry-After": "3"}, json={"error": {"message": "slow"}}),
        ])
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=transport.client())

        with pytest.raises(RateLimitError) as exc_info:
            await embedder.embed(["a"])
        assert exc_info.value.retry_after == 3.0

    @pytest.mark.asyncio
    async def test_unauthorized_classified(self):
        transport = RecordingTransport([httpx.Response(401, json={"error": {"message": "bad key"}})])
        embedder = OpenAIEmbedder(api_key="sk-bad", dimension=4, client=transport.client())

        with pytest.raises(UnauthorizedError):
            await embedder.embed(["a"])

    @pytest.mark.asyncio
    async def test_count_mismatch(self):
        transport = RecordingTransport([embeddings_body(vectors(1))])
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=transport.client())

        with pytest.raises(EmbeddingError, match="1 vectors for 2 inputs"):
            await embedder.embed(["a", "b"])

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        transport = RecordingTransport([{"unexpected": True}])
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=transport.client())

        with pytest.raises(EmbeddingError, match="Malformed"):
            await embedder.embed(["a"])

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4, client=client)

        with pytest.raises(UnknownProviderError, match="failed"):
            await embedder.embed(["a"])

    @pytest.mark.asyncio
    async def test_empty_input_rejected(self):
        embedder = OpenAIEmbedder(api_key="sk-test", dimension=4)
        with pytest.raises(ValueError):
            await embedder.embed([])

    @pytest.mark.parametrize("api_key", ["", None])
    def test_requires_api_key(self, api_key):
        with pytest.raises(MissingAPIKeyError, match="api_key") as exc_info:
            OpenAIEmbedder(api_key=api_key)

        assert exc_info.value.provider == "openai"
        assert exc_info.value.remediation == "add your API key in settings"

    def test_factory(self):
        embedder = EmbedderFactory.create("openai", api_key="sk-test", dimension=8)
        assert isinstance(embedder, OpenAIEmbedder)
        assert embedder.dimension == 8
        assert embedder.model_name == "text-embedding-3-small"
        assert set(EmbedderFactory.list_types()) >= {"mock", "openai"}
