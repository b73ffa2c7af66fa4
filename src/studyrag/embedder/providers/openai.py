"""OpenAI-compatible embeddings API client."""

import asyncio

import httpx
from loguru import logger

from ...errors import EmbeddingError, MissingAPIKeyError, classify_http_error, wrap_transport_error
from ...utils.timeouts import TimeoutConfig
from ..base import BaseEmbedder


class OpenAIEmbedder(BaseEmbedder):
    """Embedder calling the ``/embeddings`` endpoint of an OpenAI-compatible API.

    Texts are sent in batches of ``batch_size``; up to ``max_concurrency``
    batches are in flight at once. The returned vectors are reordered by the
    ``index`` field of the response, so output order always matches input.

    Attributes:
        model: Embedding model identifier
        base_url: API root, without trailing slash
        batch_size: Texts per request
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str = "https://api.openai.com/v1",
        dimension: int = 1536,
        batch_size: int = 10,
        max_concurrency: int = 4,
        timeout: TimeoutConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        if not api_key:
            raise MissingAPIKeyError("openai", "api_key is required for OpenAIEmbedder")
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")

        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._dimension = dimension
        self.batch_size = batch_size
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))
        self._timeout = timeout or TimeoutConfig.long_running()
        self._client = client

        logger.info(f"Initialized OpenAIEmbedder: model={model}, dimension={dimension}")

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self.model

    async def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts cannot be empty")

        batches = [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]
        logger.debug(f"Embedding {len(texts)} texts in {len(batches)} batches")

        if self._client is not None:
            results = await asyncio.gather(*(self._embed_batch(self._client, b) for b in batches))
        else:
            async with httpx.AsyncClient(timeout=self._timeout.to_httpx()) as client:
                results = await asyncio.gather(*(self._embed_batch(client, b) for b in batches))

        return [vector for batch in results for vector in batch]

    async def _embed_batch(self, client: httpx.AsyncClient, batch: list[str]) -> list[list[float]]:
        payload = {"model": self.model, "input": batch}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        async with self._semaphore:
            try:
                response = await client.post(f"{self.base_url}/embeddings", json=payload, headers=headers)
            except httpx.HTTPError as e:
                raise wrap_transport_error(e, provider="openai") from e

        if response.status_code >= 400:
            logger.error(f"Embedding API returned error status {response.status_code}")
            raise classify_http_error(
                response.status_code,
                response.text,
                dict(response.headers),
                provider="openai",
            )

        return self._parse_response(response, expected=len(batch))

    def _parse_response(self, response: httpx.Response, expected: int) -> list[list[float]]:
        try:
            data = response.json()["data"]
            ordered = sorted(data, key=lambda item: item["index"])
            vectors = [[float(x) for x in item["embedding"]] for item in ordered]
        except (KeyError, TypeError, ValueError) as e:
            raise EmbeddingError("Malformed embedding response", original_error=e) from e

        if len(vectors) != expected:
            raise EmbeddingError(
                f"Embedding API returned {len(vectors)} vectors for {expected} inputs",
                details={"expected": expected, "received": len(vectors)},
            )
        return vectors

