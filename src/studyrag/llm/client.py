"""Chat client: sends adapter-built requests and classifies failures once."""

import httpx
from loguru import logger

from ..config.credentials import ResolvedCredentials, mask_key
from ..errors import MissingAPIKeyError, UnknownProviderError, classify_http_error, wrap_transport_error
from ..observability import trace_span
from ..utils.timeouts import TimeoutConfig
from .registry import ProviderRegistry
from .types import ChatMessage, Completion, CompletionParams


def _error_message(response: httpx.Response) -> str:
    """Best-effort human-readable message from a provider error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("message"):
            return str(body["message"])
    return response.text[:500]


class ChatClient:
    """
    Performs chat completions against any registered provider.

    This is the only place a provider HTTP response is inspected: non-2xx
    statuses become typed ``ProviderError`` subclasses here and nowhere else.
    A missing key is rejected before any request is built.

    Attributes:
        registry: Provider adapters
        timeout: Timeout preset applied to every call
    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        timeout: TimeoutConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.registry = registry or ProviderRegistry()
        self.timeout = timeout or TimeoutConfig.standard()
        self._http_client = http_client

    @trace_span("llm.complete")
    async def complete(
        self,
        messages: list[ChatMessage],
        params: CompletionParams,
        credentials: ResolvedCredentials,
    ) -> Completion:
        """
        Raises:
            MissingAPIKeyError: If the credentials carry no key
            RateLimitError, UnauthorizedError, ForbiddenError, UnknownProviderError
        """
        if not credentials.api_key:
            raise MissingAPIKeyError(credentials.provider)

        adapter = self.registry.get(credentials.provider)
        request = adapter.build_request(messages, params, credentials)
        logger.debug(
            f"Calling {adapter.name} model={credentials.model} key={mask_key(credentials.api_key)} "
            f"messages={len(messages)} max_tokens={params.max_tokens}"
        )

        if self._http_client is not None:
            response = await self._send(self._http_client, request, adapter.name)
        else:
            async with httpx.AsyncClient(timeout=self.timeout.to_httpx()) as client:
                response = await self._send(client, request, adapter.name)

        if response.status_code >= 400:
            error = classify_http_error(
                response.status_code,
                _error_message(response),
                dict(response.headers),
                provider=adapter.name,
            )
            logger.warning(f"{adapter.name} returned HTTP {response.status_code}: {type(error).__name__}")
            raise error

        try:
            data = response.json()
        except ValueError as e:
            raise UnknownProviderError(
                f"{adapter.name} returned a non-JSON body",
                provider=adapter.name,
                status_code=response.status_code,
                original_error=e,
            ) from e

        completion = adapter.parse_response(data, credentials)
        logger.info(f"{adapter.name} completion: {completion.tokens_used} tokens, {len(completion.content)} chars")
        return completion

    async def _send(self, client: httpx.AsyncClient, request, provider: str) -> httpx.Response:
        try:
            return await client.request(
                request.method,
                request.url,
                headers=request.headers,
                json=request.json_body,
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to {provider} failed: {e}")
            raise wrap_transport_error(e, provider=provider) from e
