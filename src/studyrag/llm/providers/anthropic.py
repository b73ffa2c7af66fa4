"""Adapter for the Anthropic Messages API."""

from typing import Any

from ...config.credentials import ResolvedCredentials
from ..base import ProviderAdapter
from ..types import ChatMessage, Completion, CompletionParams, ProviderRequest

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(ProviderAdapter):
    """
    ``x-api-key`` auth and ``/messages``.

    The message list has no system role: system turns are joined into the
    top-level ``system`` field and the remaining turns are sent as-is, with
    consecutive turns of the same role merged since the API requires
    alternation. Leading assistant turns are dropped.
    """

    name = "anthropic"

    def build_request(
        self,
        messages: list[ChatMessage],
        params: CompletionParams,
        credentials: ResolvedCredentials,
    ) -> ProviderRequest:
        system = "\n\n".join(m.content for m in messages if m.role == "system")

        turns: list[dict[str, str]] = []
        for message in messages:
            if message.role == "system":
                continue
            if turns and turns[-1]["role"] == message.role:
                turns[-1]["content"] += "\n\n" + message.content
            else:
                turns.append({"role": message.role, "content": message.content})
        # The API rejects conversations that open with an assistant turn.
        while turns and turns[0]["role"] == "assistant":
            turns.pop(0)
        if not turns:
            raise ValueError("Anthropic requests need at least one user message")

        body: dict[str, Any] = {
            "model": credentials.model,
            "messages": turns,
            "max_tokens": params.max_tokens,
            "temperature": min(params.temperature, 1.0),
        }
        if system:
            body["system"] = system

        return ProviderRequest(
            url=f"{credentials.base_url.rstrip('/')}/messages",
            headers={
                "x-api-key": credentials.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            json_body=body,
        )

    def parse_response(self, data: dict[str, Any], credentials: ResolvedCredentials) -> Completion:
        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list):
            raise self.malformed("missing content blocks", data)

        content = "".join(
            block.get("text", "") for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        usage = data.get("usage") or {}
        tokens = (usage.get("input_tokens") or 0) + (usage.get("output_tokens") or 0)

        return Completion(
            content=content,
            tokens_used=int(tokens),
            model=data.get("model") or credentials.model,
            provider=self.name,
        )
