"""Adapters for providers speaking the OpenAI chat completions schema."""

from typing import Any

from ...config.credentials import ResolvedCredentials
from ..base import ProviderAdapter
from ..types import ChatMessage, Completion, CompletionParams, ProviderRequest


class OpenAIAdapter(ProviderAdapter):
    """Bearer auth, ``/chat/completions``, flat message list including system turns."""

    name = "openai"

    def extra_headers(self) -> dict[str, str]:
        return {}

    def build_request(
        self,
        messages: list[ChatMessage],
        params: CompletionParams,
        credentials: ResolvedCredentials,
    ) -> ProviderRequest:
        headers = {
            "Authorization": f"Bearer {credentials.api_key}",
            "Content-Type": "application/json",
            **self.extra_headers(),
        }
        return ProviderRequest(
            url=f"{credentials.base_url.rstrip('/')}/chat/completions",
            headers=headers,
            json_body={
                "model": credentials.model,
                "messages": [{"role": m.role, "content": m.content} for m in messages],
                "max_tokens": params.max_tokens,
                "temperature": params.temperature,
            },
        )

    def parse_response(self, data: dict[str, Any], credentials: ResolvedCredentials) -> Completion:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise self.malformed("missing choices[0].message.content", data) from None

        usage = data.get("usage") or {}
        tokens = usage.get("total_tokens")
        if tokens is None:
            tokens = (usage.get("prompt_tokens") or 0) + (usage.get("completion_tokens") or 0)

        return Completion(
            content=content or "",
            tokens_used=int(tokens),
            model=data.get("model") or credentials.model,
            provider=self.name,
        )


class OpenRouterAdapter(OpenAIAdapter):
    """OpenAI schema plus the attribution headers OpenRouter asks for."""

    name = "openrouter"

    def __init__(self, referer: str = "https://studyrag.local", title: str = "StudyRAG"):
        self.referer = referer
        self.title = title

    def extra_headers(self) -> dict[str, str]:
        return {"HTTP-Referer": self.referer, "X-Title": self.title}


class GrokAdapter(OpenAIAdapter):
    """xAI's OpenAI-compatible endpoint."""

    name = "grok"
