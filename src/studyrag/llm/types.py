"""Provider-neutral request and response shapes for chat completions."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class CompletionParams(BaseModel):
    max_tokens: int = Field(default=1024, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class ProviderRequest(BaseModel):
    """An HTTP call ready to send; built by a provider adapter."""

    method: str = "POST"
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    json_body: dict[str, Any] = Field(default_factory=dict)


class Completion(BaseModel):
    content: str
    tokens_used: int = 0
    model: str
    provider: str
