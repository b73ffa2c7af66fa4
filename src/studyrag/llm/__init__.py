"""LLM access: provider adapters, dispatch registry and the chat client."""

from .base import ProviderAdapter
from .client import ChatClient
from .providers import AnthropicAdapter, GrokAdapter, OpenAIAdapter, OpenRouterAdapter
from .registry import ProviderRegistry
from .types import ChatMessage, Completion, CompletionParams, ProviderRequest

__all__ = [
    "ProviderAdapter",
    "ChatClient",
    "AnthropicAdapter",
    "GrokAdapter",
    "OpenAIAdapter",
    "OpenRouterAdapter",
    "ProviderRegistry",
    "ChatMessage",
    "Completion",
    "CompletionParams",
    "ProviderRequest",
]
