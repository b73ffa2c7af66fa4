"""Provider adapters."""

from .anthropic import AnthropicAdapter
from .openai_compatible import GrokAdapter, OpenAIAdapter, OpenRouterAdapter

__all__ = ["AnthropicAdapter", "GrokAdapter", "OpenAIAdapter", "OpenRouterAdapter"]
