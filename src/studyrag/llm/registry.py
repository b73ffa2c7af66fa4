"""Single dispatch point from provider identifier to adapter."""

from loguru import logger

from ..config.credentials import normalise_provider
from ..errors import UnknownProviderError
from .base import ProviderAdapter
from .providers import AnthropicAdapter, GrokAdapter, OpenAIAdapter, OpenRouterAdapter


class ProviderRegistry:
    """Maps canonical provider names to adapter instances."""

    def __init__(self, adapters: dict[str, ProviderAdapter] | None = None):
        self._adapters: dict[str, ProviderAdapter] = adapters if adapters is not None else {
            "openai": OpenAIAdapter(),
            "anthropic": AnthropicAdapter(),
            "openrouter": OpenRouterAdapter(),
            "grok": GrokAdapter(),
        }

    def get(self, provider: str) -> ProviderAdapter:
        """Return the adapter for ``provider`` (aliases such as "claude" accepted).

        Raises:
            UnknownProviderError: If no adapter is registered
        """
        name = normalise_provider(provider)
        adapter = self._adapters.get(name)
        if adapter is None:
            raise UnknownProviderError(f"No adapter registered for provider '{provider}'", provider=provider)
        return adapter

    def register(self, name: str, adapter: ProviderAdapter) -> None:
        if not isinstance(adapter, ProviderAdapter):
            raise TypeError(f"{type(adapter).__name__} must be a ProviderAdapter")
        self._adapters[name] = adapter
        logger.info(f"Registered provider adapter '{name}': {type(adapter).__name__}")

    def list_providers(self) -> list[str]:
        return list(self._adapters.keys())
