"""Resolution of which provider, key and model a request should use.

Credentials are resolved once, at the edge, and passed down explicitly.
Nothing below this module reads environment variables for keys.
"""

from pydantic import BaseModel, Field
from loguru import logger

from ..errors import MissingAPIKeyError, UnknownProviderError
from .settings import Settings, settings as default_settings

PROVIDER_ALIASES = {
    "claude": "anthropic",
    "xai": "grok",
    "x-ai": "grok",
}

PROVIDER_DEFAULTS: dict[str, dict[str, str]] = {
    "openai": {"model": "gpt-4o-mini", "base_url": "https://api.openai.com/v1"},
    "anthropic": {"model": "claude-3-5-sonnet-20241022", "base_url": "https://api.anthropic.com/v1"},
    "openrouter": {"model": "openrouter/auto", "base_url": "https://openrouter.ai/api/v1"},
    "grok": {"model": "grok-beta", "base_url": "https://api.x.ai/v1"},
}


def normalise_provider(provider: str) -> str:
    """Map a user-facing provider name onto its canonical identifier.

    Raises:
        UnknownProviderError: If the provider is not supported
    """
    name = provider.strip().lower()
    name = PROVIDER_ALIASES.get(name, name)
    if name not in PROVIDER_DEFAULTS:
        available = ", ".join(PROVIDER_DEFAULTS)
        raise UnknownProviderError(
            f"Unknown provider: '{provider}'. Available providers: {available}",
            provider=provider,
        )
    return name


def mask_key(api_key: str | None) -> str:
    """Render a key for logs, keeping only a recognisable prefix and suffix."""
    if not api_key:
        return "<none>"
    if len(api_key) <= 8:
        return "***"
    return f"{api_key[:3]}...{api_key[-4:]}"


class UserPreferences(BaseModel):
    """Per-user provider choice and stored keys, keyed by canonical provider name."""

    provider: str | None = None
    api_keys: dict[str, str] = Field(default_factory=dict)
    models: dict[str, str] = Field(default_factory=dict)

    def key_for(self, provider: str) -> str | None:
        for name, key in self.api_keys.items():
            if PROVIDER_ALIASES.get(name.lower(), name.lower()) == provider and key:
                return key
        return None


class ResolvedCredentials(BaseModel):
    """Provider, key, model and endpoint for one request."""

    provider: str
    api_key: str = Field(..., repr=False)
    model: str
    base_url: str

    model_config = {
        "frozen": True,
    }

    def __str__(self) -> str:
        return f"{self.provider}:{self.model} (key {mask_key(self.api_key)})"


def resolve_credentials(
    explicit_provider: str | None = None,
    explicit_key: str | None = None,
    preferences: UserPreferences | None = None,
    settings: Settings | None = None,
    model: str | None = None,
) -> ResolvedCredentials:
    """
    Resolve credentials with precedence explicit → stored preference → environment.

    The provider is chosen first (explicit, then preference, then the
    configured default). The key is then looked up for that provider in the
    same order.

    Raises:
        UnknownProviderError: If the provider name is not supported
        MissingAPIKeyError: If no key exists for the chosen provider
    """
    settings = settings or default_settings

    provider = normalise_provider(
        explicit_provider
        or (preferences.provider if preferences else None)
        or settings.DEFAULT_PROVIDER
    )

    api_key = (
        explicit_key
        or (preferences.key_for(provider) if preferences else None)
        or settings.api_key_for(provider)
    )
    if not api_key:
        logger.warning(f"No API key available for provider '{provider}'")
        raise MissingAPIKeyError(provider)

    defaults = PROVIDER_DEFAULTS[provider]
    chosen_model = (
        model
        or (preferences.models.get(provider) if preferences else None)
        or defaults["model"]
    )
    credentials = ResolvedCredentials(
        provider=provider,
        api_key=api_key,
        model=chosen_model,
        base_url=defaults["base_url"],
    )
    logger.debug(f"Resolved credentials: {credentials}")
    return credentials
