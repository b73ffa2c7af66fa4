"""
StudyRAG error hierarchy.

Every failure that crosses a component boundary is raised as a subclass of
``StudyRAGError``. Provider failures are classified exactly once, where the
HTTP response is received (see ``classify_http_error``), so callers match on
the exception type instead of inspecting status codes or message text.

Error Categories:
-----------------
1. Configuration errors: the request cannot be made as configured
   - Missing API key for the chosen provider
   - Embedding dimension that disagrees with the vector store

2. Provider errors: a remote model provider rejected or failed the call
   - Rate limiting (HTTP 429)
   - Unauthorized (HTTP 401)
   - Forbidden (HTTP 403)
   - Anything else (unknown provider error)

3. Pipeline errors: extraction, embedding, storage or output parsing failed

4. Access errors: the document does not exist for the requesting owner

Usage:
------
    from studyrag.errors import RateLimitError, MissingAPIKeyError

    try:
        completion = await client.complete(messages, params, credentials)
    except RateLimitError as e:
        logger.warning(f"Rate limited, retry after {e.retry_after}s")
    except MissingAPIKeyError as e:
        show_banner(e.remediation)
"""

from typing import Any

import httpx


class StudyRAGError(Exception):
    """
    Base exception for all StudyRAG errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error (optional)
        original_error: The underlying exception that caused this error (optional)
    """

    remediation: str | None = None

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.original_error:
            base += f" | Caused by: {type(self.original_error).__name__}: {self.original_error}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "remediation": self.remediation,
            "original_error": str(self.original_error) if self.original_error else None
        }


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(StudyRAGError):
    """Raised when the system is configured in a way that cannot work."""


class MissingAPIKeyError(ConfigurationError):
    """
    Raised when no API key can be resolved for the requested provider.

    This is detected before any network call is attempted.
    """

    remediation = "add your API key in settings"

    def __init__(
        self,
        provider: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        details["provider"] = provider
        super().__init__(
            message or f"No API key configured for provider '{provider}'",
            details,
        )
        self.provider = provider


class DimensionMismatchError(ConfigurationError):
    """Raised when an embedding's length differs from the store's configured dimension."""

    def __init__(self, expected: int, actual: int, message: str | None = None):
        super().__init__(
            message or f"Embedding dimension mismatch: expected {expected}, got {actual}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


# =============================================================================
# Provider Errors - raised once, at the HTTP boundary
# =============================================================================

class ProviderError(StudyRAGError):
    """
    Base class for failures reported by a remote model provider.

    Attributes:
        provider: Provider identifier (e.g. "openai")
        status_code: HTTP status code, if a response was received
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        details = dict(details or {})
        if provider:
            details.setdefault("provider", provider)
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details, original_error)
        self.provider = provider
        self.status_code = status_code


class RateLimitError(ProviderError):
    """
    Raised when the provider rate limit is exceeded (HTTP 429).

    The retry_after attribute contains the wait time from the Retry-After
    header when the provider sent one. No retry is attempted here.
    """

    remediation = "wait a moment and try again"

    def __init__(
        self,
        message: str = "Provider rate limit exceeded",
        retry_after: float | None = None,
        provider: str | None = None,
        status_code: int | None = 429,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, provider, status_code, details, original_error)
        self.retry_after = retry_after


class UnauthorizedError(ProviderError):
    """Raised when the provider rejects the API key (HTTP 401)."""

    remediation = "check that your API key is valid"


class ForbiddenError(ProviderError):
    """Raised when the API key lacks access to the requested model (HTTP 403)."""

    remediation = "check that your API key has access to this model"


class UnknownProviderError(ProviderError):
    """Raised for any other provider failure, including malformed responses."""


# =============================================================================
# Pipeline Errors
# =============================================================================

class EmbeddingError(StudyRAGError):
    """Raised when an embedding operation fails."""


class VectorStoreError(StudyRAGError):
    """Raised when a vector store operation fails."""


class ExtractionError(StudyRAGError):
    """Raised when a document yields no usable text."""


class ParseError(StudyRAGError):
    """
    Raised when model output cannot be turned into the requested structure.

    Attributes:
        raw_output: The unparsed model output, kept for diagnostics
    """

    def __init__(
        self,
        message: str,
        raw_output: str = "",
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)
        self.raw_output = raw_output


class InsufficientContextError(StudyRAGError):
    """Raised when retrieval produced no context for a grounded generation task."""

    remediation = "upload and process some study materials first"


# =============================================================================
# Access Errors
# =============================================================================

class DocumentNotFoundError(StudyRAGError):
    """Raised when a document does not exist or is not owned by the caller."""


class AccessDeniedError(StudyRAGError):
    """Raised when an owner id is empty or could reach outside its own namespace."""


# =============================================================================
# Helper Functions
# =============================================================================

def _parse_retry_after(headers: dict[str, str]) -> float | None:
    for key, value in headers.items():
        if key.lower() == "retry-after":
            try:
                return float(value)
            except (ValueError, TypeError):
                return None
    return None


def classify_http_error(
    status_code: int,
    message: str = "",
    headers: dict | None = None,
    provider: str | None = None,
) -> ProviderError:
    """
    Classify a provider HTTP failure based on status code.

    Args:
        status_code: HTTP status code
        message: Error message from the response body
        headers: Response headers (used to extract Retry-After)
        provider: Provider identifier, recorded on the error

    Returns:
        Appropriate ProviderError subclass instance

    Example:
        if response.status_code >= 400:
            raise classify_http_error(
                response.status_code,
                response.text,
                dict(response.headers),
                provider="openai",
            )
    """
    headers = headers or {}

    if status_code == 429:
        return RateLimitError(
            message=message or "Provider rate limit exceeded",
            retry_after=_parse_retry_after(headers),
            provider=provider,
            status_code=status_code,
        )
    if status_code == 401:
        return UnauthorizedError(
            message=message or "Authentication failed - invalid API key",
            provider=provider,
            status_code=status_code,
        )
    if status_code == 403:
        return ForbiddenError(
            message=message or "Access forbidden - insufficient permissions",
            provider=provider,
            status_code=status_code,
        )
    return UnknownProviderError(
        message=message or f"Provider error (HTTP {status_code})",
        provider=provider,
        status_code=status_code,
    )


def wrap_transport_error(error: httpx.HTTPError, provider: str | None = None) -> ProviderError:
    """
    Wrap an httpx transport failure (timeout, connection reset, DNS) as a provider error.

    Transport failures never carry a status code, so they are always unknown
    provider errors. The original exception is preserved for diagnostics.
    """
    kind = "timed out" if isinstance(error, httpx.TimeoutException) else "failed"
    return UnknownProviderError(
        message=f"Request to provider {kind}: {error}",
        provider=provider,
        original_error=error,
    )
