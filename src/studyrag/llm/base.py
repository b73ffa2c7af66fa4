"""Provider adapter interface.

An adapter knows one provider's envelope: how to address it, how to
authenticate, how to lay out messages, and where the text and token usage
live in its response. It performs no I/O.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..config.credentials import ResolvedCredentials
from ..errors import UnknownProviderError
from .types import ChatMessage, Completion, CompletionParams, ProviderRequest


class ProviderAdapter(ABC):
    """Strategy for one chat completion provider."""

    name: str = ""

    @abstractmethod
    def build_request(
        self,
        messages: list[ChatMessage],
        params: CompletionParams,
        credentials: ResolvedCredentials,
    ) -> ProviderRequest:
        """Translate messages and sampling params into this provider's HTTP request."""
        pass

    @abstractmethod
    def parse_response(self, data: dict[str, Any], credentials: ResolvedCredentials) -> Completion:
        """Extract text and token usage from a successful response body.

        Raises:
            UnknownProviderError: If the body does not have the expected shape
        """
        pass

    def malformed(self, reason: str, data: Any) -> UnknownProviderError:
        return UnknownProviderError(
            f"Malformed response from {self.name}: {reason}",
            provider=self.name,
            details={"body": str(data)[:500]},
        )
