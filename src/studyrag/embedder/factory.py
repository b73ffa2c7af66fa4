"""Embedder factory for creating embedder instances."""

from typing import Any
from loguru import logger

from .base import BaseEmbedder
from .providers.mock import MockEmbedder
from .providers.openai import OpenAIEmbedder


class EmbedderFactory:
    """Factory for creating embedder instances based on type.

    This factory maintains a registry of available embedder types
    and creates instances based on string identifiers.
    """

    _registry: dict[str, type[BaseEmbedder]] = {
        "mock": MockEmbedder,
        "openai": OpenAIEmbedder,
    }

    @classmethod
    def create(cls, embedder_type: str, **params: Any) -> BaseEmbedder:
        """Create an embedder instance by type.

        Args:
            embedder_type: Type identifier (e.g., "openai")
            **params: Initialization parameters for the embedder

        Raises:
            ValueError: If embedder type is not registered
        """
        if embedder_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ValueError(
                f"Unknown embedder type: '{embedder_type}'. "
                f"Available types: {available}"
            )

        embedder_class = cls._registry[embedder_type]
        logger.debug(f"Creating {embedder_class.__name__}")
        return embedder_class(**params)

    @classmethod
    def register(cls, embedder_type: str, embedder_class: type[BaseEmbedder]):
        """Register a new embedder type.

        Raises:
            TypeError: If embedder_class is not a subclass of BaseEmbedder
        """
        if not issubclass(embedder_class, BaseEmbedder):
            raise TypeError(
                f"{embedder_class.__name__} must be a subclass of BaseEmbedder"
            )

        cls._registry[embedder_type] = embedder_class
        logger.info(f"Registered embedder type '{embedder_type}': {embedder_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
