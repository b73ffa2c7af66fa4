"""Chunker factory for creating chunker instances."""

from typing import Any
from loguru import logger

from .base import BaseChunker
from .sliding_window import SlidingWindowChunker


class ChunkerFactory:
    """Factory for creating chunker instances based on type."""

    _registry: dict[str, type[BaseChunker]] = {
        "sliding_window": SlidingWindowChunker,
    }

    @classmethod
    def create(cls, chunker_type: str, **params: Any) -> BaseChunker:
        """Create a chunker instance by type.

        Raises:
            ValueError: If chunker type is not registered
        """
        if chunker_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ValueError(
                f"Unknown chunker type: '{chunker_type}'. "
                f"Available types: {available}"
            )

        chunker_class = cls._registry[chunker_type]
        logger.debug(f"Creating {chunker_class.__name__} with params: {params}")
        return chunker_class(**params)

    @classmethod
    def register(cls, chunker_type: str, chunker_class: type[BaseChunker]):
        """Register a new chunker type.

        Raises:
            TypeError: If chunker_class is not a subclass of BaseChunker
        """
        if not issubclass(chunker_class, BaseChunker):
            raise TypeError(
                f"{chunker_class.__name__} must be a subclass of BaseChunker"
            )

        cls._registry[chunker_type] = chunker_class
        logger.info(f"Registered chunker type '{chunker_type}': {chunker_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
