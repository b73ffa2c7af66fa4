"""Vector store factory for creating vector store instances."""

from typing import Any
from loguru import logger

from .base import BaseVectorStore
from .providers.in_memory import InMemoryVectorStore
from .providers.chroma import CHROMA_AVAILABLE, ChromaVectorStore


class VectorStoreFactory:
    """Factory for creating vector store instances based on type.

    This factory maintains a registry of available vector store types
    and creates instances based on string identifiers.
    """

    _registry: dict[str, type[BaseVectorStore]] = {
        "memory": InMemoryVectorStore,
    }

    if CHROMA_AVAILABLE:
        _registry["chroma"] = ChromaVectorStore

    @classmethod
    def create(cls, store_type: str, **params: Any) -> BaseVectorStore:
        """Create a vector store instance by type.

        Raises:
            ValueError: If store type is not registered
        """
        if store_type not in cls._registry:
            available = ", ".join(cls._registry.keys())
            raise ValueError(
                f"Unknown vector store type: '{store_type}'. "
                f"Available types: {available}"
            )

        store_class = cls._registry[store_type]
        logger.debug(f"Creating {store_class.__name__} with params: {params}")
        return store_class(**params)

    @classmethod
    def register(cls, store_type: str, store_class: type[BaseVectorStore]):
        """Register a new vector store type.

        Raises:
            TypeError: If store_class is not a subclass of BaseVectorStore
        """
        if not issubclass(store_class, BaseVectorStore):
            raise TypeError(
                f"{store_class.__name__} must be a subclass of BaseVectorStore"
            )

        cls._registry[store_type] = store_class
        logger.info(f"Registered vector store type '{store_type}': {store_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry.keys())
