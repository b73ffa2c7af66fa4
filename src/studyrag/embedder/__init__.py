"""Embedder module for vector generation.

This module provides embedding functionality with multiple
implementations, a factory, and the gateway the pipeline talks to.
"""

from .base import BaseEmbedder
from .factory import EmbedderFactory
from .gateway import EmbeddingGateway
from .providers.mock import MockEmbedder
from .providers.openai import OpenAIEmbedder

__all__ = ["BaseEmbedder", "EmbedderFactory", "EmbeddingGateway", "MockEmbedder", "OpenAIEmbedder"]
