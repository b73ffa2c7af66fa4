"""Shared helpers."""

from .similarity import cosine_similarity
from .timeouts import TimeoutConfig

__all__ = ["cosine_similarity", "TimeoutConfig"]
