"""Document repositories: owner-scoped storage of document records."""

from .base import BaseDocumentRepository
from .in_memory import InMemoryDocumentRepository
from .sql import SQLDocumentRepository, StudyDocumentRow

__all__ = [
    "BaseDocumentRepository",
    "InMemoryDocumentRepository",
    "SQLDocumentRepository",
    "StudyDocumentRow",
]
