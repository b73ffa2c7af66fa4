"""Base document repository interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..entities.document import ContentKind, Document, ProcessingStatus


class BaseDocumentRepository(ABC):
    """Owner-scoped persistence for document records.

    Every read and write takes the owner id. Asking for a document that
    exists but belongs to someone else is indistinguishable from asking for
    one that does not exist: both raise ``DocumentNotFoundError``.
    """

    @abstractmethod
    def add(self, document: Document) -> Document:
        pass

    @abstractmethod
    def get(self, owner_id: str, document_id: str) -> Document:
        """Raises DocumentNotFoundError if absent or owned by someone else."""
        pass

    @abstractmethod
    def list_by_collection(
        self,
        owner_id: str,
        collection_id: str | None,
        content_kind: ContentKind | None = None,
    ) -> list[Document]:
        """Documents of one collection in upload order.

        A ``collection_id`` of None lists every document of the owner.
        """
        pass

    @abstractmethod
    def update(self, document: Document) -> Document:
        """Persist changes to an existing document; raises DocumentNotFoundError otherwise."""
        pass

    @abstractmethod
    def delete(self, owner_id: str, document_id: str) -> None:
        pass

    def set_status(
        self,
        owner_id: str,
        document_id: str,
        status: ProcessingStatus,
        **fields: Any,
    ) -> Document:
        """Move a document to ``status`` and update any other given fields."""
        document = self.get(owner_id, document_id)
        updated = document.model_copy(update={"status": status, **fields})
        return self.update(updated)
