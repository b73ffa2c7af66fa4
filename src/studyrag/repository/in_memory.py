"""In-memory document repository (tests and single-process use)."""

from loguru import logger

from ..entities.document import ContentKind, Document
from ..errors import DocumentNotFoundError
from .base import BaseDocumentRepository


class InMemoryDocumentRepository(BaseDocumentRepository):

    def __init__(self):
        self._documents: dict[str, Document] = {}

    def add(self, document: Document) -> Document:
        if document.id in self._documents:
            raise ValueError(f"Document {document.id} already exists")
        self._documents[document.id] = document.model_copy()
        logger.debug(f"Added document {document.id} for owner {document.owner_id}")
        return document

    def get(self, owner_id: str, document_id: str) -> Document:
        document = self._documents.get(document_id)
        if document is None or document.owner_id != owner_id:
            raise DocumentNotFoundError(
                f"Document {document_id} not found",
                details={"document_id": document_id},
            )
        return document.model_copy()

    def list_by_collection(
        self,
        owner_id: str,
        collection_id: str | None,
        content_kind: ContentKind | None = None,
    ) -> list[Document]:
        return [
            doc.model_copy() for doc in self._documents.values()
            if doc.owner_id == owner_id
            and (collection_id is None or doc.collection_id == collection_id)
            and (content_kind is None or doc.content_kind == content_kind)
        ]

    def update(self, document: Document) -> Document:
        self.get(document.owner_id, document.id)
        self._documents[document.id] = document.model_copy()
        return document

    def delete(self, owner_id: str, document_id: str) -> None:
        self.get(owner_id, document_id)
        del self._documents[document_id]
        logger.debug(f"Deleted document {document_id}")
