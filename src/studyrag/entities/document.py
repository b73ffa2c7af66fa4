"""Document entity representing an uploaded study file and its processing state."""

from datetime import datetime, timezone
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, Field


class ContentKind(StrEnum):
    MATERIALS = "materials"      # Lecture notes, textbooks, handouts
    PAST_PAPERS = "past_papers"  # Previous exam papers


class ProcessingStatus(StrEnum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Document(BaseModel):
    """
    An uploaded file owned by a single user, optionally inside a collection.

    The extracted text lives on the document; chunks and embeddings live in
    the vector store under the owner's namespace.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str = Field(..., min_length=1)
    collection_id: str | None = None
    title: str = ""
    content_kind: ContentKind = ContentKind.MATERIALS

    text: str | None = None

    status: ProcessingStatus = ProcessingStatus.PENDING
    error_message: str | None = None
    chunks_processed: int = 0
    embeddings_generated: int = 0

    created_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    model_config = {
        "frozen": False,
        "validate_assignment": True,
    }

    @property
    def has_embeddings(self) -> bool:
        return self.embeddings_generated > 0
