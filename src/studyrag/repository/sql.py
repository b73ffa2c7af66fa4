"""SQL document repository backed by SQLModel."""

from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..entities.document import ContentKind, Document, ProcessingStatus
from ..errors import DocumentNotFoundError
from .base import BaseDocumentRepository


class StudyDocumentRow(SQLModel, table=True):
    """Document metadata table"""
    __tablename__ = "study_documents"

    seq: Optional[int] = Field(default=None, primary_key=True)  # upload order
    id: str = Field(index=True, unique=True)
    owner_id: str = Field(index=True)
    collection_id: Optional[str] = Field(default=None, index=True)
    title: str = ""
    content_kind: str = ContentKind.MATERIALS.value
    text: Optional[str] = None
    status: str = ProcessingStatus.PENDING.value
    error_message: Optional[str] = None
    chunks_processed: int = 0
    embeddings_generated: int = 0
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: Document) -> "StudyDocumentRow":
        return cls(**document.model_dump())

    def apply(self, document: Document) -> None:
        for key, value in document.model_dump().items():
            setattr(self, key, value)

    def to_document(self) -> Document:
        return Document.model_validate(self.model_dump(exclude={"seq"}))


class SQLDocumentRepository(BaseDocumentRepository):
    """Owner-scoped repository over any SQLAlchemy URL.

    Attributes:
        engine: SQLAlchemy engine; tables are created on construction
    """

    def __init__(self, database_url: str = "sqlite://", echo: bool = False):
        engine_args: dict = {}
        if database_url.startswith("sqlite"):
            engine_args["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_args["poolclass"] = StaticPool
        self.engine = create_engine(database_url, echo=echo, **engine_args)
        SQLModel.metadata.create_all(self.engine)
        logger.info(f"Document repository initialized at {self.engine.url.render_as_string(hide_password=True)}")

    def _row(self, session: Session, owner_id: str, document_id: str) -> StudyDocumentRow:
        statement = select(StudyDocumentRow).where(
            StudyDocumentRow.id == document_id,
            StudyDocumentRow.owner_id == owner_id,
        )
        row = session.exec(statement).first()
        if row is None:
            raise DocumentNotFoundError(
                f"Document {document_id} not found",
                details={"document_id": document_id},
            )
        return row

    def add(self, document: Document) -> Document:
        with Session(self.engine) as session:
            session.add(StudyDocumentRow.from_document(document))
            session.commit()
        logger.debug(f"Added document {document.id} for owner {document.owner_id}")
        return document

    def get(self, owner_id: str, document_id: str) -> Document:
        with Session(self.engine) as session:
            return self._row(session, owner_id, document_id).to_document()

    def list_by_collection(
        self,
        owner_id: str,
        collection_id: str | None,
        content_kind: ContentKind | None = None,
    ) -> list[Document]:
        statement = select(StudyDocumentRow).where(StudyDocumentRow.owner_id == owner_id)
        if collection_id is not None:
            statement = statement.where(StudyDocumentRow.collection_id == collection_id)
        if content_kind is not None:
            statement = statement.where(StudyDocumentRow.content_kind == ContentKind(content_kind).value)
        statement = statement.order_by(StudyDocumentRow.seq)

        with Session(self.engine) as session:
            return [row.to_document() for row in session.exec(statement).all()]

    def update(self, document: Document) -> Document:
        with Session(self.engine) as session:
            row = self._row(session, document.owner_id, document.id)
            row.apply(document)
            session.add(row)
            session.commit()
        return document

    def delete(self, owner_id: str, document_id: str) -> None:
        with Session(self.engine) as session:
            row = self._row(session, owner_id, document_id)
            session.delete(row)
            session.commit()
        logger.debug(f"Deleted document {document_id}")
