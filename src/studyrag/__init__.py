"""
StudyRAG - retrieval-augmented generation for exam revision.

Uploaded study materials are chunked, embedded and stored per owner; notes,
flashcards, quizzes, practice exercises, tutor replies and past-paper
analyses are generated from the owner's own material.
"""

from .engine import StudyRAGEngine
from .entities import (
    ContentKind,
    Document,
    GenerationParams,
    GenerationRequest,
    GenerationResult,
    ProcessingStatus,
    Result,
    TaskKind,
)
from .errors import StudyRAGError

__version__ = "0.1.0"

__all__ = [
    "StudyRAGEngine",
    "ContentKind",
    "Document",
    "GenerationParams",
    "GenerationRequest",
    "GenerationResult",
    "ProcessingStatus",
    "Result",
    "TaskKind",
    "StudyRAGError",
]
