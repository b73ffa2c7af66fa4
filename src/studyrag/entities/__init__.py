"""Domain entities shared across StudyRAG components."""

from .chunk import Chunk, ChunkRecord
from .document import ContentKind, Document, ProcessingStatus
from .generation import (
    Flashcard,
    GenerationParams,
    GenerationRequest,
    GenerationResult,
    PracticeExercise,
    QuizQuestion,
    TaskKind,
)
from .result import Result
from .search_result import SearchResult

__all__ = [
    "Chunk",
    "ChunkRecord",
    "ContentKind",
    "Document",
    "ProcessingStatus",
    "Flashcard",
    "GenerationParams",
    "GenerationRequest",
    "GenerationResult",
    "PracticeExercise",
    "QuizQuestion",
    "TaskKind",
    "Result",
    "SearchResult",
]
