"""Entities for grounded generation tasks and their structured outputs."""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from .document import ContentKind


class TaskKind(StrEnum):
    NOTES = "notes"
    FLASHCARDS = "flashcards"
    QUIZ = "quiz"
    PRACTICE_EXERCISES = "practice_exercises"
    TUTOR_CHAT = "tutor_chat"
    PAST_PAPER_ANALYSIS = "past_paper_analysis"

    @property
    def is_structured(self) -> bool:
        return self in (TaskKind.FLASHCARDS, TaskKind.QUIZ, TaskKind.PRACTICE_EXERCISES)


class Flashcard(BaseModel):
    front: str = Field(..., min_length=1)
    back: str = Field(..., min_length=1)
    difficulty: str = "medium"
    topic: str = "General"


class QuizQuestion(BaseModel):
    question_id: str
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2, max_length=4)
    correct_answer: int = Field(..., ge=0, le=3)
    explanation: str = ""
    difficulty: str = "medium"
    topic: str = "General"


class PracticeExercise(BaseModel):
    id: str
    title: str = ""
    question: str = Field(..., min_length=1)
    solution: str = ""
    hints: list[str] = Field(default_factory=list)
    difficulty: str = "medium"
    topic: str = "General"


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class GenerationParams(BaseModel):
    """Task parameters supplied by the caller; unused fields are ignored per task."""

    count: int = Field(default=10, ge=1, le=50)
    difficulty: str = "medium"
    style: str = "comprehensive"
    academic_level: str | None = None
    subject: str | None = None
    query: str | None = None
    messages: list[ChatTurn] = Field(default_factory=list)

    @field_validator("difficulty")
    @classmethod
    def _known_difficulty(cls, value: str) -> str:
        value = value.lower()
        if value not in {"easy", "medium", "hard", "mixed"}:
            raise ValueError(f"Unknown difficulty: {value}")
        return value

    def last_user_message(self) -> str | None:
        for turn in reversed(self.messages):
            if turn.role == "user" and turn.content.strip():
                return turn.content
        return None


class GenerationRequest(BaseModel):
    """A request to run one generation task for one owner."""

    task: TaskKind
    owner_id: str = Field(..., min_length=1)
    collection_id: str | None = None
    content: str | None = None
    content_kind: ContentKind = ContentKind.MATERIALS
    params: GenerationParams = Field(default_factory=GenerationParams)
    provider: str | None = None
    api_key: str | None = None


class GenerationResult(BaseModel):
    """
    Output of a generation task.

    ``content`` is markdown text for free-form tasks, or a list of validated
    items for flashcards, quiz and practice exercises. ``is_fallback`` marks
    a templated notes stub produced when the model returned nothing usable.
    """

    task: TaskKind
    content: Any
    tokens_used: int = 0
    is_fallback: bool = False
    context_chunk_count: int = 0
    provider: str
    model: str
