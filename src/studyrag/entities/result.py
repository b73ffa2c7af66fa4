"""Success-or-error result returned by the generation orchestrator."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..errors import StudyRAGError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a classified error, never both.

    Example:
        result = await orchestrator.generate(...)
        if result.ok:
            render(result.value)
        else:
            show(result.error.remediation or result.error.message)
    """

    value: T | None = None
    error: StudyRAGError | None = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("Result must hold exactly one of value or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StudyRAGError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
