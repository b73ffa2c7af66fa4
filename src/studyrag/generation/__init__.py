"""Grounded generation: prompts, output parsing, orchestration and usage."""

from .orchestrator import NOTES_FALLBACK, GenerationOrchestrator
from .parsing import (
    extract_json_array,
    parse_exercises,
    parse_flashcards,
    parse_quiz,
    parse_quiz_heuristic,
    parse_structured,
)
from .prompts import TASK_COMPLETION_PARAMS, build_messages
from .usage import InMemoryUsageLedger, LoggingUsageReporter, UsageReporter

__all__ = [
    "NOTES_FALLBACK",
    "GenerationOrchestrator",
    "extract_json_array",
    "parse_exercises",
    "parse_flashcards",
    "parse_quiz",
    "parse_quiz_heuristic",
    "parse_structured",
    "TASK_COMPLETION_PARAMS",
    "build_messages",
    "InMemoryUsageLedger",
    "LoggingUsageReporter",
    "UsageReporter",
]
