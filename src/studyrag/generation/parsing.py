"""Parsing of model output into structured study items.

Structured tasks go through two tiers: strict JSON extraction first, then
(for flashcards and quizzes) a line-based heuristic for numbered or
lettered plain text. If neither yields a valid item, ``ParseError`` is
raised; a structured task never returns a placeholder payload.
"""

import json
import re
from typing import Any

from loguru import logger

from ..entities.generation import (
    Flashcard,
    GenerationParams,
    PracticeExercise,
    QuizQuestion,
    TaskKind,
)
from ..errors import ParseError

FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
WRAPPER_KEYS = ("questions", "flashcards", "exercises", "items", "cards")

QUESTION_RE = re.compile(r"^\s*(?:\*\*)?(?:Q(?:uestion)?\s*)?(\d+)\s*[.):]\s*(.+?)\s*$", re.IGNORECASE)
OPTION_RE = re.compile(r"^\s*[(\[]?([A-Da-d])[)\].:]\s*(.+?)\s*$")
ANSWER_RE = re.compile(
    r"^\s*(?:\*\*|__)?(?:correct\s+)?answer(?:\*\*|__)?\s*[:\-]\s*(?:\*\*|__)?\s*[(\[]?([A-Da-d])\b",
    re.IGNORECASE,
)
EXPLANATION_RE = re.compile(r"^\s*(?:\*\*|__)?explanation(?:\*\*|__)?\s*[:\-]\s*(?:\*\*|__)?\s*(.+?)\s*$", re.IGNORECASE)
CORRECT_MARK_RE = re.compile(r"\s*(?:\*|\(correct\)|✓)\s*$", re.IGNORECASE)

FRONT_RE = re.compile(r"^\s*(?:\d+[.)]\s*)?(?:\*\*)?(?:Q|Question|Front)(?:\*\*)?\s*[:\-]\s*(.+?)\s*$", re.IGNORECASE)
BACK_RE = re.compile(r"^\s*(?:\*\*)?(?:A|Answer|Back)(?:\*\*)?\s*[:\-]\s*(.+?)\s*$", re.IGNORECASE)
TERM_RE = re.compile(r"^\s*\d+[.)]\s*(.+?)(?:\s+[-–]\s+|:\s+)(.+?)\s*$")

DEFAULT_EXPLANATION = "Check your study materials for more details."


def extract_json_array(raw: str) -> list[Any] | None:
    """Find a JSON array in model output.

    Accepts a bare array, an array inside a markdown code fence, an object
    wrapping the array (e.g. ``{"questions": [...]}``), or the first-to-last
    bracket span of surrounding prose. Returns None if nothing parses.
    """
    candidates = [raw.strip()]
    candidates.extend(match.group(1).strip() for match in FENCE_RE.finditer(raw))
    span = ARRAY_RE.search(raw)
    if span:
        candidates.append(span.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        items = _unwrap(data)
        if items is not None:
            return items
    return None


def _unwrap(data: Any) -> list[Any] | None:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        for value in data.values():
            if isinstance(value, list):
                return value
    return None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _answer_index(value: Any, option_count: int) -> int:
    if isinstance(value, str) and len(value.strip()) == 1 and value.strip().isalpha():
        index = ord(value.strip().upper()) - ord("A")
    else:
        try:
            index = int(value)
        except (TypeError, ValueError):
            index = 0
    return max(0, min(index, option_count - 1))


# =============================================================================
# Quiz
# =============================================================================

def _quiz_from_item(item: Any, position: int, difficulty: str) -> QuizQuestion | None:
    if not isinstance(item, dict):
        return None
    question = _text(item.get("question"))
    raw_options = item.get("options")
    if not isinstance(raw_options, list):
        return None
    options = [_text(o) for o in raw_options if _text(o)]
    if not question or len(options) < 2:
        return None
    options = options[:4]

    return QuizQuestion(
        question_id=_text(item.get("question_id") or item.get("questionId")) or f"q{position + 1}",
        question=question,
        options=options,
        correct_answer=_answer_index(item.get("correct_answer", item.get("correctAnswer", 0)), len(options)),
        explanation=_text(item.get("explanation")) or DEFAULT_EXPLANATION,
        difficulty=_text(item.get("difficulty")) or difficulty,
        topic=_text(item.get("topic")) or "General",
    )


def parse_quiz_heuristic(raw: str, difficulty: str = "medium") -> list[QuizQuestion]:
    """Rebuild quiz questions from "1. question / A) option ... D) option" text.

    Only questions with at least four lettered options are kept, trimmed to
    exactly four; blocks with no question text are dropped. An "Answer: C"
    line (plain or markdown bold) or a trailing ``*`` on an option marks
    the correct answer; otherwise the first option is assumed.
    """
    blocks: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None

    for line in raw.splitlines():
        if not line.strip():
            continue

        answer = ANSWER_RE.match(line)
        if answer and current is not None:
            current["answer"] = answer.group(1)
            continue

        explanation = EXPLANATION_RE.match(line)
        if explanation and current is not None:
            current["explanation"] = explanation.group(1)
            continue

        option = OPTION_RE.match(line)
        if option and current is not None:
            text = option.group(2)
            marked = bool(CORRECT_MARK_RE.search(text))
            text = CORRECT_MARK_RE.sub("", text).strip("* ")
            if text:
                if marked:
                    current["answer"] = len(current["options"])
                current["options"].append(text)
            continue

        question = QUESTION_RE.match(line)
        if question:
            current = {"question": question.group(2).strip("* "), "options": []}
            blocks.append(current)
            continue

        if current is not None and not current["options"]:
            current["question"] += " " + line.strip()

    questions = []
    for block in blocks:
        question_text = block["question"].strip()
        if not question_text or len(block["options"]) < 4:
            continue
        options = block["options"][:4]
        questions.append(QuizQuestion(
            question_id=f"q{len(questions) + 1}",
            question=question_text,
            options=options,
            correct_answer=_answer_index(block.get("answer", 0), len(options)),
            explanation=block.get("explanation") or DEFAULT_EXPLANATION,
            difficulty=difficulty,
        ))
    return questions


def parse_quiz(raw: str, count: int, difficulty: str = "medium") -> list[QuizQuestion]:
    """
    Raises:
        ParseError: If neither strict nor heuristic parsing yields a question
    """
    items = extract_json_array(raw)
    questions: list[QuizQuestion] = []
    if items is not None:
        questions = [q for i, item in enumerate(items) if (q := _quiz_from_item(item, i, difficulty))]
    if not questions:
        logger.debug("Strict quiz parse yielded nothing; trying heuristic parse")
        questions = parse_quiz_heuristic(raw, difficulty)
    if not questions:
        raise ParseError("Failed to generate valid quiz questions. Please try again.", raw_output=raw)
    return questions[:count]


# =============================================================================
# Flashcards
# =============================================================================

def _flashcard_from_item(item: Any, difficulty: str) -> Flashcard | None:
    if not isinstance(item, dict):
        return None
    front = _text(item.get("front") or item.get("question"))
    back = _text(item.get("back") or item.get("answer"))
    if not front or not back:
        return None
    return Flashcard(
        front=front,
        back=back,
        difficulty=_text(item.get("difficulty")) or difficulty,
        topic=_text(item.get("topic")) or "General",
    )


def parse_flashcards_heuristic(raw: str, difficulty: str = "medium") -> list[Flashcard]:
    """Rebuild flashcards from "Q: ... / A: ..." pairs or "1. term - definition" lines."""
    cards: list[Flashcard] = []
    front: str | None = None
    back: list[str] = []

    def flush():
        text = " ".join(back).strip()
        if front and text:
            cards.append(Flashcard(front=front, back=text, difficulty=difficulty))

    for line in raw.splitlines():
        if not line.strip():
            continue
        question = FRONT_RE.match(line)
        if question:
            flush()
            front, back = question.group(1).strip("* "), []
            continue
        answer = BACK_RE.match(line)
        if answer and front:
            back = [answer.group(1).strip("* ")]
            continue
        if front and back:
            back.append(line.strip())
    flush()

    if cards:
        return cards

    for line in raw.splitlines():
        term = TERM_RE.match(line)
        if not term:
            continue
        front_text, back_text = term.group(1).strip("* "), term.group(2).strip("* ")
        if front_text and back_text:
            cards.append(Flashcard(front=front_text, back=back_text, difficulty=difficulty))
    return cards


def parse_flashcards(raw: str, count: int, difficulty: str = "medium") -> list[Flashcard]:
    """
    Raises:
        ParseError: If neither strict nor heuristic parsing yields a card
    """
    items = extract_json_array(raw)
    cards: list[Flashcard] = []
    if items is not None:
        cards = [c for item in items if (c := _flashcard_from_item(item, difficulty))]
    if not cards:
        logger.debug("Strict flashcard parse yielded nothing; trying heuristic parse")
        cards = parse_flashcards_heuristic(raw, difficulty)
    if not cards:
        raise ParseError("Failed to parse flashcards from model output", raw_output=raw)
    return cards[:count]


# =============================================================================
# Practice exercises
# =============================================================================

def _exercise_from_item(item: Any, position: int, difficulty: str) -> PracticeExercise | None:
    if not isinstance(item, dict):
        return None
    question = _text(item.get("question") or item.get("problem"))
    if not question:
        return None
    hints = item.get("hints")
    return PracticeExercise(
        id=_text(item.get("id")) or f"ex{position + 1}",
        title=_text(item.get("title")),
        question=question,
        solution=_text(item.get("solution")),
        hints=[_text(h) for h in hints if _text(h)] if isinstance(hints, list) else [],
        difficulty=_text(item.get("difficulty")) or difficulty,
        topic=_text(item.get("topic")) or "General",
    )


def parse_exercises(raw: str, count: int, difficulty: str = "medium") -> list[PracticeExercise]:
    """Strict JSON only; exercises have no plain-text fallback.

    Raises:
        ParseError: If no valid exercise can be extracted
    """
    items = extract_json_array(raw) or []
    exercises = [e for i, item in enumerate(items) if (e := _exercise_from_item(item, i, difficulty))]
    if not exercises:
        raise ParseError("Failed to parse practice exercises from model output", raw_output=raw)
    return exercises[:count]


def parse_structured(task: TaskKind, raw: str, params: GenerationParams) -> list[Any]:
    """Dispatch to the parser for a structured task."""
    if task is TaskKind.FLASHCARDS:
        return parse_flashcards(raw, params.count, params.difficulty)
    if task is TaskKind.QUIZ:
        return parse_quiz(raw, params.count, params.difficulty)
    if task is TaskKind.PRACTICE_EXERCISES:
        return parse_exercises(raw, params.count, params.difficulty)
    raise ValueError(f"{task} is not a structured task")
