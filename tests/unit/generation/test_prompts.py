"""Tests for prompt construction."""

import pytest

from studyrag.entities import GenerationParams, TaskKind
from studyrag.entities.generation import ChatTurn
from studyrag.generation import TASK_COMPLETION_PARAMS, build_messages

CONTEXT = "Mitochondria are the powerhouse of the cell."


class TestBuildMessages:

    @pytest.mark.parametrize("task", [
        TaskKind.NOTES,
        TaskKind.FLASHCARDS,
        TaskKind.QUIZ,
        TaskKind.PRACTICE_EXERCISES,
        TaskKind.PAST_PAPER_ANALYSIS,
    ])
    def test_context_embedded_verbatim(self, task):
        messages = build_messages(task, CONTEXT, GenerationParams())

        assert len(messages) == 1
        assert messages[0].role == "user"
        assert CONTEXT in messages[0].content

    def test_count_and_difficulty(self):
        content = build_messages(TaskKind.QUIZ, CONTEXT, GenerationParams(count=7, difficulty="Hard"))[0].content
        assert "Create 7 multiple-choice" in content
        assert "Difficulty: hard" in content

    def test_audience_lines(self):
        params = GenerationParams(subject="Biology", academic_level="A-level")
        content = build_messages(TaskKind.NOTES, CONTEXT, params)[0].content
        assert "Subject: Biology" in content
        assert "Academic level: A-level" in content

    def test_past_paper_query(self):
        params = GenerationParams(query="questions on enzymes")
        content = build_messages(TaskKind.PAST_PAPER_ANALYSIS, CONTEXT, params)[0].content
        assert "based on this query: questions on enzymes" in content

    def test_tutor_keeps_history_after_system(self):
        params = GenerationParams(messages=[
            ChatTurn(role="user", content="What is ATP?"),
            ChatTurn(role="assistant", content="The energy currency."),
            ChatTurn(role="user", content="Where is it made?"),
        ])

        messages = build_messages(TaskKind.TUTOR_CHAT, CONTEXT, params)

        assert messages[0].role == "system"
        assert "Gizmo" in messages[0].content
        assert CONTEXT in messages[0].content
        assert [m.content for m in messages[1:]] == ["What is ATP?", "The energy currency.", "Where is it made?"]

    def test_tutor_without_context(self):
        params = GenerationParams(messages=[ChatTurn(role="user", content="Hi")])
        system = build_messages(TaskKind.TUTOR_CHAT, "", params)[0].content
        assert "Relevant context" not in system


class TestCompletionParams:

    def test_every_task_has_params(self):
        assert set(TASK_COMPLETION_PARAMS) == set(TaskKind)

    def test_quiz_is_coolest_and_longest(self):
        quiz = TASK_COMPLETION_PARAMS[TaskKind.QUIZ]
        assert quiz.temperature == 0.5
        assert quiz.max_tokens == 4000
        assert TASK_COMPLETION_PARAMS[TaskKind.TUTOR_CHAT].temperature == 0.8
