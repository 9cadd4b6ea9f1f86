"""Shared fixtures for tutorial_quiz tests."""

import pytest

from tutorial_quiz.core.html_tags import tag
from tutorial_quiz.core.question_builder import answer, question
from tutorial_quiz.core.question_types import QuestionType, register_question_type, unregister_question_type
from tutorial_quiz.core.services.event_sink import InMemoryEventSink
from tutorial_quiz.core.services.submission_store import InMemorySubmissionStore
from tutorial_quiz.core.services.tutorial_context import TutorialContext


@pytest.fixture
def store():
    return InMemorySubmissionStore()


@pytest.fixture
def events():
    return InMemoryEventSink()


@pytest.fixture
def context(store, events):
    return TutorialContext(store=store, events=events)


@pytest.fixture
def addition_question():
    """The 2 + 2 radio question used across the lifecycle tests."""
    return question(
        "2+2?",
        answer("3"),
        answer("4", correct=True),
        answer("5"),
        allow_retry=True,
        label="add",
    )


@pytest.fixture
def checkbox_question():
    return question(
        "Pick the vowels",
        answer("A", correct=True),
        answer("E", correct=True),
        answer("C"),
        label="vowels",
    )


class BrokenGradeQuestion(QuestionType):
    """A custom type whose grade() breaks the grading contract."""

    name = "broken_grade"
    grade_calls = 0

    def is_valid(self, question, value):
        return value is not None

    def grade(self, question, value):
        BrokenGradeQuestion.grade_calls += 1
        return "yes"

    def ui_initialize(self, question, value):
        return tag("div", tag("input", type="text", name=question.answer_input_id, value=value))


@pytest.fixture
def broken_type():
    """Register the broken custom type for one test."""
    BrokenGradeQuestion.grade_calls = 0
    register_question_type(BrokenGradeQuestion)
    yield BrokenGradeQuestion.name
    unregister_question_type(BrokenGradeQuestion.name)


@pytest.fixture
def broken_grade_calls(broken_type):
    """Return a callable reporting how often the broken type graded."""
    return lambda: BrokenGradeQuestion.grade_calls
