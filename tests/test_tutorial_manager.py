"""
Tests for the TutorialManager facade.
"""

from pathlib import Path

import pytest

import tutorial_quiz
from tutorial_quiz.core.errors import ConfigurationError, ExtensionContractViolation
from tutorial_quiz.core.models import QuestionStateReport
from tutorial_quiz.core.question_builder import answer, question, quiz
from tutorial_quiz.core.tutorial_manager import TutorialManager

SAMPLE_TUTORIAL = Path(tutorial_quiz.__file__).parent / "data" / "sample_tutorial.txt"


@pytest.fixture
def manager(context, addition_question):
    tutorial_manager = TutorialManager(context)
    tutorial_manager.register_question(addition_question)
    return tutorial_manager


class TestTutorialManager:
    """Tests for routing user events to question sessions."""

    def test_unknown_question(self, manager):
        """Test unknown question."""
        with pytest.raises(KeyError):
            manager.submit("s1", "missing")

    def test_submit_and_progress(self, manager):
        """Test submit and progress."""
        manager.set_candidate("s1", "add", "3")
        assert manager.submit("s1", "add").correct is False
        assert manager.try_again("s1", "add") is True
        manager.set_candidate("s1", "add", "4")
        assert manager.submit("s1", "add").correct is True

        progress = manager.get_progress("s1")
        assert progress["add"].correct is True
        assert manager.get_progress("other") == {}

    def test_sessions_are_isolated(self, manager):
        """Test sessions are isolated."""
        manager.set_candidate("s1", "add", "4")
        manager.submit("s1", "add")
        with manager.question_session("s2", "add") as session:
            assert session.submitted_answer is None
            assert session.started is True

    def test_session_is_reused(self, manager):
        """Test session is reused."""
        with manager.question_session("s1", "add") as first:
            pass
        with manager.question_session("s1", "add") as second:
            pass
        assert first is second

    def test_end_session_closes_questions(self, manager):
        """Test end session closes questions."""
        with manager.question_session("s1", "add") as session:
            pass
        manager.end_session("s1")

        assert session.closed is True
        assert manager.has_session("s1") is False

    def test_new_session_restores_published_answer(self, manager):
        """Test new session restores published answer."""
        manager.set_candidate("s1", "add", "4")
        manager.submit("s1", "add")
        manager.end_session("s1")

        with manager.question_session("s1", "add") as session:
            assert session.submitted_answer == "4"
            assert session.is_done is True

    def test_register_quiz(self, context):
        """Test register quiz."""
        tutorial_manager = TutorialManager(context)
        tutorial_manager.register_quiz(
            quiz(
                question("One", answer("a", correct=True), label="chunk"),
                question("Two", answer("b", correct=True), label="chunk"),
            )
        )
        assert tutorial_manager.has_question("chunk-1")
        assert tutorial_manager.has_question("chunk-2")
        assert len(tutorial_manager.get_quizzes()) == 1

    def test_load_tutorial(self, context):
        """Test load tutorial."""
        tutorial_manager = TutorialManager(context)
        loaded = tutorial_manager.load_tutorial(SAMPLE_TUTORIAL)
        assert len(loaded) == 3
        assert [q.question_id for q in tutorial_manager.get_questions()] == ["alphabet", "location", "square"]

    def test_duplicate_label_is_rejected(self, manager):
        """Test that a second question cannot reuse a registered id."""
        with pytest.raises(ConfigurationError, match="already used"):
            manager.register_question(question("Other?", answer("x", correct=True), label="add"))
        assert len(manager.get_questions()) == 1
        assert manager.get_questions()[0].prompt == "2+2?"

    def test_same_definition_can_be_stored_again(self, manager, addition_question):
        """Test that re-registering the same definition is allowed."""
        manager.register_question(addition_question)
        assert len(manager.get_questions()) == 1

    def test_faulted_restore_is_kept(self, manager, store, broken_type, broken_grade_calls):
        """Test that a restore hitting a broken type is graded once and stays faulted."""
        manager.register_question(question("Custom", answer("x", correct=True), type=broken_type, label="custom"))
        store.publish_state("s1", "custom", QuestionStateReport(answer="x", correct=False))

        with pytest.raises(ExtensionContractViolation):
            with manager.question_session("s1", "custom"):
                pass
        with manager.question_session("s1", "custom") as session:
            assert session.fault is not None

        assert broken_grade_calls() == 1

    def test_end_session_can_forget_state(self, manager, store):
        """Test that forget_state drops the published answers."""
        manager.set_candidate("s1", "add", "4")
        manager.submit("s1", "add")
        manager.end_session("s1", forget_state=True)

        assert store.get_session_states("s1") == {}
        with manager.question_session("s1", "add") as session:
            assert session.submitted_answer is None
