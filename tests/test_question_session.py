"""
Tests for the per-user question lifecycle: submit, try again, restore and faults.
"""

import random

import pytest

from tutorial_quiz.constants.quiz_constants import (
    EVENT_QUESTION_SUBMISSION,
    EVENT_RESET_QUESTION_SUBMISSION,
    SEED_UPPER_BOUND,
)
from tutorial_quiz.core.errors import ExtensionContractViolation
from tutorial_quiz.core.models import ButtonState, QuestionStateReport
from tutorial_quiz.core.question_builder import answer, answer_fn, question
from tutorial_quiz.core.services.question_session import QuestionSession


def _started(q, context, session_id="s1", seed=0):
    session = QuestionSession(q, context, session_id, rng=random.Random(seed))
    session.start()
    return session


class TestSubmitAndTryAgain:
    """Tests for the submit / try again cycle."""

    def test_initial_state(self, addition_question, context):
        """Test initial state."""
        session = _started(addition_question, context)
        assert session.started is True
        assert session.submitted_answer is None
        assert session.grading_result is None
        assert session.is_done is False
        assert session.button_state is ButtonState.SUBMIT
        assert session.answer_is_valid is False

    def test_correct_answer_finishes(self, addition_question, context):
        """Test correct answer finishes."""
        session = _started(addition_question, context)
        session.set_candidate("4")
        result = session.submit()

        assert result.correct is True
        assert session.is_done is True
        assert session.button_state is ButtonState.CORRECT

    def test_incorrect_then_retry(self, addition_question, context, events):
        """Test incorrect then retry."""
        session = _started(addition_question, context)
        session.set_candidate("3")
        result = session.submit()

        assert result.correct is False
        assert session.is_done is False
        assert session.button_state is ButtonState.TRY_AGAIN

        assert session.try_again() is True
        assert session.submitted_answer is None
        assert session.candidate == "3"
        assert session.button_state is ButtonState.SUBMIT

        session.set_candidate("4")
        assert session.submit().correct is True
        assert session.is_done is True

        submissions = events.get_events("s1", EVENT_QUESTION_SUBMISSION)
        assert [e.payload["correct"] for e in submissions] == [False, True]
        assert submissions[0].payload == {
            "label": "add",
            "question": "2+2?",
            "answer": "3",
            "correct": False,
        }
        resets = events.get_events("s1", EVENT_RESET_QUESTION_SUBMISSION)
        assert [e.payload for e in resets] == [{"label": "add", "question": "2+2?"}]

    def test_incorrect_without_retry_is_final(self, context):
        """Test incorrect without retry is final."""
        q = question("2+2?", answer("3"), answer("4", correct=True), label="final")
        session = _started(q, context)
        session.set_candidate("3")
        session.submit()

        assert session.is_done is True
        assert session.button_state is ButtonState.INCORRECT
        assert session.try_again() is False

    def test_submit_is_ignored_when_not_permitted(self, addition_question, context, events):
        """Test submit is ignored when not permitted."""
        session = _started(addition_question, context)
        assert session.submit() is None

        session.set_candidate("4")
        session.submit()
        assert session.submit() is None
        assert len(events.get_events("s1", EVENT_QUESTION_SUBMISSION)) == 1

    def test_submit_before_start_is_ignored(self, addition_question, context):
        """Test submit before start is ignored."""
        session = QuestionSession(addition_question, context, "s1")
        session.set_candidate("4")
        assert session.submit() is None
        assert session.started is False

    def test_try_again_before_submit_is_ignored(self, addition_question, context, events):
        """Test try again before submit is ignored."""
        session = _started(addition_question, context)
        assert session.try_again() is False
        assert events.get_events() == []

    def test_checkbox_event_answer_is_a_list(self, checkbox_question, context, events):
        """Test checkbox event answer is a list."""
        session = _started(checkbox_question, context)
        session.set_candidate(("A", "E"))
        session.submit()
        payload = events.get_events("s1", EVENT_QUESTION_SUBMISSION)[0].payload
        assert payload["answer"] == ["A", "E"]
        assert payload["correct"] is True


class TestSessionCopy:
    """Tests for the per-session copy of the question."""

    def _shuffled_question(self):
        return question(
            "Pick the primes",
            *[answer(str(n), correct=n in (2, 3, 5)) for n in (1, 2, 3, 4, 5, 6)],
            answer_fn(lambda value: None),
            random_answer_order=True,
            allow_retry=True,
            label="primes",
        )

    def test_order_is_fixed_for_the_session(self, context):
        """Test order is fixed for the session."""
        q = self._shuffled_question()
        session = _started(q, context, seed=3)
        order = [a.value for a in session.question.answers]

        for _ in range(3):
            session.set_candidate(["1"])
            session.submit()
            session.try_again()
            assert [a.value for a in session.question.answers] == order

        assert sorted(order) == sorted(a.value for a in q.answers)

    def test_sessions_shuffle_independently(self, context):
        """Test sessions shuffle independently."""
        q = self._shuffled_question()
        original = [a.value for a in q.answers]
        orders = [
            [a.value for a in _started(q, context, session_id=f"s{seed}", seed=seed).question.answers]
            for seed in range(20)
        ]
        assert any(order != original for order in orders)

    def test_function_answers_are_not_shuffled(self, context):
        """Test function answers are not shuffled."""
        q = self._shuffled_question()
        session = _started(q, context)
        assert session.question.rules == q.rules

    def test_definition_is_left_untouched(self, addition_question, context):
        """Test definition is left untouched."""
        session = _started(addition_question, context)
        assert session.question is not addition_question
        assert 0 <= session.question.seed <= SEED_UPPER_BOUND
        assert [a.value for a in addition_question.answers] == ["3", "4", "5"]


class TestRestore:
    """Tests for restoring a prior submission."""

    def test_state_is_published(self, addition_question, context, store):
        """Test state is published."""
        session = _started(addition_question, context)
        session.set_candidate("4")
        session.submit()
        assert store.get_session_states("s1")["add"].to_dict() == {
            "type": "question",
            "answer": "4",
            "correct": True,
        }

    def test_restore_matches_a_fresh_submission(self, addition_question, context, events):
        """Test restore matches a fresh submission."""
        first = _started(addition_question, context)
        first.set_candidate("3")
        first.submit()

        restored = _started(addition_question, context)
        fresh = _started(addition_question, context, session_id="s2")
        fresh.set_candidate("3")
        fresh.submit()

        assert restored.submitted_answer == "3"
        assert restored.candidate == "3"
        assert restored.grading_result == fresh.grading_result
        assert restored.button_state is fresh.button_state
        assert restored.is_done == fresh.is_done

    def test_restore_emits_no_event(self, addition_question, context, store, events):
        """Test restore emits no event."""
        store.publish_state("s1", "add", QuestionStateReport(answer="4", correct=True))
        session = _started(addition_question, context)

        assert session.is_done is True
        assert events.get_events() == []

    def test_restore_can_be_skipped(self, addition_question, context, store):
        """Test restore can be skipped."""
        store.publish_state("s1", "add", QuestionStateReport(answer="4", correct=True))
        session = QuestionSession(addition_question, context, "s1")
        session.start(restore=False)
        assert session.submitted_answer is None

    def test_start_twice_fails(self, addition_question, context):
        """Test start twice fails."""
        session = _started(addition_question, context)
        with pytest.raises(RuntimeError, match="already started"):
            session.start()


class TestFaultsAndClose:
    """Tests for extension faults and session teardown."""

    def test_contract_violation_faults_the_session(self, context, broken_type):
        """Test contract violation faults the session."""
        q = question("Custom", answer("x", correct=True), type=broken_type, label="custom")
        session = _started(q, context)
        session.set_candidate("x")

        with pytest.raises(ExtensionContractViolation):
            session.submit()
        assert session.fault is not None

        with pytest.raises(ExtensionContractViolation, match="faulted"):
            session.set_candidate("y")

    def test_failing_function_answer_is_a_contract_violation(self, context):
        """Test failing function answer is a contract violation."""
        def boom(value):
            raise ValueError("kaboom")

        q = question("Anything?", answer_fn(boom), type="text", label="boom")
        session = _started(q, context)
        session.set_candidate("hello")

        with pytest.raises(ExtensionContractViolation, match="kaboom"):
            session.submit()
        assert isinstance(session.fault, ExtensionContractViolation)

    def test_closed_session_rejects_events(self, addition_question, context):
        """Test closed session rejects events."""
        session = _started(addition_question, context)
        session.close()
        assert session.closed is True
        with pytest.raises(RuntimeError, match="closed"):
            session.set_candidate("4")
