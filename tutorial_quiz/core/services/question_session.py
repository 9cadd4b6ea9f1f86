"""Lifecycle of one question inside one user session.

States::

    unanswered --submit--> submitted (incorrect, retry allowed) --try_again--> unanswered
    unanswered --submit--> done (correct, or no retry allowed)

``done`` is terminal for the session. Every derived value (validity,
correctness, done, button) is recomputed from ``submitted_answer`` and the
grading result of the last submission, which is computed exactly once per
submit or restore event.
"""

from __future__ import annotations

import copy
import logging
import random
from typing import Any

from tutorial_quiz.constants.quiz_constants import (
    EVENT_QUESTION_SUBMISSION,
    EVENT_RESET_QUESTION_SUBMISSION,
    SEED_UPPER_BOUND,
)
from tutorial_quiz.core.errors import ExtensionContractViolation
from tutorial_quiz.core.models import (
    ButtonState,
    GradingResult,
    QuestionDefinition,
    QuestionStateReport,
    html_str,
)
from tutorial_quiz.core.question_types import QuestionType, check_grade, check_is_valid, get_question_type
from tutorial_quiz.core.services.tutorial_context import TutorialContext

logger = logging.getLogger(__name__)


def _event_answer(value: Any) -> Any:
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return str(value)


class QuestionSession:
    """Owns the submission state of one question for one user session."""

    def __init__(
        self,
        question: QuestionDefinition,
        context: TutorialContext,
        session_id: str,
        rng: random.Random | None = None,
    ) -> None:
        self._question_type: QuestionType = get_question_type(question.type)
        self._definition = question
        self._question = question
        self._session_id = session_id
        self._store = context.store
        self._events = context.events
        self._rng = rng or random.Random()

        self._candidate: Any = None
        self._submitted_answer: Any = None
        self._grading_result: GradingResult | None = None
        self._started = False
        self._closed = False
        self._fault: Exception | None = None

    # --- Read-only state ---------------------------------------------------

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def question(self) -> QuestionDefinition:
        """The session copy of the question (session seed, session answer order)."""
        return self._question

    @property
    def question_type(self) -> QuestionType:
        return self._question_type

    @property
    def label(self) -> str:
        return self._definition.label or self._definition.question_id

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def fault(self) -> Exception | None:
        return self._fault

    @property
    def candidate(self) -> Any:
        return self._candidate

    @property
    def submitted_answer(self) -> Any:
        return self._submitted_answer

    @property
    def grading_result(self) -> GradingResult | None:
        return self._grading_result

    @property
    def is_done(self) -> bool:
        if self._grading_result is None:
            return False
        return (not self._question.allow_retry) or self._grading_result.correct

    @property
    def button_state(self) -> ButtonState:
        if self._submitted_answer is None:
            return ButtonState.SUBMIT
        if self._grading_result is None:
            raise RuntimeError("Submitted answer has no grading result.")
        if self._grading_result.correct:
            return ButtonState.CORRECT
        if self._question.allow_retry:
            return ButtonState.TRY_AGAIN
        return ButtonState.INCORRECT

    @property
    def answer_is_valid(self) -> bool:
        """Validity of the candidate, or of the submitted answer once submitted."""
        if self._submitted_answer is None:
            return self._validate(self._candidate)
        return self._validate(self._submitted_answer)

    def state_report(self) -> QuestionStateReport | None:
        if self._submitted_answer is None or self._grading_result is None:
            return None
        return QuestionStateReport(
            answer=self._submitted_answer,
            correct=self._grading_result.correct,
        )

    # --- Events ------------------------------------------------------------

    def start(self, restore: bool = True) -> None:
        """Initialize the session copy of the question and restore a prior answer."""
        self._ensure_usable()
        if self._started:
            raise RuntimeError(f"Question '{self.label}' was already started for this session.")

        self._question = self._init_question()
        self._started = True

        prior_answer = None
        if restore:
            prior_answer = self._store.get_prior_answer(self._session_id, self.label)
        if prior_answer is None:
            return

        logger.debug("Restoring answer for question '%s' in session %s", self.label, self._session_id)
        self._candidate = copy.copy(prior_answer)
        self._record_submission(prior_answer)

    def set_candidate(self, value: Any) -> None:
        """Record the user's in-progress input."""
        self._ensure_usable()
        self._candidate = value

    def submit(self) -> GradingResult | None:
        """Submit the candidate. Returns ``None`` when submitting is not possible."""
        self._ensure_usable()
        if not self._started:
            logger.debug("Ignoring submit for question '%s': not started", self.label)
            return None
        if self.button_state is not ButtonState.SUBMIT:
            logger.debug("Ignoring submit for question '%s': button is %s", self.label, self.button_state.value)
            return None
        if not self._validate(self._candidate):
            logger.debug("Ignoring submit for question '%s': invalid candidate", self.label)
            return None

        result = self._record_submission(copy.copy(self._candidate))
        self._events.emit_event(
            self._session_id,
            EVENT_QUESTION_SUBMISSION,
            {
                "label": self.label,
                "question": html_str(self._question.prompt),
                "answer": _event_answer(self._submitted_answer),
                "correct": result.correct,
            },
        )
        return result

    def try_again(self) -> bool:
        """Clear the submission so the user may answer again.

        The candidate input and the answer order are left as they are.
        """
        self._ensure_usable()
        if not self._started or self.button_state is not ButtonState.TRY_AGAIN:
            logger.debug("Ignoring try again for question '%s'", self.label)
            return False

        self._submitted_answer = None
        self._grading_result = None
        self._events.emit_event(
            self._session_id,
            EVENT_RESET_QUESTION_SUBMISSION,
            {
                "label": self.label,
                "question": html_str(self._question.prompt),
            },
        )
        return True

    def close(self) -> None:
        """Tear the session down; later events raise ``RuntimeError``."""
        self._closed = True
        self._store = None
        self._events = None

    # --- Internals ---------------------------------------------------------

    def _init_question(self) -> QuestionDefinition:
        seed = self._rng.uniform(0, SEED_UPPER_BOUND)
        answers = self._definition.answers
        if self._definition.random_answer_order:
            # function answers live in `rules` and are never displayed or shuffled
            shuffled = list(answers)
            self._rng.shuffle(shuffled)
            answers = tuple(shuffled)
        return self._definition.with_session_state(seed=seed, answers=answers)

    def _record_submission(self, value: Any) -> GradingResult:
        result = self._grade(value)
        self._submitted_answer = value
        self._grading_result = result
        self._publish_state()
        return result

    def _publish_state(self) -> None:
        report = self.state_report()
        if report is not None:
            self._store.publish_state(self._session_id, self.label, report)

    def _grade(self, value: Any) -> GradingResult:
        try:
            return check_grade(self._question_type, self._question, value)
        except ExtensionContractViolation as exc:
            self._mark_faulted(exc)
            raise
        except Exception as exc:
            violation = ExtensionContractViolation(
                f"Grading question '{self.label}' ({self._question.type}) failed: {exc}"
            )
            self._mark_faulted(violation)
            raise violation from exc

    def _validate(self, value: Any) -> bool:
        try:
            return check_is_valid(self._question_type, self._question, value)
        except ExtensionContractViolation as exc:
            self._mark_faulted(exc)
            raise

    def _mark_faulted(self, exc: Exception) -> None:
        self._fault = exc
        logger.error("Question '%s' in session %s is faulted: %s", self.label, self._session_id, exc)

    def _ensure_usable(self) -> None:
        if self._closed:
            raise RuntimeError(f"Session for question '{self.label}' is closed.")
        if self._fault is not None:
            raise ExtensionContractViolation(
                f"Question '{self.label}' is faulted and cannot continue: {self._fault}"
            )
