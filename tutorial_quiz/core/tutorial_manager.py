"""Facade tying declared questions to per-user question sessions."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from pathlib import Path
from threading import Lock, RLock
from typing import Any, Iterator

from tutorial_quiz.core.models import GradingResult, QuestionDefinition, QuestionStateReport, Quiz
from tutorial_quiz.core.services.question_session import QuestionSession
from tutorial_quiz.core.services.tutorial_context import TutorialContext
from tutorial_quiz.core.tutorial_importer import load_tutorial_from_file

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _UserSession:
    """Question sessions of one user; the lock serializes that user's events."""

    lock: RLock = field(default_factory=RLock)
    questions: dict[str, QuestionSession] = field(default_factory=dict)


class TutorialManager:
    """Registers tutorial questions and routes user events to their sessions."""

    def __init__(self, context: TutorialContext | None = None) -> None:
        self._lock = Lock()
        self._context = context or TutorialContext()
        self._quizzes: list[Quiz] = []
        self._sessions: dict[str, _UserSession] = {}

    @property
    def context(self) -> TutorialContext:
        return self._context

    # --- Tutorial content --------------------------------------------------

    def register_question(self, question: QuestionDefinition) -> None:
        self._context.cache.store(question)

    def register_quiz(self, tutorial_quiz: Quiz) -> None:
        with self._lock:
            self._quizzes.append(tutorial_quiz)
        for item in tutorial_quiz.questions:
            self.register_question(item)

    def load_tutorial(self, file_path: Path) -> list[QuestionDefinition]:
        imported = load_tutorial_from_file(file_path)
        for item in imported.questions:
            self.register_question(item)
        logger.info("Loaded %d question(s) from %s", len(imported.questions), file_path)
        return imported.questions

    def get_questions(self) -> list[QuestionDefinition]:
        return self._context.cache.get_all()

    def get_quizzes(self) -> list[Quiz]:
        with self._lock:
            return list(self._quizzes)

    def has_question(self, question_id: str) -> bool:
        return question_id in self._context.cache

    # --- User sessions -----------------------------------------------------

    def _user_session(self, session_id: str) -> _UserSession:
        with self._lock:
            user = self._sessions.get(session_id)
            if user is None:
                user = _UserSession()
                self._sessions[session_id] = user
            return user

    @contextmanager
    def question_session(self, session_id: str, question_id: str) -> Iterator[QuestionSession]:
        """Yield the started session of ``question_id`` while holding the user's lock.

        A session whose restored answer faults is kept, so later calls see the
        fault instead of grading the same answer again.

        Raises:
            KeyError: If no question with ``question_id`` was registered.
            ExtensionContractViolation: If restoring a prior answer faults.
        """
        definition = self._context.cache.get(question_id)
        if definition is None:
            raise KeyError(f"Unknown question '{question_id}'")

        user = self._user_session(session_id)
        with user.lock:
            session = user.questions.get(question_id)
            if session is None:
                session = QuestionSession(definition, self._context, session_id)
                user.questions[question_id] = session
                session.start()
            yield session

    def set_candidate(self, session_id: str, question_id: str, value: Any) -> None:
        with self.question_session(session_id, question_id) as session:
            session.set_candidate(value)

    def submit(self, session_id: str, question_id: str) -> GradingResult | None:
        with self.question_session(session_id, question_id) as session:
            return session.submit()

    def try_again(self, session_id: str, question_id: str) -> bool:
        with self.question_session(session_id, question_id) as session:
            return session.try_again()

    def get_progress(self, session_id: str) -> dict[str, QuestionStateReport]:
        """State reports of every question this session has answered."""
        with self._lock:
            user = self._sessions.get(session_id)
        if user is None:
            return {}
        with user.lock:
            reports = {}
            for session in user.questions.values():
                report = session.state_report()
                if report is not None:
                    reports[session.label] = report
            return reports

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def end_session(self, session_id: str, forget_state: bool = False) -> None:
        """Close every question session of ``session_id``.

        With ``forget_state`` the published answers are dropped as well, so a
        later session with the same id starts from scratch.
        """
        if forget_state:
            self._context.store.clear_session(session_id)
        with self._lock:
            user = self._sessions.pop(session_id, None)
        if user is None:
            return
        with user.lock:
            for session in user.questions.values():
                session.close()
            user.questions.clear()
        logger.debug("Ended session %s", session_id)
