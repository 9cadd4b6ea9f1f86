"""Persistence collaborator: prior submissions and published question state."""

from __future__ import annotations

from threading import Lock
from typing import Any, Protocol

from tutorial_quiz.core.models import QuestionStateReport


class SubmissionStore(Protocol):
    """Stores question state per user session for restoration and progress."""

    def get_prior_answer(self, session_id: str, question_label: str) -> Any | None:
        ...

    def publish_state(self, session_id: str, question_label: str, report: QuestionStateReport) -> None:
        ...

    def clear_session(self, session_id: str) -> None:
        ...


class InMemorySubmissionStore:
    """Keeps published state in process memory, keyed by session and label."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._states: dict[str, dict[str, QuestionStateReport]] = {}

    def get_prior_answer(self, session_id: str, question_label: str) -> Any | None:
        with self._lock:
            report = self._states.get(session_id, {}).get(str(question_label))
            return None if report is None else report.answer

    def publish_state(self, session_id: str, question_label: str, report: QuestionStateReport) -> None:
        with self._lock:
            self._states.setdefault(session_id, {})[str(question_label)] = report

    def get_session_states(self, session_id: str) -> dict[str, QuestionStateReport]:
        """Return a copy of every published state for one session."""
        with self._lock:
            return dict(self._states.get(session_id, {}))

    def clear_session(self, session_id: str) -> None:
        with self._lock:
            self._states.pop(session_id, None)
