"""Cache of declared question definitions, keyed by question id.

The cache only saves re-resolving definitions between renders; it is never
the source of truth for a session's state.
"""

from __future__ import annotations

from threading import Lock

from tutorial_quiz.core.errors import ConfigurationError
from tutorial_quiz.core.models import QuestionDefinition


class QuestionCache:
    def __init__(self) -> None:
        self._lock = Lock()
        self._questions: dict[str, QuestionDefinition] = {}

    def store(self, question: QuestionDefinition) -> None:
        """Cache ``question``; storing the same definition again is a no-op.

        Raises:
            ConfigurationError: If another question already uses the same id.
        """
        with self._lock:
            existing = self._questions.get(question.question_id)
            if existing is not None and existing is not question and existing != question:
                raise ConfigurationError(
                    f"Question id '{question.question_id}' is already used by another question; "
                    "labels must be unique within a tutorial."
                )
            self._questions[question.question_id] = question

    def get(self, question_id: str) -> QuestionDefinition | None:
        with self._lock:
            return self._questions.get(question_id)

    def get_all(self) -> list[QuestionDefinition]:
        """Return cached questions in insertion order."""
        with self._lock:
            return list(self._questions.values())

    def __contains__(self, question_id: object) -> bool:
        with self._lock:
            return question_id in self._questions

    def __len__(self) -> int:
        with self._lock:
            return len(self._questions)

    def clear(self) -> None:
        with self._lock:
            self._questions.clear()
