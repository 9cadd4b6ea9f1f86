"""Question type contract and the type registry.

A question type bundles the three behaviours that vary per type: whether a
candidate answer may be submitted, how a submission is graded, and how the
answer inputs are rendered. Built-in types register themselves on import;
custom types subclass ``QuestionType`` and use ``register_question_type``.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any

from tutorial_quiz.core.errors import ConfigurationError, ExtensionContractViolation
from tutorial_quiz.core.grading import ensure_grading_result
from tutorial_quiz.core.html_tags import disable_all_tags, finalize_question
from tutorial_quiz.core.models import GradingResult, QuestionDefinition

logger = logging.getLogger(__name__)


class QuestionType:
    """Behaviour of one question type. Subclasses must set ``name``."""

    name: str = ""

    def validate_definition(self, question: QuestionDefinition) -> None:
        """Reject definitions this type cannot grade. Raise ``ConfigurationError``."""

    def is_valid(self, question: QuestionDefinition, value: Any) -> bool:
        raise NotImplementedError

    def grade(self, question: QuestionDefinition, value: Any) -> GradingResult:
        raise NotImplementedError

    def ui_initialize(self, question: QuestionDefinition, value: Any) -> Any:
        raise NotImplementedError

    def ui_try_again(self, question: QuestionDefinition, value: Any) -> Any:
        return disable_all_tags(self.ui_initialize(question, value))

    def ui_completed(self, question: QuestionDefinition, value: Any) -> Any:
        return finalize_question(self.ui_initialize(question, value))


_registry: dict[str, QuestionType] = {}
_registry_lock = Lock()


def register_question_type(cls: type[QuestionType]) -> type[QuestionType]:
    """Class decorator registering an instance of ``cls`` under ``cls.name``."""
    if not issubclass(cls, QuestionType):
        raise TypeError("Question types must subclass QuestionType.")
    if not cls.name:
        raise ConfigurationError(f"{cls.__name__} must define a non-empty `name`.")
    with _registry_lock:
        if cls.name in _registry:
            logger.info("Replacing question type '%s' with %s", cls.name, cls.__name__)
        _registry[cls.name] = cls()
    return cls


def unregister_question_type(name: str) -> None:
    with _registry_lock:
        _registry.pop(name, None)


def find_question_type(name: str) -> QuestionType | None:
    with _registry_lock:
        return _registry.get(name)


def get_question_type(name: str) -> QuestionType:
    question_type = find_question_type(name)
    if question_type is None:
        raise ConfigurationError(f"Unknown question type '{name}'. Register it with register_question_type().")
    return question_type


def registered_question_types() -> list[str]:
    with _registry_lock:
        return sorted(_registry)


def check_is_valid(question_type: QuestionType, question: QuestionDefinition, value: Any) -> bool:
    result = question_type.is_valid(question, value)
    if not isinstance(result, bool):
        raise ExtensionContractViolation(
            f"Question type '{question_type.name}' is_valid() must return a bool; "
            f"got {type(result).__name__}."
        )
    return result


def check_grade(question_type: QuestionType, question: QuestionDefinition, value: Any) -> GradingResult:
    result = question_type.grade(question, value)
    return ensure_grading_result(result, f"Question type '{question_type.name}' grade()")
