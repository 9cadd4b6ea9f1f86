"""Domain models for tutorial quiz questions."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping

from tutorial_quiz.constants.quiz_constants import STATE_TYPE_QUESTION


def html_str(value: Any) -> str | None:
    """String form of an HTML-capable value; ``None`` stays ``None``."""
    if value is None:
        return None
    if hasattr(value, "__html__"):
        return value.__html__()
    return str(value)


@dataclass(frozen=True, slots=True)
class GradingResult:
    """Outcome of grading one submission."""

    correct: bool
    messages: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class Answer:
    """A literal answer option with a fixed correctness flag."""

    value: str  # identifier submitted by the input widget
    label: Any  # rendered HTML shown next to the input
    correct: bool = False
    message: Any = None

    @property
    def is_function(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "label": html_str(self.label),
            "correct": self.correct,
            "message": html_str(self.message),
        }


@dataclass(frozen=True, slots=True)
class GradingRule:
    """A function answer: custom logic deciding correctness of a submitted value.

    ``fn`` receives the submitted value and returns a ``GradingResult`` or
    ``None`` when it has no opinion about the value.
    """

    fn: Callable[[Any], GradingResult | None]
    label: str | None = None

    @property
    def is_function(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Messages:
    """Feedback texts, already rendered to HTML."""

    correct: Any = None
    incorrect: Any = None
    try_again: Any = None
    message: Any = None
    post_message: Any = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "correct": html_str(self.correct),
            "incorrect": html_str(self.incorrect),
            "try_again": html_str(self.try_again),
            "message": html_str(self.message),
            "post_message": html_str(self.post_message),
        }


@dataclass(frozen=True, slots=True)
class ButtonLabels:
    submit: Any = None
    try_again: Any = None


class ButtonState(str, Enum):
    """Which action button (if any) a question currently shows."""

    SUBMIT = "submit"
    TRY_AGAIN = "try_again"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class QuestionDefinition:
    """Fully resolved, immutable question declared in a tutorial document."""

    question_id: str
    type: str
    prompt: Any
    answers: tuple[Answer, ...]
    rules: tuple[GradingRule, ...] = ()
    messages: Messages = field(default_factory=Messages)
    button_labels: ButtonLabels = field(default_factory=ButtonLabels)
    label: str | None = None
    loading: Any = None
    allow_retry: bool = False
    random_answer_order: bool = False
    seed: float = 0.0
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "answers", tuple(self.answers))
        object.__setattr__(self, "rules", tuple(self.rules))
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def answer_input_id(self) -> str:
        return f"{self.question_id}-answer"

    @property
    def action_button_id(self) -> str:
        return f"{self.question_id}-action_button"

    @property
    def literal_answers(self) -> tuple[Answer, ...]:
        return self.answers

    @property
    def correct_answers(self) -> tuple[Answer, ...]:
        return tuple(a for a in self.answers if a.correct)

    @property
    def has_function_answers(self) -> bool:
        return bool(self.rules)

    def find_answer(self, value: Any) -> Answer | None:
        return next((a for a in self.answers if a.value == value), None)

    def with_session_state(
        self, seed: float, answers: tuple[Answer, ...] | None = None
    ) -> QuestionDefinition:
        """Copy for one user session, with its own seed and answer order."""
        return replace(
            self,
            seed=seed,
            answers=self.answers if answers is None else answers,
            options=dict(self.options),
        )

    def relabel(self, label: str) -> QuestionDefinition:
        return replace(self, label=label, question_id=label, options=dict(self.options))

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form carried by the document activation directive."""
        return {
            "question_id": self.question_id,
            "label": self.label,
            "type": self.type,
            "prompt": html_str(self.prompt),
            "answers": [a.to_dict() for a in self.answers],
            "function_answers": [rule.label for rule in self.rules],
            "messages": self.messages.to_dict(),
            "button_labels": {
                "submit": html_str(self.button_labels.submit),
                "try_again": html_str(self.button_labels.try_again),
            },
            "loading": html_str(self.loading),
            "allow_retry": self.allow_retry,
            "random_answer_order": self.random_answer_order,
            "seed": self.seed,
            "options": dict(self.options),
        }


@dataclass(frozen=True, slots=True)
class Quiz:
    """A captioned group of questions."""

    caption: Any
    questions: tuple[QuestionDefinition, ...]


@dataclass(frozen=True, slots=True)
class QuestionStateReport:
    """State published to the persistence collaborator after grading."""

    answer: Any
    correct: bool
    type: str = STATE_TYPE_QUESTION

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "answer": self.answer, "correct": self.correct}
