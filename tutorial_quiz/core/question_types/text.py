"""Free-form text question."""

from __future__ import annotations

from typing import Any

from tutorial_quiz.constants.quiz_constants import TYPE_TEXT
from tutorial_quiz.core.grading import evaluate_rules, incorrect, mark_as
from tutorial_quiz.core.html_tags import Tag, tag
from tutorial_quiz.core.models import GradingResult, QuestionDefinition
from tutorial_quiz.core.question_types.base import QuestionType, register_question_type


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


@register_question_type
class TextQuestion(QuestionType):
    """Literal answers are compared as exact strings after trimming.

    Options: ``trim`` (default ``True``), ``placeholder`` and ``rows``; a
    ``rows`` value renders a text area instead of a single line input.
    """

    name = TYPE_TEXT

    def is_valid(self, question: QuestionDefinition, value: Any) -> bool:
        return bool(_as_text(value).strip())

    def grade(self, question: QuestionDefinition, value: Any) -> GradingResult:
        text = _as_text(value)
        if question.options.get("trim", True):
            text = text.strip()
        matched = question.find_answer(text)
        if matched is not None:
            return mark_as(matched.correct, matched.message)
        ruled = evaluate_rules(question.rules, text)
        if ruled is not None:
            return ruled
        return incorrect()

    def ui_initialize(self, question: QuestionDefinition, value: Any) -> Tag:
        rows = question.options.get("rows")
        placeholder = question.options.get("placeholder")
        if rows:
            field = tag(
                "textarea",
                _as_text(value),
                id=f"{question.answer_input_id}-input",
                name=question.answer_input_id,
                rows=rows,
                placeholder=placeholder,
                class_="form-control",
            )
        else:
            field = tag(
                "input",
                type="text",
                id=f"{question.answer_input_id}-input",
                name=question.answer_input_id,
                value=_as_text(value),
                placeholder=placeholder,
                class_="form-control",
            )
        return tag(
            "div",
            tag("label", question.prompt, class_="control-label", for_=f"{question.answer_input_id}-input"),
            field,
            id=question.answer_input_id,
            class_="form-group shiny-input-container",
        )
