"""Numeric question: answers are compared as numbers within a tolerance."""

from __future__ import annotations

import math
from typing import Any

from tutorial_quiz.constants.quiz_constants import NUMERIC_DEFAULT_TOLERANCE, TYPE_NUMERIC
from tutorial_quiz.core.errors import ConfigurationError
from tutorial_quiz.core.grading import evaluate_rules, incorrect, mark_as
from tutorial_quiz.core.html_tags import Tag, tag
from tutorial_quiz.core.models import GradingResult, QuestionDefinition
from tutorial_quiz.core.question_types.base import QuestionType, register_question_type


def parse_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


@register_question_type
class NumericQuestion(QuestionType):
    """Options: ``tolerance`` plus ``min``, ``max`` and ``step`` for the input."""

    name = TYPE_NUMERIC

    def validate_definition(self, question: QuestionDefinition) -> None:
        for item in question.answers:
            if parse_number(item.value) is None:
                raise ConfigurationError(
                    f"Numeric question '{question.question_id}' has a non-numeric answer: '{item.value}'."
                )
        tolerance = question.options.get("tolerance", NUMERIC_DEFAULT_TOLERANCE)
        if parse_number(tolerance) is None or float(tolerance) < 0:
            raise ConfigurationError("Numeric `tolerance` must be a non-negative number.")

    def is_valid(self, question: QuestionDefinition, value: Any) -> bool:
        number = parse_number(value)
        return number is not None and not math.isnan(number)

    def grade(self, question: QuestionDefinition, value: Any) -> GradingResult:
        number = parse_number(value)
        if number is None:
            return incorrect()
        tolerance = float(question.options.get("tolerance", NUMERIC_DEFAULT_TOLERANCE))
        for item in question.answers:
            expected = parse_number(item.value)
            if expected is not None and math.isclose(number, expected, rel_tol=0.0, abs_tol=tolerance):
                return mark_as(item.correct, item.message)
        ruled = evaluate_rules(question.rules, number)
        if ruled is not None:
            return ruled
        return incorrect()

    def ui_initialize(self, question: QuestionDefinition, value: Any) -> Tag:
        return tag(
            "div",
            tag("label", question.prompt, class_="control-label", for_=f"{question.answer_input_id}-input"),
            tag(
                "input",
                type="number",
                id=f"{question.answer_input_id}-input",
                name=question.answer_input_id,
                value=None if value is None else str(value),
                min=question.options.get("min"),
                max=question.options.get("max"),
                step=question.options.get("step"),
                class_="form-control",
            ),
            id=question.answer_input_id,
            class_="form-group shiny-input-container",
        )
