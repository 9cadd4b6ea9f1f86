"""Radio button question: a single answer may be submitted."""

from __future__ import annotations

from typing import Any

from tutorial_quiz.constants.quiz_constants import TYPE_RADIO
from tutorial_quiz.core.grading import evaluate_rules, mark_as
from tutorial_quiz.core.models import GradingResult, QuestionDefinition
from tutorial_quiz.core.question_types.base import register_question_type
from tutorial_quiz.core.question_types.choice import ChoiceQuestionType, selected_values


@register_question_type
class RadioQuestion(ChoiceQuestionType):
    name = TYPE_RADIO
    input_type = "radio"

    def grade(self, question: QuestionDefinition, value: Any) -> GradingResult:
        ruled = evaluate_rules(question.rules, value)
        if ruled is not None:
            return ruled
        selected = selected_values(value)
        chosen = question.find_answer(selected[0]) if selected else None
        if chosen is None:
            return mark_as(False)
        return mark_as(chosen.correct, chosen.message)
