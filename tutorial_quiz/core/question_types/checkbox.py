"""Check box question: one or more answers may be submitted.

Only the exact set of correct answers is graded correct; no credit is given
for a subset or a superset.
"""

from __future__ import annotations

from typing import Any

from tutorial_quiz.constants.quiz_constants import TYPE_CHECKBOX
from tutorial_quiz.core.grading import evaluate_rules, mark_as
from tutorial_quiz.core.models import GradingResult, QuestionDefinition
from tutorial_quiz.core.question_types.base import register_question_type
from tutorial_quiz.core.question_types.choice import ChoiceQuestionType, selected_values


@register_question_type
class CheckboxQuestion(ChoiceQuestionType):
    name = TYPE_CHECKBOX
    input_type = "checkbox"

    def grade(self, question: QuestionDefinition, value: Any) -> GradingResult:
        ruled = evaluate_rules(question.rules, value)
        if ruled is not None:
            return ruled
        selected = set(selected_values(value))
        expected = {a.value for a in question.correct_answers}
        messages = [a.message for a in question.answers if a.value in selected and a.message is not None]
        return mark_as(selected == expected, messages)
