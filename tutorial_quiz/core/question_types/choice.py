"""Shared rendering for radio and checkbox questions."""

from __future__ import annotations

from typing import Any

from tutorial_quiz.core.html_tags import Tag, finalize_question, tag
from tutorial_quiz.core.models import Answer, QuestionDefinition
from tutorial_quiz.core.question_types.base import QuestionType


def selected_values(value: Any) -> list[str]:
    """Normalize a candidate to a list of option values; scalars become one value."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    text = str(value)
    return [text] if text else []


class ChoiceQuestionType(QuestionType):
    """Base for question types that pick among literal answers."""

    input_type: str = ""

    def is_valid(self, question: QuestionDefinition, value: Any) -> bool:
        return len(selected_values(value)) > 0

    def _option(self, question: QuestionDefinition, item: Answer, selected: list[str]) -> Tag:
        return tag(
            "div",
            tag(
                "label",
                tag(
                    "input",
                    type=self.input_type,
                    name=question.answer_input_id,
                    value=item.value,
                    checked=item.value in selected,
                ),
                " ",
                tag("span", item.label),
            ),
            class_=self.input_type,
        )

    def ui_initialize(self, question: QuestionDefinition, value: Any) -> Tag:
        selected = selected_values(value)
        return tag(
            "div",
            tag("label", question.prompt, class_="control-label", for_=question.answer_input_id),
            tag(
                "div",
                *[self._option(question, item, selected) for item in question.answers],
                class_="shiny-options-group",
            ),
            id=question.answer_input_id,
            class_=f"form-group shiny-input-{self.input_type}group shiny-input-container",
        )

    def ui_completed(self, question: QuestionDefinition, value: Any) -> Tag:
        selected = selected_values(value)
        ui = self.ui_initialize(question, value)
        options_group = ui.children[1]
        for option, item in zip(options_group.children, question.answers):
            label = option.children[0]
            if item.correct:
                label.add_class("correct")
            elif item.value in selected:
                label.add_class("incorrect")
        return finalize_question(ui)
