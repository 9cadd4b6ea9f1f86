"""Presentation of a question session as HTML fragments."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import random
from typing import Any

from markupsafe import Markup

from tutorial_quiz.constants.quiz_constants import TYPE_CHECKBOX, TYPE_RADIO
from tutorial_quiz.core.html_tags import Tag, TagList, disable_all_tags, render_node, tag, tag_list
from tutorial_quiz.core.i18n import TranslationCatalog, localize
from tutorial_quiz.core.markdown_renderer import MATHJAX_TRIGGER_SCRIPT
from tutorial_quiz.core.models import ButtonState, QuestionDefinition
from tutorial_quiz.core.services.question_session import QuestionSession


class ViewKind(str, Enum):
    LOADING = "loading"
    INITIAL = "initial"
    TRY_AGAIN = "try_again"
    COMPLETED = "completed"
    FAULT = "fault"


@dataclass(slots=True)
class QuestionView:
    """The three output slots of a question plus which view produced them."""

    question_id: str
    kind: ViewKind
    answers: Any = None
    messages: Any = None
    button: Any = None

    def to_html(self) -> Markup:
        return question_container(
            self.question_id,
            answers=self.answers,
            messages=self.messages,
            button=self.button,
        ).render()

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "kind": self.kind.value,
            "answers_html": str(render_node(self.answers)),
            "messages_html": str(render_node(self.messages)),
            "button_html": str(render_node(self.button)),
        }


def question_container(
    question_id: str,
    answers: Any = None,
    messages: Any = None,
    button: Any = None,
) -> Tag:
    """Container markup with one slot per output; empty slots are filled on activation."""
    return tag(
        "div",
        tag(
            "div",
            tag("div", answers, id=f"{question_id}-answer_container", class_="answer-container"),
            tag("div", messages, id=f"{question_id}-message_container", class_="message-container"),
            tag("div", button, id=f"{question_id}-action_button_container", class_="action-button-container"),
            MATHJAX_TRIGGER_SCRIPT,
            data_label=question_id,
            class_="tutorial-question panel-body",
        ),
        class_="panel panel-default tutorial-question-container",
    )


def question_ui_loading(question: QuestionDefinition, rng: random.Random | None = None) -> Tag:
    """Placeholder skeleton roughly shaped like the question."""
    if question.loading is not None:
        return tag("div", question.loading, class_="loading")

    rng = rng or random.Random()
    prompt = str(render_node(question.prompt))
    n_paragraphs = max(prompt.count("</p>"), 1)
    paragraphs = [
        tag(
            "p",
            *[
                tag("span", class_=f"placeholder col-{rng.randint(2, 7)}")
                for _ in range(rng.randint(2, 4))
            ],
        )
        for _ in range(n_paragraphs)
    ]

    options = None
    if question.type in (TYPE_RADIO, TYPE_CHECKBOX):
        options = tag(
            "ul",
            *[tag("li", tag("span", class_="placeholder col-3")) for _ in question.answers],
        )

    button = tag(
        "a",
        href="#",
        tabindex="-1",
        class_="btn btn-primary disabled placeholder col-3",
        aria_hidden="true",
    )
    return tag("div", *paragraphs, options, button, class_="loading placeholder-glow")


def question_button(
    question: QuestionDefinition,
    button_state: ButtonState,
    is_valid: bool = True,
    catalog: TranslationCatalog | None = None,
) -> Tag | None:
    """Action button for the current state; no button once feedback is final."""
    if button_state in (ButtonState.CORRECT, ButtonState.INCORRECT):
        return None

    if button_state is ButtonState.SUBMIT:
        button = tag(
            "button",
            localize(question.button_labels.submit, catalog),
            id=question.action_button_id,
            type="button",
            class_="btn btn-primary action-button",
        )
        if not is_valid:
            button = disable_all_tags(button)
        return button

    return tag(
        "button",
        localize(question.button_labels.try_again, catalog),
        id=question.action_button_id,
        type="button",
        class_="btn btn-warning action-button",
    )


def question_messages(
    question: QuestionDefinition,
    messages: tuple[Any, ...] | None,
    is_correct: bool,
    is_done: bool,
) -> TagList | None:
    """Feedback alert, the always-shown message and the post message."""
    if is_correct:
        default_message = question.messages.correct
    elif is_done:
        default_message = question.messages.incorrect
    else:
        default_message = question.messages.try_again

    all_messages = [m for m in (default_message, *(messages or ())) if m is not None]

    message_alert = None
    if all_messages:
        alert_class = "alert-success" if is_correct else "alert-danger"
        children: list[Any] = []
        for index, item in enumerate(all_messages):
            if index:
                children.extend([tag("br"), tag("br")])
            children.append(item)
        message_alert = tag("div", *children, class_=f"alert {alert_class}")

    always_alert = None
    if question.messages.message is not None:
        always_alert = tag("div", question.messages.message, class_="alert alert-info")

    post_alert = None
    if is_done and question.messages.post_message is not None:
        post_alert = tag("div", question.messages.post_message, class_="alert alert-info")

    if message_alert is None and always_alert is None and post_alert is None:
        return None
    return tag_list(message_alert, always_alert, post_alert)


def question_fault(question: QuestionDefinition, fault: Exception) -> Tag:
    return tag(
        "div",
        tag("strong", f"Question '{question.question_id}' failed: "),
        str(fault),
        class_="alert alert-danger question-fault",
    )


def render_question(
    session: QuestionSession,
    catalog: TranslationCatalog | None = None,
    rng: random.Random | None = None,
) -> QuestionView:
    """Render the current state of ``session``."""
    question = session.question
    question_type = session.question_type

    if session.fault is not None:
        return QuestionView(
            question.question_id,
            ViewKind.FAULT,
            answers=question_fault(question, session.fault),
        )

    if not session.started:
        return QuestionView(
            question.question_id,
            ViewKind.LOADING,
            answers=question_ui_loading(question, rng),
        )

    if session.submitted_answer is None:
        return QuestionView(
            question.question_id,
            ViewKind.INITIAL,
            answers=question_type.ui_initialize(question, session.candidate),
            button=question_button(question, ButtonState.SUBMIT, session.answer_is_valid, catalog),
        )

    result = session.grading_result
    messages = question_messages(question, result.messages, result.correct, session.is_done)

    if session.is_done:
        return QuestionView(
            question.question_id,
            ViewKind.COMPLETED,
            answers=question_type.ui_completed(question, session.submitted_answer),
            messages=messages,
            button=question_button(question, session.button_state, session.answer_is_valid, catalog),
        )

    return QuestionView(
        question.question_id,
        ViewKind.TRY_AGAIN,
        answers=question_type.ui_try_again(question, session.submitted_answer),
        messages=messages,
        button=question_button(question, session.button_state, session.answer_is_valid, catalog),
    )
