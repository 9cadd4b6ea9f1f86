"""HTML presentation of tutorial questions."""

from .document import ActivationDirective, DocumentFragment, render_document_question, render_document_quiz
from .question_renderer import (
    QuestionView,
    ViewKind,
    question_button,
    question_container,
    question_messages,
    question_ui_loading,
    render_question,
)

__all__ = [
    "ActivationDirective",
    "DocumentFragment",
    "QuestionView",
    "ViewKind",
    "question_button",
    "question_container",
    "question_messages",
    "question_ui_loading",
    "render_document_question",
    "render_document_quiz",
    "render_question",
]
