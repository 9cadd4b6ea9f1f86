"""Output handed back to the document build for each declared question.

The build embeds a placeholder container for every question and keeps an
activation directive; the session host uses the directive to bring the
question to life once a user session connects.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any

from markupsafe import Markup

from tutorial_quiz.core.html_tags import tag
from tutorial_quiz.core.models import QuestionDefinition, Quiz
from tutorial_quiz.core.services.tutorial_context import TutorialContext
from tutorial_quiz.ui.question_renderer import question_container


@dataclass(frozen=True, slots=True)
class ActivationDirective:
    """Deferred server-side activation of one question."""

    question_id: str
    payload: dict[str, Any]

    def to_json(self) -> str:
        return json.dumps({"question_id": self.question_id, "question": self.payload}, default=str)


@dataclass(frozen=True, slots=True)
class DocumentFragment:
    html: Markup
    directives: tuple[ActivationDirective, ...]


def render_document_question(question: QuestionDefinition, context: TutorialContext) -> DocumentFragment:
    """Cache the definition and return its placeholder plus activation directive."""
    context.cache.store(question)
    directive = ActivationDirective(question.question_id, question.to_dict())
    return DocumentFragment(
        html=question_container(question.question_id).render(),
        directives=(directive,),
    )


def render_document_quiz(tutorial_quiz: Quiz, context: TutorialContext) -> DocumentFragment:
    parts: list[Markup] = []
    directives: list[ActivationDirective] = []
    if tutorial_quiz.caption is not None:
        parts.append(tag("div", tutorial_quiz.caption, class_="panel-heading tutorial-quiz-title").render())
    for item in tutorial_quiz.questions:
        fragment = render_document_question(item, context)
        parts.append(fragment.html)
        directives.extend(fragment.directives)
    return DocumentFragment(html=Markup("").join(parts), directives=tuple(directives))
