"""Authoring API: declare answers, questions and quizzes.

Example:

    question(
        "What number is the letter A in the alphabet?",
        answer("8"),
        answer("14"),
        answer("1", correct=True),
        answer("23"),
        incorrect="See [here](https://en.wikipedia.org/wiki/English_alphabet) and try again.",
        allow_retry=True,
    )

Everything here runs at document build time. Malformed declarations raise
``ConfigurationError`` immediately so a broken tutorial never gets served.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Mapping

from tutorial_quiz.constants.i18n_constants import (
    DEFAULT_QUIZ_CAPTION,
    DEFAULT_SUBMIT_BUTTON,
    DEFAULT_TRY_AGAIN_BUTTON,
    KEY_QUIZ_CAPTION,
    KEY_SUBMIT_BUTTON,
    KEY_TRY_AGAIN_BUTTON,
)
from tutorial_quiz.constants.quiz_constants import (
    DEFAULT_CHECKBOX_TRY_AGAIN_MESSAGE,
    DEFAULT_CORRECT_MESSAGE,
    DEFAULT_INCORRECT_MESSAGE,
    QUESTION_ID_HEX_LIMIT,
    QUESTION_ID_PREFIX,
    SEED_UPPER_BOUND,
    TYPE_ALIASES,
    TYPE_AUTO,
    TYPE_CHECKBOX,
    TYPE_RADIO,
)
from tutorial_quiz.core.errors import ConfigurationError
from tutorial_quiz.core.i18n import i18n_span
from tutorial_quiz.core.markdown_renderer import quiz_text
from tutorial_quiz.core.models import (
    Answer,
    ButtonLabels,
    GradingResult,
    GradingRule,
    Messages,
    QuestionDefinition,
    Quiz,
)
from tutorial_quiz.core.question_types import find_question_type

logger = logging.getLogger(__name__)

_MISSING: Any = object()


def random_id(prefix: str) -> str:
    return f"{prefix}_{random.randrange(1, QUESTION_ID_HEX_LIMIT):x}"


def random_question_id() -> str:
    return random_id(QUESTION_ID_PREFIX)


def random_seed() -> float:
    return random.uniform(0, SEED_UPPER_BOUND)


def answer(text: Any, correct: bool = False, message: Any = None, value: str | None = None) -> Answer:
    """Declare a literal answer option.

    Args:
        text: Option text (markdown or HTML).
        correct: Whether choosing/entering this answer is correct.
        message: Feedback shown when this answer is chosen.
        value: Identifier submitted by the input; defaults to ``text``.
    """
    if not isinstance(correct, bool):
        raise ConfigurationError("`correct` must be True or False.")
    if text is None:
        raise ConfigurationError("Answer text must not be None.")
    return Answer(
        value=str(text) if value is None else str(value),
        label=quiz_text(text),
        correct=correct,
        message=quiz_text(message),
    )


def answer_fn(fn: Callable[[Any], GradingResult | None], label: str | None = None) -> GradingRule:
    """Declare a function answer graded by ``fn``."""
    if not callable(fn):
        raise ConfigurationError("`answer_fn()` requires a callable.")
    return GradingRule(fn=fn, label=label or getattr(fn, "__name__", None))


def resolve_question_type(type_name: str, total_correct: int) -> str:
    if type_name == TYPE_AUTO:
        return TYPE_CHECKBOX if total_correct > 1 else TYPE_RADIO
    # unknown names are custom question types
    return TYPE_ALIASES.get(type_name, type_name)


def _split_answers(answers: tuple[Any, ...]) -> tuple[tuple[Answer, ...], tuple[GradingRule, ...]]:
    literal: list[Answer] = []
    rules: list[GradingRule] = []
    for position, item in enumerate(answers, start=1):
        if isinstance(item, Answer):
            literal.append(item)
        elif isinstance(item, GradingRule):
            rules.append(item)
        else:
            raise ConfigurationError(
                f"Argument {position} of question() must be created with answer() or "
                f"answer_fn(); got {type(item).__name__}."
            )
    return tuple(literal), tuple(rules)


def question(
    text: Any,
    *answers: Answer | GradingRule,
    type: str = TYPE_AUTO,
    correct: Any = DEFAULT_CORRECT_MESSAGE,
    incorrect: Any = DEFAULT_INCORRECT_MESSAGE,
    try_again: Any = None,
    message: Any = None,
    post_message: Any = None,
    loading: Any = None,
    submit_button: Any = None,
    try_again_button: Any = None,
    allow_retry: bool = False,
    random_answer_order: bool = False,
    options: Mapping[str, Any] | None = None,
    label: str | None = None,
) -> QuestionDefinition:
    """Declare a quiz question.

    Args:
        text: Question prompt (markdown or HTML).
        *answers: Values from ``answer()`` and ``answer_fn()``.
        type: ``"auto"``, ``"radio"``/``"single"``, ``"checkbox"``/``"multiple"``,
            ``"text"``, ``"numeric"`` or the name of a registered custom type.
            ``"auto"`` picks checkbox when more than one literal answer is correct.
        correct: Message for a correct submission.
        incorrect: Message for an incorrect submission when no retry is possible.
        try_again: Message for an incorrect submission when ``allow_retry`` is set.
            Checkbox questions default to a reminder to select every correct
            answer, other types reuse ``incorrect``.
        message: Extra message always shown after a submission.
        post_message: Extra message shown only once the question is done.
        loading: Placeholder shown while the question loads.
        submit_button: Submit button label; defaults to a translated label.
        try_again_button: Try-again button label; defaults to a translated label.
        allow_retry: Let the user retry after an incorrect submission.
        random_answer_order: Shuffle the displayed answers once per session.
        options: Extra data for custom question types.
        label: Stable label (document chunk label). A random id is used when missing.

    Raises:
        ConfigurationError: On misused answer arguments or when a correct
            answer is required but none was supplied.
    """
    literal, rules = _split_answers(answers)
    total_correct = sum(1 for a in literal if a.correct)

    if not isinstance(type, str):
        raise ConfigurationError("`type` must be a string.")
    question_type = resolve_question_type(type, total_correct)

    if try_again is None:
        try_again = DEFAULT_CHECKBOX_TRY_AGAIN_MESSAGE if question_type == TYPE_CHECKBOX else incorrect

    must_have_correct = question_type == TYPE_RADIO or not rules
    if must_have_correct and total_correct == 0:
        raise ConfigurationError("At least one correct answer must be supplied")

    question_id = label or random_question_id()

    submit_label = (
        i18n_span(KEY_SUBMIT_BUTTON, DEFAULT_SUBMIT_BUTTON)
        if submit_button is None
        else quiz_text(submit_button)
    )
    try_again_label = (
        i18n_span(KEY_TRY_AGAIN_BUTTON, DEFAULT_TRY_AGAIN_BUTTON)
        if try_again_button is None
        else quiz_text(try_again_button)
    )

    definition = QuestionDefinition(
        question_id=question_id,
        type=question_type,
        prompt=quiz_text(text),
        answers=literal,
        rules=rules,
        messages=Messages(
            correct=quiz_text(correct),
            incorrect=quiz_text(incorrect),
            try_again=quiz_text(try_again),
            message=quiz_text(message),
            post_message=quiz_text(post_message),
        ),
        button_labels=ButtonLabels(submit=submit_label, try_again=try_again_label),
        label=label,
        loading=quiz_text(loading),
        allow_retry=bool(allow_retry),
        random_answer_order=bool(random_answer_order),
        # overwritten for every user session
        seed=random_seed(),
        options=dict(options or {}),
    )
    registered = find_question_type(question_type)
    if registered is not None:
        registered.validate_definition(definition)
    logger.debug("Declared %s question '%s'", question_type, question_id)
    return definition


def quiz(*questions: QuestionDefinition, caption: Any = _MISSING) -> Quiz:
    """Group questions under a caption.

    Labelled questions get ``-<n>`` appended to their label so that several
    questions declared in one document chunk stay distinct.
    """
    index = 1
    resolved: list[QuestionDefinition] = []
    for item in questions:
        if not isinstance(item, QuestionDefinition):
            raise ConfigurationError(
                f"quiz() only accepts questions; got {type(item).__name__}."
            )
        if item.label is not None:
            item = item.relabel(f"{item.label}-{index}")
            index += 1
        resolved.append(item)

    if caption is _MISSING:
        caption_html = i18n_span(KEY_QUIZ_CAPTION, DEFAULT_QUIZ_CAPTION)
    elif caption is None:
        caption_html = None
    else:
        caption_html = quiz_text(caption)

    return Quiz(caption=caption_html, questions=tuple(resolved))
