"""Import tutorial questions from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    LABEL: stable-label      (optional; a random id is used otherwise)
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    - [ ] Wrong answer
    - [x] Correct answer :: optional feedback for this answer
    TYPE: auto|radio|checkbox|text|numeric   (optional)
    ALLOW_RETRY: yes|no      (optional)
    RANDOM_ORDER: yes|no     (optional)
    CORRECT: message         (optional message overrides, also
    INCORRECT: message        TRY_AGAIN, MESSAGE and POST_MESSAGE)

Example:

    LABEL: addition
    Q: What is $2 + 2$?
    - [ ] 3
    - [x] 4
    - [ ] 5
    ALLOW_RETRY: yes

Every block is turned into a question with ``question()``, so malformed
questions fail with ``ConfigurationError`` while syntax problems fail with
``TutorialImportError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Any

from tutorial_quiz.core.models import QuestionDefinition
from tutorial_quiz.core.question_builder import answer, question


class TutorialImportError(Exception):
    """Raised when a tutorial question file cannot be parsed."""


@dataclass(slots=True)
class ImportedTutorial:
    """Container for imported tutorial metadata and questions."""

    source_path: Path
    questions: list[QuestionDefinition]


_ANSWER_LINE = re.compile(r"^-\s*\[(?P<mark>[ xX])\]\s*(?P<text>.+)$")
_MESSAGE_KEYS = {
    "CORRECT": "correct",
    "INCORRECT": "incorrect",
    "TRY_AGAIN": "try_again",
    "MESSAGE": "message",
    "POST_MESSAGE": "post_message",
}
_FLAG_KEYS = {"ALLOW_RETRY": "allow_retry", "RANDOM_ORDER": "random_answer_order"}
_TRUE_VALUES = {"yes", "true", "1", "on"}
_FALSE_VALUES = {"no", "false", "0", "off"}


def load_tutorial_from_file(file_path: Path) -> ImportedTutorial:
    text = file_path.read_text(encoding="utf-8")
    questions = parse_tutorial_text(text)
    if not questions:
        raise TutorialImportError("Tutorial file did not contain any questions.")
    return ImportedTutorial(source_path=file_path, questions=questions)


def parse_tutorial_text(text: str) -> list[QuestionDefinition]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_flag(key: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise TutorialImportError(f"{key} must be yes or no; got '{raw_value.strip()}'.")


def _parse_block(block: str) -> QuestionDefinition:
    question_lines: list[str] = []
    answers: list[Any] = []
    settings: dict[str, Any] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        answer_match = _ANSWER_LINE.match(line)
        if answer_match:
            answer_text, _, feedback = answer_match.group("text").partition(" :: ")
            answers.append(
                answer(
                    answer_text.strip(),
                    correct=answer_match.group("mark").lower() == "x",
                    message=feedback.strip() or None,
                )
            )
            current_section = None
            continue

        key, sep, raw_value = line.partition(":")
        key = key.strip().upper()
        if sep and key == "Q":
            question_lines = [raw_value.strip()]
            current_section = "Q"
            continue
        if sep and key == "LABEL":
            settings["label"] = raw_value.strip() or None
            current_section = None
            continue
        if sep and key == "TYPE":
            settings["type"] = raw_value.strip().lower() or "auto"
            current_section = None
            continue
        if sep and key in _FLAG_KEYS:
            settings[_FLAG_KEYS[key]] = _parse_flag(key, raw_value)
            current_section = None
            continue
        if sep and key in _MESSAGE_KEYS:
            settings[_MESSAGE_KEYS[key]] = raw_value.strip()
            current_section = None
            continue

        if current_section == "Q":
            question_lines.append(line)
        else:
            raise TutorialImportError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise TutorialImportError("Question text missing (Q: ...)")
    if not answers:
        raise TutorialImportError(f"Question '{question_text}' has no answers.")

    return question(question_text, *answers, **settings)
