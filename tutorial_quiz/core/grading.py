"""Grading results and evaluation of function answers."""

from __future__ import annotations

from typing import Any, Iterable

from tutorial_quiz.core.errors import ExtensionContractViolation
from tutorial_quiz.core.models import GradingResult, GradingRule


def _as_messages(messages: Any) -> tuple[Any, ...]:
    if messages is None:
        return ()
    if isinstance(messages, (list, tuple)):
        return tuple(m for m in messages if m is not None)
    return (messages,)


def mark_as(correct: bool, messages: Any = None) -> GradingResult:
    """Build a grading result; ``messages`` may be a single message or a sequence."""
    if not isinstance(correct, bool):
        raise TypeError("`correct` must be a bool.")
    return GradingResult(correct=correct, messages=_as_messages(messages))


def correct(messages: Any = None) -> GradingResult:
    return mark_as(True, messages)


def incorrect(messages: Any = None) -> GradingResult:
    return mark_as(False, messages)


def ensure_grading_result(result: Any, source: str) -> GradingResult:
    if not isinstance(result, GradingResult):
        raise ExtensionContractViolation(
            f"{source} must return a result from `correct`, `incorrect`, or `mark_as`; "
            f"got {type(result).__name__}."
        )
    return result


def evaluate_rules(rules: Iterable[GradingRule], value: Any) -> GradingResult | None:
    """Run function answers in order; the first non-``None`` result wins."""
    for rule in rules:
        result = rule.fn(value)
        if result is None:
            continue
        name = rule.label or getattr(rule.fn, "__name__", "answer_fn")
        return ensure_grading_result(result, f"Function answer '{name}'")
    return None
