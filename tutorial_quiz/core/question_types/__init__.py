"""Question types. Importing this package registers the built-in types."""

from .base import (
    QuestionType,
    check_grade,
    check_is_valid,
    find_question_type,
    get_question_type,
    register_question_type,
    registered_question_types,
    unregister_question_type,
)
from .checkbox import CheckboxQuestion
from .numeric import NumericQuestion
from .radio import RadioQuestion
from .text import TextQuestion

__all__ = [
    "QuestionType",
    "RadioQuestion",
    "CheckboxQuestion",
    "TextQuestion",
    "NumericQuestion",
    "check_grade",
    "check_is_valid",
    "find_question_type",
    "get_question_type",
    "register_question_type",
    "registered_question_types",
    "unregister_question_type",
]
