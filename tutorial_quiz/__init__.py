"""Interactive quiz questions for tutorial documents."""

from tutorial_quiz.core.errors import ConfigurationError, ExtensionContractViolation
from tutorial_quiz.core.grading import correct, incorrect, mark_as
from tutorial_quiz.core.html_tags import disable_all_tags, finalize_question
from tutorial_quiz.core.models import ButtonState, GradingResult, QuestionDefinition, Quiz
from tutorial_quiz.core.question_builder import answer, answer_fn, question, quiz
from tutorial_quiz.core.question_types import QuestionType, register_question_type
from tutorial_quiz.core.services.question_session import QuestionSession
from tutorial_quiz.core.services.tutorial_context import TutorialContext
from tutorial_quiz.core.tutorial_manager import TutorialManager

__version__ = "0.1.0"

__all__ = [
    "ButtonState",
    "ConfigurationError",
    "ExtensionContractViolation",
    "GradingResult",
    "QuestionDefinition",
    "QuestionSession",
    "QuestionType",
    "Quiz",
    "TutorialContext",
    "TutorialManager",
    "answer",
    "answer_fn",
    "correct",
    "disable_all_tags",
    "finalize_question",
    "incorrect",
    "mark_as",
    "question",
    "quiz",
    "register_question_type",
]
