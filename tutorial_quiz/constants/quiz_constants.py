"""Quiz-related constants shared across the core, UI and server layers."""

TYPE_AUTO: str = "auto"
TYPE_RADIO: str = "radio"
TYPE_CHECKBOX: str = "checkbox"
TYPE_TEXT: str = "text"
TYPE_NUMERIC: str = "numeric"

# Legacy names accepted by question(type=...)
TYPE_ALIASES: dict[str, str] = {
    "single": TYPE_RADIO,
    "radio": TYPE_RADIO,
    "multiple": TYPE_CHECKBOX,
    "checkbox": TYPE_CHECKBOX,
}

DEFAULT_CORRECT_MESSAGE: str = "Correct!"
DEFAULT_INCORRECT_MESSAGE: str = "Incorrect"
DEFAULT_CHECKBOX_TRY_AGAIN_MESSAGE: str = "Incorrect. Be sure to select every correct answer."

QUESTION_ID_PREFIX: str = "lnr_ques"
QUESTION_ID_HEX_LIMIT: int = 16**7
SEED_UPPER_BOUND: int = 2**31 - 1

NUMERIC_DEFAULT_TOLERANCE: float = 1.5e-8

EVENT_QUESTION_SUBMISSION: str = "question_submission"
EVENT_RESET_QUESTION_SUBMISSION: str = "reset_question_submission"
STATE_TYPE_QUESTION: str = "question"
