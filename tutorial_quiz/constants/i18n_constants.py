"""Translation keys and their English defaults."""

KEY_SUBMIT_BUTTON: str = "button.questionsubmit"
KEY_TRY_AGAIN_BUTTON: str = "button.questiontryagain"
KEY_QUIZ_CAPTION: str = "text.quiz"

DEFAULT_SUBMIT_BUTTON: str = "Submit Answer"
DEFAULT_TRY_AGAIN_BUTTON: str = "Try Again"
DEFAULT_QUIZ_CAPTION: str = "Quiz"

DEFAULT_LANGUAGE: str = "en"
