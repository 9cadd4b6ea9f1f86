"""Static metadata describing tutorial_quiz."""

APP_NAME = "tutorial_quiz"
APP_VERSION = "0.1.0"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "tutorial_quiz renders interactive quiz questions inside tutorial documents. "
    "Questions are declared once at document build time and evaluated per user session."
)
