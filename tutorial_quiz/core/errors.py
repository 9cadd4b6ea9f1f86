"""Exceptions raised by the quiz core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a question or answer declaration is malformed."""


class ExtensionContractViolation(TypeError):
    """Raised when a custom question type or grading rule breaks its contract."""
