"""Translation lookups for default button labels and captions.

Default labels are emitted as spans tagged with their translation key so the
browser can swap the language without a re-render. The catalog resolves the
same keys on the server when a concrete language is requested.
"""

from __future__ import annotations

from threading import Lock
from typing import Any

from tutorial_quiz.constants.i18n_constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_QUIZ_CAPTION,
    DEFAULT_SUBMIT_BUTTON,
    DEFAULT_TRY_AGAIN_BUTTON,
    KEY_QUIZ_CAPTION,
    KEY_SUBMIT_BUTTON,
    KEY_TRY_AGAIN_BUTTON,
)
from tutorial_quiz.core.html_tags import Tag, tag

_DEFAULT_CATALOG: dict[str, dict[str, str]] = {
    "en": {
        KEY_SUBMIT_BUTTON: DEFAULT_SUBMIT_BUTTON,
        KEY_TRY_AGAIN_BUTTON: DEFAULT_TRY_AGAIN_BUTTON,
        KEY_QUIZ_CAPTION: DEFAULT_QUIZ_CAPTION,
    },
    "fr": {
        KEY_SUBMIT_BUTTON: "Soumettre",
        KEY_TRY_AGAIN_BUTTON: "Réessayer",
        KEY_QUIZ_CAPTION: "Quiz",
    },
    "es": {
        KEY_SUBMIT_BUTTON: "Enviar respuesta",
        KEY_TRY_AGAIN_BUTTON: "Intentar de nuevo",
        KEY_QUIZ_CAPTION: "Cuestionario",
    },
}


class TranslationCatalog:
    """Resolves translation keys to text for a given language."""

    def __init__(
        self,
        translations: dict[str, dict[str, str]] | None = None,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._lock = Lock()
        self._translations = {
            lang: dict(entries)
            for lang, entries in (translations or _DEFAULT_CATALOG).items()
        }
        self._language = language

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        with self._lock:
            self._language = language

    def add_translations(self, language: str, entries: dict[str, str]) -> None:
        with self._lock:
            self._translations.setdefault(language, {}).update(entries)

    def translate(self, key: str, default: str, language: str | None = None) -> str:
        """Return the text for ``key`` or ``default`` when no translation exists."""
        with self._lock:
            lang = language or self._language
            return self._translations.get(lang, {}).get(key, default)


def i18n_span(key: str, default: str, catalog: TranslationCatalog | None = None) -> Tag:
    text = catalog.translate(key, default) if catalog is not None else default
    return tag("span", text, data_i18n_key=key)


def localize(label: Any, catalog: TranslationCatalog | None) -> Any:
    """Translate a label built by ``i18n_span``; author-supplied labels pass through."""
    if catalog is None or not isinstance(label, Tag):
        return label
    key = label.attrs.get("data-i18n-key")
    if not key:
        return label
    default = "".join(str(child) for child in label.children)
    return i18n_span(key, default, catalog)
