"""Markdown rendering helpers for question text, answers and messages.

Architecture note:
    Every free-text field of a question is converted to HTML exactly once, when
    the question is declared. Math is left untouched in the output and typeset
    by MathJax in the browser, which keeps the server free of any math engine.
    Text that is already HTML (anything implementing ``__html__``, such as
    ``markupsafe.Markup`` or a tag) passes through unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from markdown_it import MarkdownIt
from markupsafe import Markup

MATHJAX_TRIGGER_SCRIPT = Markup(
    "<script>if (window.Tutorial && Tutorial.triggerMathJax) Tutorial.triggerMathJax()</script>"
)


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts author markdown into HTML fragments."""

    enable_html: bool = True
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""
        return self._markdown.render(markdown_text)

    def render_inline(self, markdown_text: str) -> Markup:
        """Render markdown, dropping the wrapper when the result is a single paragraph."""
        html = self.render(markdown_text)
        if html.count("</p>") == 1:
            stripped = html.rstrip("\n")
            if stripped.startswith("<p>") and stripped.endswith("</p>"):
                html = stripped[len("<p>"):-len("</p>")]
        return Markup(html)


renderer = MarkdownRenderer()
# Shared instance so MarkdownIt is built once. Rendering is read-only, so the
# same instance is reused by the document build and the session host.


def is_html(value: Any) -> bool:
    return hasattr(value, "__html__")


def quiz_text(text: Any, markdown: MarkdownRenderer | None = None) -> Markup | Any | None:
    """Render a question text field to HTML.

    ``None`` stays ``None``; HTML values are returned unchanged; anything else
    is formatted as a string and rendered as markdown.
    """
    if text is None:
        return None
    if is_html(text):
        return text
    if not isinstance(text, str):
        text = format(text)
    return (markdown or renderer).render_inline(text)
