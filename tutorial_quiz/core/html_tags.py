"""Small HTML tag tree used to build question fragments.

Fragments are kept as a tree (rather than strings) until the last moment so
that whole input groups can be disabled or finalized after a question type
has rendered them. Escaping is delegated to markupsafe: plain strings are
escaped, anything implementing ``__html__`` (``Markup``, ``Tag``) is trusted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Callable, Iterable

from markupsafe import Markup, escape

VOID_ELEMENTS = frozenset({"br", "hr", "img", "input", "link", "meta"})


@dataclass(slots=True)
class Tag:
    """An HTML element with attributes and children."""

    name: str
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[Any] = field(default_factory=list)

    def copy(self) -> Tag:
        return Tag(self.name, dict(self.attrs), list(self.children))

    @property
    def classes(self) -> list[str]:
        return str(self.attrs.get("class") or "").split()

    def has_class(self, class_name: str) -> bool:
        return class_name in self.classes

    def add_class(self, *class_names: str) -> Tag:
        classes = self.classes
        for class_name in class_names:
            if class_name and class_name not in classes:
                classes.append(class_name)
        self.attrs["class"] = " ".join(classes)
        return self

    def remove_class(self, class_name: str) -> Tag:
        classes = [c for c in self.classes if c != class_name]
        if classes:
            self.attrs["class"] = " ".join(classes)
        else:
            self.attrs.pop("class", None)
        return self

    def append(self, *children: Any) -> Tag:
        self.children.extend(children)
        return self

    def render(self) -> Markup:
        attrs = _render_attrs(self.attrs)
        opening = f"<{self.name}{attrs}>"
        if self.name in VOID_ELEMENTS:
            return Markup(opening)
        inner = render_node(self.children)
        return Markup(f"{opening}{inner}</{self.name}>")

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())


class TagList(list):
    """A sibling sequence of nodes rendered back to back."""

    def render(self) -> Markup:
        return render_node(list(self))

    def __html__(self) -> str:
        return str(self.render())


def tag(tag_name: str, /, *children: Any, **attrs: Any) -> Tag:
    """Build a tag; ``class_`` maps to ``class`` and ``data_x`` to ``data-x``.

    ``tag_name`` is positional-only so ``name=`` stays free for the HTML attribute.
    """
    return Tag(tag_name, _normalize_attrs(attrs), [c for c in children if c is not None])


def tag_list(*children: Any) -> TagList:
    return TagList(c for c in children if c is not None)


def render_node(node: Any) -> Markup:
    if node is None or node is False:
        return Markup("")
    if isinstance(node, Tag):
        return node.render()
    if isinstance(node, (list, tuple)):
        return Markup("").join(render_node(child) for child in node)
    if hasattr(node, "__html__"):
        return Markup(node.__html__())
    return escape(str(node))


def _normalize_attrs(attrs: dict[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in attrs.items():
        name = key.rstrip("_").replace("_", "-")
        normalized[name] = value
    return normalized


def _render_attrs(attrs: dict[str, Any]) -> str:
    parts: list[str] = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(str(value))}"')
    return "".join(parts)


# --- Selector-driven mutation ---------------------------------------------


_SIMPLE_SELECTOR = re.compile(
    r"^(?P<element>[A-Za-z][A-Za-z0-9-]*|\*)?(?:#(?P<id>[A-Za-z0-9_-]+))?(?P<classes>(?:\.[A-Za-z0-9_-]+)*)$"
)


@dataclass(frozen=True, slots=True)
class SimpleSelector:
    """One compound selector: ``element#id.class`` or ``*``."""

    element: str | None = None
    id: str | None = None
    classes: tuple[str, ...] = ()
    match_everything: bool = False

    def matches(self, ele: Tag) -> bool:
        if self.match_everything:
            return True
        if self.element is not None and ele.name != self.element:
            return False
        if self.id is not None and str(ele.attrs.get("id") or "") != self.id:
            return False
        if self.classes and not set(self.classes).issubset(ele.classes):
            return False
        return True


def parse_selector(selector: str) -> tuple[SimpleSelector, ...]:
    """Parse a descendant selector such as ``"div.answers input"``."""
    parsed: list[SimpleSelector] = []
    for token in selector.split():
        if token == "*":
            parsed.append(SimpleSelector(match_everything=True))
            continue
        match = _SIMPLE_SELECTOR.match(token)
        if match is None:
            raise ValueError(f"Unsupported selector: '{token}'")
        classes = tuple(c for c in match.group("classes").split(".") if c)
        element = match.group("element")
        parsed.append(
            SimpleSelector(
                element=None if element in (None, "*") else element,
                id=match.group("id"),
                classes=classes,
            )
        )
    if not parsed:
        raise ValueError("Selector must not be empty.")
    return tuple(parsed)


def mutate_tags(
    ele: Any,
    selector: str | Iterable[SimpleSelector],
    fn: Callable[[Tag], Tag],
) -> Any:
    """Return a copy of ``ele`` with ``fn`` applied to every tag matching ``selector``.

    Text nodes pass through untouched. A ``*`` selector applies ``fn`` to every
    tag in the tree.
    """
    selectors = parse_selector(selector) if isinstance(selector, str) else tuple(selector)

    if isinstance(ele, TagList):
        return TagList(mutate_tags(child, selectors, fn) for child in ele)
    if isinstance(ele, (list, tuple)):
        return type(ele)(mutate_tags(child, selectors, fn) for child in ele)
    if not isinstance(ele, Tag):
        return ele

    ele = ele.copy()
    current = selectors[0]
    is_match = current.matches(ele)
    remaining = selectors
    if is_match and not current.match_everything:
        remaining = selectors[1:]

    if remaining and ele.children:
        ele.children = [mutate_tags(child, remaining, fn) for child in ele.children]

    if is_match and (not remaining or current.match_everything):
        ele = fn(ele)
    return ele


def disable_element(ele: Tag) -> Tag:
    ele.add_class("disabled")
    ele.attrs["disabled"] = True
    return ele


def disable_tags(ele: Any, selector: str) -> Any:
    return mutate_tags(ele, selector, disable_element)


def disable_all_tags(ele: Any) -> Any:
    """Disable every tag so the user can no longer interact with it."""
    return mutate_tags(ele, "*", disable_element)


def finalize_question(ele: Any) -> Any:
    """Disable all tags and mark the top-level tags with ``question-final``."""
    ele = disable_all_tags(ele)
    if isinstance(ele, (TagList, list, tuple)):
        return TagList(
            child.add_class("question-final") if isinstance(child, Tag) else child
            for child in ele
        )
    if isinstance(ele, Tag):
        ele.add_class("question-final")
    return ele
