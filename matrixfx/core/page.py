"""In-memory page model.

A small DOM-like tree implementing ``PageProtocol``: elements with class
lists, attributes and inline styles, selector lookup, and visibility
observers that the host drives with ``Page.set_visibility``.

Supported selectors: ``tag``, ``.class``, ``[attribute]``, compound forms of
those (``span.typed-text``), and comma-separated lists of them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator

from matrixfx.core.event_bus import EventBus, Events

_SIMPLE_SELECTOR = re.compile(r"^(?P<tag>[a-zA-Z][\w-]*)?(?P<rest>(?:\.[\w-]+|\[[\w-]+\])*)$")
_SELECTOR_PART = re.compile(r"\.([\w-]+)|\[([\w-]+)\]")


class PageElement:
    """A page element."""

    def __init__(
        self,
        tag: str = "div",
        class_name: str = "",
        text: str = "",
        attributes: dict[str, str] | None = None,
    ) -> None:
        """Initialize element.

        Args:
            tag: Tag name
            class_name: Space-separated class list
            text: Element's own text
            attributes: Initial attributes
        """
        self.tag = tag.lower()
        self.text = text
        self.classes: list[str] = class_name.split()
        self.attributes: dict[str, str] = dict(attributes or {})
        self.style: dict[str, str] = {}
        self.children: list[PageElement] = []
        self.parent: PageElement | None = None

    def __repr__(self) -> str:
        classes = "".join(f".{c}" for c in self.classes)
        return f"<{self.tag}{classes}>"

    @property
    def class_name(self) -> str:
        """Space-separated class list."""
        return " ".join(self.classes)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, *names: str) -> None:
        for name in names:
            if name not in self.classes:
                self.classes.append(name)

    def remove_class(self, *names: str) -> None:
        self.classes = [c for c in self.classes if c not in names]

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def append(self, child: PageElement) -> None:
        """Append child, detaching it from any previous parent."""
        if child.parent is not None:
            child.remove()
        child.parent = self
        self.children.append(child)

    def clear_children(self) -> None:
        for child in self.children:
            child.parent = None
        self.children = []

    def remove(self) -> None:
        """Detach element from its parent."""
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def clone(self) -> PageElement:
        """Deep copy of this element and its subtree, detached."""
        copy = PageElement(self.tag, self.class_name, self.text, self.attributes)
        copy.style = dict(self.style)
        for child in self.children:
            copy.append(child.clone())
        return copy

    def iter_descendants(self) -> Iterator[PageElement]:
        """Depth-first iteration over descendants in document order."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def matches(self, selector: str) -> bool:
        """Check element against a selector list."""
        return any(_matches_simple(self, part.strip()) for part in selector.split(","))

    def query(self, selector: str) -> PageElement | None:
        """First descendant matching selector, or None."""
        return next((el for el in self.iter_descendants() if el.matches(selector)), None)

    def query_all(self, selector: str) -> list[PageElement]:
        """All descendants matching selector, in document order."""
        return [el for el in self.iter_descendants() if el.matches(selector)]


def _matches_simple(element: PageElement, selector: str) -> bool:
    match = _SIMPLE_SELECTOR.match(selector)
    if not match or not selector:
        logging.debug(f"Unsupported selector: {selector!r}")
        return False
    tag = match.group("tag")
    if tag and element.tag != tag.lower():
        return False
    for class_name, attribute in _SELECTOR_PART.findall(match.group("rest")):
        if class_name and not element.has_class(class_name):
            return False
        if attribute and not element.has_attribute(attribute):
            return False
    return True


class VisibilityObserver:
    """Visibility subscription over a set of elements."""

    def __init__(
        self,
        page: Page,
        callback: Callable[[PageElement], None],
        threshold: float,
    ) -> None:
        self._page = page
        self._callback = callback
        self.threshold = threshold
        self.targets: list[PageElement] = []
        self.connected = True

    def observe(self, element: PageElement) -> None:
        if not any(t is element for t in self.targets):
            self.targets.append(element)

    def disconnect(self) -> None:
        """Stop observing all targets."""
        if not self.connected:
            return
        self.connected = False
        self.targets = []
        self._page._observers.remove(self)

    def _notify(self, element: PageElement, ratio: float) -> None:
        if self.connected and ratio >= self.threshold and any(t is element for t in self.targets):
            self._callback(element)


class Page:
    """In-memory page with a body element and a viewport."""

    def __init__(
        self,
        viewport_width: int = 1280,
        viewport_height: int = 800,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize page.

        Args:
            viewport_width: Initial viewport width
            viewport_height: Initial viewport height
            event_bus: Bus receiving VIEWPORT_RESIZED on resize
        """
        self._body = PageElement("body")
        self._viewport_width = viewport_width
        self._viewport_height = viewport_height
        self._event_bus = event_bus
        self._observers: list[VisibilityObserver] = []

    @property
    def body(self) -> PageElement:
        return self._body

    @property
    def viewport_width(self) -> int:
        return self._viewport_width

    @property
    def viewport_height(self) -> int:
        return self._viewport_height

    @property
    def observer_count(self) -> int:
        """Number of connected visibility observers."""
        return len(self._observers)

    def query(self, selector: str) -> PageElement | None:
        return self._body.query(selector)

    def query_all(self, selector: str) -> list[PageElement]:
        return self._body.query_all(selector)

    def create_element(self, tag: str, class_name: str = "") -> PageElement:
        """Create a detached element."""
        return PageElement(tag, class_name)

    def observe_visibility(
        self,
        elements: Iterable[PageElement],
        callback: Callable[[PageElement], None],
        threshold: float = 0.5,
    ) -> VisibilityObserver:
        """Call callback whenever an observed element becomes visible past threshold."""
        observer = VisibilityObserver(self, callback, threshold)
        for element in elements:
            observer.observe(element)
        self._observers.append(observer)
        return observer

    def set_visibility(self, element: PageElement, ratio: float) -> None:
        """Report that ratio (0.0-1.0) of element is now inside the viewport."""
        for observer in list(self._observers):
            observer._notify(element, ratio)

    def resize(self, width: int, height: int) -> None:
        """Change the viewport size and notify subscribers."""
        self._viewport_width = width
        self._viewport_height = height
        if self._event_bus is not None:
            self._event_bus.emit(Events.VIEWPORT_RESIZED, width=width, height=height)
