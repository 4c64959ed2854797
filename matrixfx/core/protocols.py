"""Protocol definitions for the capabilities effects consume.

Using Protocol (structural subtyping) lets the engine run against the
in-memory page and Pillow surface, a real host, or test fakes without
any of them sharing a base class.
"""

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

# (r, g, b, alpha) with alpha in 0.0-1.0
Color = tuple[int, int, int, float]

# ============================================================================
# Scheduler Protocol
# ============================================================================


@runtime_checkable
class SchedulerProtocol(Protocol):
    """Protocol for frame requests and timers.

    Every method returns an integer handle accepted by ``cancel``.
    """

    def request_tick(self, callback: Callable[[], None]) -> int: ...
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int: ...
    def call_repeating(self, interval_ms: float, callback: Callable[[], None]) -> int: ...
    def cancel(self, handle: int | None) -> bool: ...


# ============================================================================
# Drawing Surface Protocol
# ============================================================================


@runtime_checkable
class DrawingSurfaceProtocol(Protocol):
    """Protocol for the 2D surface painted by the matrix rain."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def set_size(self, width: int, height: int) -> None: ...
    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None: ...
    def fill_text(self, text: str, x: float, y: float, color: Color, font_size: int) -> None: ...
    def clear(self) -> None: ...


# ============================================================================
# Page Protocols
# ============================================================================


class ElementProtocol(Protocol):
    """Protocol for a page element."""

    tag: str
    text: str
    children: list[Any]
    style: dict[str, str]

    def has_class(self, name: str) -> bool: ...
    def add_class(self, *names: str) -> None: ...
    def remove_class(self, *names: str) -> None: ...
    def get_attribute(self, name: str) -> str | None: ...
    def set_attribute(self, name: str, value: str) -> None: ...
    def has_attribute(self, name: str) -> bool: ...
    def append(self, child: Any) -> None: ...
    def clear_children(self) -> None: ...
    def query(self, selector: str) -> Any | None: ...
    def clone(self) -> Any: ...
    def remove(self) -> None: ...


class VisibilityObserverProtocol(Protocol):
    """Protocol for an active visibility subscription."""

    def disconnect(self) -> None: ...


@runtime_checkable
class PageProtocol(Protocol):
    """Protocol for element lookup, creation and viewport queries."""

    @property
    def body(self) -> ElementProtocol: ...

    @property
    def viewport_width(self) -> int: ...

    @property
    def viewport_height(self) -> int: ...

    def query(self, selector: str) -> ElementProtocol | None: ...
    def query_all(self, selector: str) -> list[ElementProtocol]: ...
    def create_element(self, tag: str, class_name: str = "") -> ElementProtocol: ...
    def observe_visibility(
        self,
        elements: Iterable[ElementProtocol],
        callback: Callable[[ElementProtocol], None],
        threshold: float = 0.5,
    ) -> VisibilityObserverProtocol: ...


# ============================================================================
# Event Bus Protocol
# ============================================================================


@runtime_checkable
class EventBusProtocol(Protocol):
    """Protocol for event bus operations."""

    def emit(self, event: str, **data: Any) -> None: ...
    def subscribe(self, event: str, callback: Callable[..., None]) -> None: ...
    def unsubscribe(self, event: str, callback: Callable[..., None]) -> bool: ...
