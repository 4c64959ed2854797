"""Event bus carrying host events (pointer, viewport, page lifecycle) to effects."""

import logging
from collections.abc import Callable
from typing import Any


class EventBus:
    """Event bus for pub/sub."""

    def __init__(self) -> None:
        """Initialize event bus."""
        self.subscribers: dict[str, list[Callable[..., None]]] = {}

    def subscribe(self, event: str, callback: Callable[..., None]) -> None:
        """Subscribe to event."""
        if event not in self.subscribers:
            self.subscribers[event] = []
        self.subscribers[event].append(callback)
        logging.debug(f"Subscribed to event: {event}")

    def unsubscribe(self, event: str, callback: Callable[..., None]) -> bool:
        """Unsubscribe from event.

        Args:
            event: Event name
            callback: Callback to remove

        Returns:
            True if unsubscribed, False if not found
        """
        if event not in self.subscribers:
            return False

        try:
            self.subscribers[event].remove(callback)
            logging.debug(f"Unsubscribed from event: {event}")
            return True
        except ValueError:
            return False

    def subscriber_count(self, event: str) -> int:
        """Number of callbacks currently subscribed to event."""
        return len(self.subscribers.get(event, []))

    def emit(self, event: str, **data: Any) -> None:
        """Emit event.

        Note: Copies subscriber list before iteration so callbacks can
        subscribe/unsubscribe during emission. Not thread-safe.
        """
        if event not in self.subscribers:
            return

        for callback in list(self.subscribers[event]):
            try:
                callback(**data)
            except Exception as e:
                logging.error(f"Error in event handler for {event}: {e}")


class Events:
    """Standard event names.

    Host Events:
        POINTER_MOVED: Pointer moved over the page
            kwargs: x (float), y (float) - Pointer position in viewport units
        VIEWPORT_RESIZED: Viewport size changed
            kwargs: width (int), height (int) - New viewport size
        PAGE_READY: Page content is ready, fired once per load
            kwargs: None
    """

    POINTER_MOVED = "pointer_moved"  # kwargs: x (float), y (float)
    VIEWPORT_RESIZED = "viewport_resized"  # kwargs: width (int), height (int)
    PAGE_READY = "page_ready"  # kwargs: None
