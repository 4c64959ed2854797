"""Frame and timer scheduling.

Two implementations of ``SchedulerProtocol``:

- ``ManualScheduler``: a virtual clock advanced explicitly. Used by tests and
  headless rendering, where steps must be driven deterministically.
- ``QtScheduler``: backed by ``QTimer`` so callbacks run on the Qt event loop.

Frame requests are one-shot, like a browser animation frame: a continuous
effect re-requests its next tick from inside the current one and keeps the
latest handle so it can cancel it.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass

from PySide6.QtCore import QTimer

from matrixfx.core.constants import FRAME_INTERVAL_MS


def _dispatch(callback: Callable[[], None]) -> None:
    """Run a scheduled callback, logging instead of propagating failures."""
    try:
        callback()
    except Exception as e:
        logging.error(f"Error in scheduled callback {callback!r}: {e}")


@dataclass
class _Timer:
    due: float
    callback: Callable[[], None]
    interval: float | None = None


class ManualScheduler:
    """Scheduler driven by an explicit virtual clock.

    ``run_frames`` runs pending frame callbacks, ``advance`` moves the clock
    and fires due timers in due-time order.
    """

    def __init__(self) -> None:
        """Initialize scheduler at time 0."""
        self.now: float = 0.0
        self._ids = itertools.count(1)
        self._frames: dict[int, Callable[[], None]] = {}
        self._timers: dict[int, _Timer] = {}

    @property
    def pending_frames(self) -> int:
        """Number of outstanding frame requests."""
        return len(self._frames)

    @property
    def pending_timers(self) -> int:
        """Number of outstanding timers (one-shot and repeating)."""
        return len(self._timers)

    @property
    def repeating_timers(self) -> int:
        """Number of outstanding repeating timers."""
        return sum(1 for t in self._timers.values() if t.interval is not None)

    def request_tick(self, callback: Callable[[], None]) -> int:
        """Run callback on the next frame."""
        handle = next(self._ids)
        self._frames[handle] = callback
        return handle

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        """Run callback once after delay_ms of virtual time."""
        handle = next(self._ids)
        self._timers[handle] = _Timer(due=self.now + max(0.0, delay_ms), callback=callback)
        return handle

    def call_repeating(self, interval_ms: float, callback: Callable[[], None]) -> int:
        """Run callback every interval_ms of virtual time until cancelled."""
        if interval_ms <= 0:
            raise ValueError(f"Repeating interval must be positive, got {interval_ms}")
        handle = next(self._ids)
        self._timers[handle] = _Timer(
            due=self.now + interval_ms, callback=callback, interval=interval_ms
        )
        return handle

    def cancel(self, handle: int | None) -> bool:
        """Cancel a frame request or timer.

        Returns:
            True if something was cancelled, False if handle was unknown
        """
        if handle is None:
            return False
        if self._frames.pop(handle, None) is not None:
            return True
        return self._timers.pop(handle, None) is not None

    def run_frames(self, count: int = 1) -> None:
        """Run count frames.

        Requests made while a frame runs are deferred to the next frame.
        """
        for _ in range(count):
            for handle in list(self._frames):
                callback = self._frames.pop(handle, None)
                if callback is not None:
                    _dispatch(callback)

    def advance(self, ms: float) -> None:
        """Move the clock forward by ms, firing every timer that comes due."""
        target = self.now + ms
        while True:
            due = [(t.due, h) for h, t in self._timers.items() if t.due <= target]
            if not due:
                break
            _, handle = min(due)
            timer = self._timers[handle]
            self.now = timer.due
            if timer.interval is None:
                del self._timers[handle]
            else:
                timer.due += timer.interval
            _dispatch(timer.callback)
        self.now = target


class QtScheduler:
    """Scheduler backed by QTimer.

    Requires a running QCoreApplication (or QApplication) event loop.
    """

    def __init__(self, frame_interval_ms: int = FRAME_INTERVAL_MS) -> None:
        """Initialize scheduler.

        Args:
            frame_interval_ms: Delay used to approximate the next paint frame
        """
        self.frame_interval_ms = frame_interval_ms
        self._ids = itertools.count(1)
        self._timers: dict[int, QTimer] = {}

    @property
    def pending(self) -> int:
        """Number of outstanding frame requests and timers."""
        return len(self._timers)

    def request_tick(self, callback: Callable[[], None]) -> int:
        """Run callback on the next frame."""
        return self._start(self.frame_interval_ms, callback, single_shot=True)

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        """Run callback once after delay_ms."""
        return self._start(delay_ms, callback, single_shot=True)

    def call_repeating(self, interval_ms: float, callback: Callable[[], None]) -> int:
        """Run callback every interval_ms until cancelled."""
        if interval_ms <= 0:
            raise ValueError(f"Repeating interval must be positive, got {interval_ms}")
        return self._start(interval_ms, callback, single_shot=False)

    def cancel(self, handle: int | None) -> bool:
        """Stop and discard a timer."""
        if handle is None:
            return False
        timer = self._timers.pop(handle, None)
        if timer is None:
            return False
        timer.stop()
        timer.deleteLater()
        return True

    def _start(self, delay_ms: float, callback: Callable[[], None], single_shot: bool) -> int:
        handle = next(self._ids)
        timer = QTimer()
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, int(delay_ms)))
        timer.timeout.connect(lambda: self._fire(handle, callback))
        self._timers[handle] = timer
        timer.start()
        return handle

    def _fire(self, handle: int, callback: Callable[[], None]) -> None:
        timer = self._timers.get(handle)
        if timer is None:
            return
        if timer.isSingleShot():
            del self._timers[handle]
            timer.deleteLater()
        _dispatch(callback)
