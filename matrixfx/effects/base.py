"""Base class for effects."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext


class BaseEffect(ABC):
    """Lifecycle template shared by every effect.

    Subclasses implement ``_start`` and ``_stop``. ``init`` and ``destroy``
    are idempotent: starting an active effect or stopping an inactive one
    does nothing, so no effect can be double-initialized or torn down twice.

    Attributes:
        name: Effect name as used in configuration (must be overridden).
        context: Shared capabilities (scheduler, page, surface, bus, rng).
        active: True between a successful init and the next destroy.
    """

    name: str = "base_effect"

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect instance."""
        self.context = context
        self.active = False

    def init(self) -> bool:
        """Start the effect.

        Returns:
            True if the effect is running after the call

        Raises:
            Exception: Whatever ``_start`` raised, after ``_stop`` has undone
                the partial setup
        """
        if self.active:
            logging.debug(f"[{self.name}] Already active, skipping init")
            return True
        try:
            started = self._start()
        except Exception:
            self._stop()
            raise
        self.active = bool(started)
        if self.active:
            logging.debug(f"[{self.name}] Initialized")
        return self.active

    def destroy(self) -> None:
        """Stop the effect and release everything it owns."""
        if not self.active:
            return
        self.active = False
        self._stop()
        logging.debug(f"[{self.name}] Destroyed")

    @abstractmethod
    def _start(self) -> bool:
        """Set up state and scheduled work. Return False if a target is missing."""

    @abstractmethod
    def _stop(self) -> None:
        """Cancel scheduled work and undo visual state."""
