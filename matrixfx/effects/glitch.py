"""Glitch pulse on the logo text."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from matrixfx.core.constants import CssClasses, EffectNames, Selectors
from matrixfx.effects.base import BaseEffect

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext
    from matrixfx.core.protocols import ElementProtocol


class GlitchEffect(BaseEffect):
    """Repeating timer that flashes a short-lived glitch state on the target.

    A trigger that arrives while a pulse is already showing is ignored; the
    pulse always ends ``duration_ms`` after it started.
    """

    name = EffectNames.GLITCH

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect."""
        super().__init__(context)
        self.element: ElementProtocol | None = None
        self.interval_handle: int | None = None
        self.pulse_handle: int | None = None

    @property
    def pulsing(self) -> bool:
        """True while a glitch pulse is showing."""
        return self.pulse_handle is not None

    def _start(self) -> bool:
        self.element = self.context.page.query(Selectors.GLITCH_TARGET)
        if self.element is None:
            logging.warning("THE text element not found")
            return False

        # Pseudo-elements render the duplicated text from this attribute
        self.element.set_attribute("data-text", self.element.text)
        self.context.page.body.add_class(CssClasses.GLITCH_ENABLED)

        self.interval_handle = self.context.scheduler.call_repeating(
            self.context.settings.glitch.interval_ms, self._on_interval
        )
        return True

    def _stop(self) -> None:
        self.context.scheduler.cancel(self.interval_handle)
        self.interval_handle = None
        self._end_pulse()
        self.context.page.body.remove_class(CssClasses.GLITCH_ENABLED)

    def _on_interval(self) -> None:
        if not self.context.constrained:
            self.trigger_glitch()

    def trigger_glitch(self) -> bool:
        """Start one glitch pulse.

        Returns:
            True if a pulse started, False if inactive or already pulsing
        """
        if not self.active or self.element is None or self.pulsing:
            return False

        self.element.add_class(CssClasses.AUTO_GLITCH)
        self.pulse_handle = self.context.scheduler.call_later(
            self.context.settings.glitch.duration_ms, self._end_pulse
        )
        return True

    def _end_pulse(self) -> None:
        self.context.scheduler.cancel(self.pulse_handle)
        self.pulse_handle = None
        if self.element is not None:
            self.element.remove_class(CssClasses.AUTO_GLITCH)
