"""Typing animation for the hero subtitle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from matrixfx.core.constants import CssClasses, EffectNames, Selectors
from matrixfx.effects.base import BaseEffect

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext
    from matrixfx.core.protocols import ElementProtocol


class TypingEffect(BaseEffect):
    """Reveal the subtitle one character at a time behind a blinking cursor.

    Steps run on the scheduler: step ``i`` shows ``text[:i]`` and waits
    ``speed_ms`` plus up to ``jitter_ms`` of random delay. Liveness is checked
    before every step, so a destroyed effect never writes again.
    """

    name = EffectNames.TYPING

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect."""
        super().__init__(context)
        self.original_text = ""
        self.element: ElementProtocol | None = None
        self.cursor: ElementProtocol | None = None
        self.position = 0
        self.handle: int | None = None
        self.complete = False

    def _start(self) -> bool:
        subtitle = self.context.page.query(Selectors.TYPING_CONTAINER)
        if subtitle is None:
            logging.warning("Hero subtitle not found")
            return False

        # Only the subtitle's own text, not the prompt arrow. Captured once so a
        # re-init after destroy types the same text into the rebuilt container.
        captured = subtitle.get_attribute("data-typing-text")
        if captured is None:
            captured = subtitle.text.strip() or self.context.settings.typing.default_text
            subtitle.set_attribute("data-typing-text", captured)
        self.original_text = captured
        self._setup_typing_element(subtitle)

        self.position = 0
        self.complete = False
        self.handle = self.context.scheduler.call_later(
            self.context.settings.typing.start_delay_ms, self._step
        )
        return True

    def _stop(self) -> None:
        self.context.scheduler.cancel(self.handle)
        self.handle = None

    def _setup_typing_element(self, parent: ElementProtocol) -> None:
        page = self.context.page
        prompt = parent.query(Selectors.TYPING_PREFIX)

        # Clear and rebuild
        parent.clear_children()
        parent.text = ""
        if prompt is not None:
            parent.append(prompt.clone())

        self.element = page.create_element("span", CssClasses.TYPED_TEXT)
        parent.append(self.element)

        self.cursor = page.create_element("span", CssClasses.TYPING_CURSOR)
        parent.append(self.cursor)

    def _step(self) -> None:
        self.handle = None
        if not self.active or self.element is None:
            return

        if self.position > len(self.original_text):
            # Cursor keeps blinking after complete
            self.element.add_class(CssClasses.TYPING_COMPLETE)
            self.complete = True
            return

        self.element.text = self.original_text[: self.position]
        self.position += 1

        typing = self.context.settings.typing
        delay = typing.speed_ms + self.context.rng.random() * typing.jitter_ms
        self.handle = self.context.scheduler.call_later(delay, self._step)
