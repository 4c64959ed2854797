"""Decode effect: scramble text to its real value when it scrolls into view."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from matrixfx.core.constants import SCRAMBLE_GLYPHS, CssClasses, EffectNames, Selectors
from matrixfx.effects.base import BaseEffect

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext
    from matrixfx.core.protocols import ElementProtocol, VisibilityObserverProtocol


def scramble_text(original: str, progress: float, rng: random.Random) -> str:
    """Reveal the leading share of original given by progress, scramble the rest.

    Character j shows the original when ``j < len(original) * progress``.
    """
    length = len(original)
    return "".join(
        original[j]
        if j < length * progress
        else SCRAMBLE_GLYPHS[math.floor(rng.random() * len(SCRAMBLE_GLYPHS))]
        for j in range(length)
    )


@dataclass(eq=False)
class ScrambleSequence:
    """Step-state machine decoding one target.

    Each ``step`` writes one iteration and schedules the next after
    ``step_ms``; after the last iteration's wait the exact original text is
    written and the target is marked decoded. ``cancel`` stops the sequence
    before its next write and puts the original text back.
    """

    effect: DecodeEffect
    element: ElementProtocol
    original_text: str
    iterations: int
    step_ms: float
    iteration: int = 0
    handle: int | None = None
    cancelled: bool = False

    @property
    def revealed(self) -> bool:
        return self.element.has_class(CssClasses.DECODED)

    def start(self) -> None:
        self.element.add_class(CssClasses.DECODING)
        self.step()

    def step(self) -> None:
        self.handle = None
        if self.cancelled or not self.effect.active:
            return

        if self.iteration > self.iterations:
            self._finish()
            return

        progress = self.iteration / self.iterations
        self.element.text = scramble_text(self.original_text, progress, self.effect.context.rng)
        self.iteration += 1
        self.handle = self.effect.context.scheduler.call_later(self.step_ms, self.step)

    def cancel(self) -> None:
        self.cancelled = True
        self.effect.context.scheduler.cancel(self.handle)
        self.handle = None
        self.element.text = self.original_text
        self.element.remove_class(CssClasses.DECODING)

    def _finish(self) -> None:
        self.element.text = self.original_text
        self.element.remove_class(CssClasses.DECODING)
        self.element.add_class(CssClasses.DECODED)
        self.effect._sequence_finished(self)


class DecodeEffect(BaseEffect):
    """Scramble reveal, one-shot per target."""

    name = EffectNames.DECODE

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect."""
        super().__init__(context)
        self.targets: list[ElementProtocol] = []
        self.observer: VisibilityObserverProtocol | None = None
        self.sequences: list[ScrambleSequence] = []

    def _start(self) -> bool:
        page = self.context.page
        targets = page.query_all(Selectors.DECODE_MARKED)
        if not targets:
            # Fall back to section titles and metrics
            targets = page.query_all(Selectors.DECODE_DEFAULTS)
            for element in targets:
                element.set_attribute("data-decode", "true")

        for element in targets:
            if not element.has_attribute("data-original"):
                element.set_attribute("data-original", element.text)

        if not targets:
            logging.info(f"[{self.name}] No decode targets on page")

        self.targets = targets
        self.observer = page.observe_visibility(
            targets, self._on_visible, threshold=self.context.settings.decode.threshold
        )
        return True

    def _stop(self) -> None:
        if self.observer is not None:
            self.observer.disconnect()
            self.observer = None
        for sequence in self.sequences:
            sequence.cancel()
        self.sequences = []

    def _on_visible(self, element: ElementProtocol) -> None:
        if element.has_class(CssClasses.DECODED) or self._in_flight(element):
            return
        self.decode(element)

    def _in_flight(self, element: ElementProtocol) -> bool:
        return any(s.element is element for s in self.sequences)

    def decode(self, element: ElementProtocol) -> ScrambleSequence:
        """Start decoding element."""
        settings = self.context.settings.decode
        original = element.get_attribute("data-original")
        if original is None:
            original = element.text
        sequence = ScrambleSequence(
            effect=self,
            element=element,
            original_text=original,
            iterations=settings.iterations,
            step_ms=settings.duration_ms / settings.iterations,
        )
        self.sequences.append(sequence)
        sequence.start()
        return sequence

    def _sequence_finished(self, sequence: ScrambleSequence) -> None:
        if sequence in self.sequences:
            self.sequences.remove(sequence)
