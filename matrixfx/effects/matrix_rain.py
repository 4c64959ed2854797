"""Matrix rain: falling glyph columns painted onto the drawing surface."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from matrixfx.core.constants import (
    RAIN_ACCENT_DARK,
    RAIN_ACCENT_LIGHT,
    RAIN_BACKGROUND_DARK,
    RAIN_BACKGROUND_LIGHT,
    RAIN_GLYPHS,
    RAIN_OPACITY_MIN,
    RAIN_OPACITY_RANGE,
    RAIN_SPEED_MIN,
    RAIN_SPEED_RANGE,
    CssClasses,
    EffectNames,
)
from matrixfx.core.event_bus import Events
from matrixfx.effects.base import BaseEffect

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext
    from matrixfx.core.protocols import DrawingSurfaceProtocol


@dataclass
class ColumnState:
    """State of one falling column."""

    y: float
    speed: float
    opacity: float


class MatrixRainEffect(BaseEffect):
    """Cascade renderer.

    Each frame fades the surface with a translucent background fill, draws one
    random glyph per column, and moves every column down by its own speed.
    Columns that have fallen past the bottom restart at the top only when a
    low-probability check passes, so restarts are staggered.
    """

    name = EffectNames.MATRIX_RAIN

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect."""
        super().__init__(context)
        self.surface: DrawingSurfaceProtocol | None = None
        self.columns: list[ColumnState] = []
        self.frame_handle: int | None = None
        self.font_size = context.settings.rain.font_size

    def _start(self) -> bool:
        self.surface = self.context.surface
        if self.surface is None:
            logging.warning("Matrix canvas not found")
            return False

        self.context.page.body.add_class(CssClasses.MATRIX_ENHANCED)
        self.context.event_bus.subscribe(Events.VIEWPORT_RESIZED, self._on_viewport_resized)
        self.resize()
        self.frame_handle = self.context.scheduler.request_tick(self.tick)
        return True

    def _stop(self) -> None:
        self.context.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.context.event_bus.unsubscribe(Events.VIEWPORT_RESIZED, self._on_viewport_resized)
        self.context.page.body.remove_class(CssClasses.MATRIX_ENHANCED)
        self.columns = []

    def _on_viewport_resized(self, width: int, height: int, **_: Any) -> None:
        if not self.active or self.surface is None:
            return
        self.surface.set_size(width, height)
        self.resize()

    def resize(self) -> None:
        """Rebuild columns from the surface's current size."""
        if self.surface is None:
            return
        rng = self.context.rng
        height = self.surface.height
        column_count = math.floor(self.surface.width / self.font_size)
        self.columns = [
            ColumnState(
                y=rng.random() * height,
                speed=RAIN_SPEED_MIN + rng.random() * RAIN_SPEED_RANGE,
                opacity=RAIN_OPACITY_MIN + rng.random() * RAIN_OPACITY_RANGE,
            )
            for _ in range(column_count)
        ]
        logging.debug(f"[{self.name}] {column_count} columns for {self.surface.width}x{height}")

    def tick(self) -> None:
        """Paint one frame and schedule the next."""
        if not self.active or self.surface is None:
            return

        rain = self.context.settings.rain
        rng = self.context.rng
        light = self.context.page.body.has_class(CssClasses.LIGHT_MODE)
        background = RAIN_BACKGROUND_LIGHT if light else RAIN_BACKGROUND_DARK
        accent = RAIN_ACCENT_LIGHT if light else RAIN_ACCENT_DARK
        width, height = self.surface.width, self.surface.height

        # Trail effect
        self.surface.fill_rect(0, 0, width, height, (*background, rain.trail_alpha))

        for i, column in enumerate(self.columns):
            glyph = RAIN_GLYPHS[math.floor(rng.random() * len(RAIN_GLYPHS))]
            self.surface.fill_text(
                glyph, i * self.font_size, column.y, (*accent, column.opacity), self.font_size
            )

            column.y += column.speed * self.font_size * rain.speed_factor

            if column.y > height and rng.random() > 1 - rain.reset_chance:
                column.y = 0
                column.speed = RAIN_SPEED_MIN + rng.random() * RAIN_SPEED_RANGE
                column.opacity = RAIN_OPACITY_MIN + rng.random() * RAIN_OPACITY_RANGE

        self.frame_handle = self.context.scheduler.request_tick(self.tick)
