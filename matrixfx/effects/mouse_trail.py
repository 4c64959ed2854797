"""Mouse trail: a chain of particles easing after the pointer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from matrixfx.core.constants import CssClasses, EffectNames
from matrixfx.core.event_bus import Events
from matrixfx.effects.base import BaseEffect

if TYPE_CHECKING:
    from matrixfx.core.controller import EffectContext
    from matrixfx.core.protocols import ElementProtocol


@dataclass
class ParticleState:
    """One particle of the trail and the marker element showing it."""

    index: int
    ease: float
    marker: ElementProtocol
    x: float = 0.0
    y: float = 0.0


def easing_coefficients(count: int, base_ease: float, ease_step: float) -> list[float]:
    """Per-particle easing, strictly decreasing with index."""
    return [base_ease - i * ease_step for i in range(count)]


class MouseTrailEffect(BaseEffect):
    """Trail follower.

    Particle 0 chases the pointer; every later particle chases the particle
    ahead of it, using that particle's position as already updated this frame.
    """

    name = EffectNames.MOUSE_TRAIL

    def __init__(self, context: EffectContext) -> None:
        """Initialize effect."""
        super().__init__(context)
        self.particles: list[ParticleState] = []
        self.pointer_x = 0.0
        self.pointer_y = 0.0
        self.frame_handle: int | None = None

    def _start(self) -> bool:
        if self.context.constrained:
            logging.info(f"[{self.name}] Disabled on constrained viewport")
            return False

        trail = self.context.settings.trail
        count = trail.particle_count
        body = self.context.page.body
        for i, ease in enumerate(easing_coefficients(count, trail.base_ease, trail.ease_step)):
            marker = self.context.page.create_element("div", CssClasses.TRAIL_PARTICLE)
            marker.style["opacity"] = f"{1 - (i / count) * 0.8:g}"
            marker.style["transform"] = f"scale({1 - (i / count) * 0.6:g})"
            body.append(marker)
            self.particles.append(ParticleState(index=i, ease=ease, marker=marker))

        self.context.event_bus.subscribe(Events.POINTER_MOVED, self._on_pointer_moved)
        self.frame_handle = self.context.scheduler.request_tick(self.tick)
        return True

    def _stop(self) -> None:
        self.context.event_bus.unsubscribe(Events.POINTER_MOVED, self._on_pointer_moved)
        self.context.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        for particle in self.particles:
            particle.marker.remove()
        self.particles = []

    def _on_pointer_moved(self, x: float, y: float, **_: Any) -> None:
        self.pointer_x = x
        self.pointer_y = y

    def tick(self) -> None:
        """Move every particle one easing step and schedule the next frame."""
        if not self.active:
            return

        prev_x, prev_y = self.pointer_x, self.pointer_y
        for particle in self.particles:
            particle.x += (prev_x - particle.x) * particle.ease
            particle.y += (prev_y - particle.y) * particle.ease

            particle.marker.style["left"] = f"{particle.x}px"
            particle.marker.style["top"] = f"{particle.y}px"

            prev_x, prev_y = particle.x, particle.y

        self.frame_handle = self.context.scheduler.request_tick(self.tick)
