"""Effect controller: turns effects on and off from a flag configuration."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from matrixfx.core.config import EFFECT_ATTRIBUTES, EffectFlags, MatrixFxConfig
from matrixfx.core.constants import CONSTRAINED_DISABLED, RUNTIME_TOGGLEABLE, EffectNames
from matrixfx.core.event_bus import Events
from matrixfx.core.protocols import (
    DrawingSurfaceProtocol,
    EventBusProtocol,
    PageProtocol,
    SchedulerProtocol,
)
from matrixfx.effects import EFFECT_REGISTRY, BaseEffect, GlitchEffect, ScanlinesEffect


class ControllerPhase(Enum):
    """Controller lifecycle phases."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DESTROYED = "destroyed"


class EffectContext:
    """Context provided to effects.

    Provides access to the injected capabilities:
        - scheduler: frame requests and timers
        - page: element lookup/creation and visibility observation
        - event_bus: pointer, viewport and page lifecycle events
        - surface: drawing surface for the matrix rain (optional)
        - rng: seedable random source for every random choice
        - settings: tuning configuration
        - constrained: result of the constrained-device heuristic
    """

    def __init__(
        self,
        scheduler: SchedulerProtocol,
        page: PageProtocol,
        event_bus: EventBusProtocol,
        surface: DrawingSurfaceProtocol | None = None,
        rng: random.Random | None = None,
        settings: MatrixFxConfig | None = None,
    ) -> None:
        """Initialize context."""
        self.scheduler = scheduler
        self.page = page
        self.event_bus = event_bus
        self.surface = surface
        self.rng = rng if rng is not None else random.Random()
        self.settings = settings if settings is not None else MatrixFxConfig()
        self.constrained = False


class EffectController:
    """Manage effects lifecycle.

    ``init`` starts the enabled subset once; repeated calls warn and do
    nothing. ``destroy`` stops every effect whatever its flag, after which
    ``init`` may be called again.
    """

    def __init__(self, context: EffectContext) -> None:
        """Initialize controller with one instance of every effect."""
        self.context = context
        self.config = EffectFlags()
        self.phase = ControllerPhase.UNINITIALIZED
        self.effects: dict[str, BaseEffect] = {
            name: effect_cls(context) for name, effect_cls in EFFECT_REGISTRY.items()
        }

    @property
    def is_initialized(self) -> bool:
        return self.phase == ControllerPhase.INITIALIZED

    def active_effects(self) -> list[str]:
        """Names of running effects."""
        return [name for name, effect in self.effects.items() if effect.active]

    def evaluate_viewport(self, width: int | None = None) -> bool:
        """Re-run the constrained-device heuristic.

        Args:
            width: Viewport width, read from the page when None

        Returns:
            True if the viewport counts as constrained
        """
        if width is None:
            width = self.context.page.viewport_width
        self.context.constrained = width <= self.context.settings.viewport.mobile_breakpoint
        return self.context.constrained

    def init(self, config: Mapping[str, bool] | EffectFlags | None = None) -> bool:
        """Start every enabled effect.

        Args:
            config: Flags laid over the defaults

        Returns:
            True if initialization ran, False if already initialized
        """
        if self.is_initialized:
            logging.warning("Effects already initialized")
            return False

        self.config = EffectFlags().merged(config)
        self.evaluate_viewport()
        self.context.event_bus.subscribe(Events.VIEWPORT_RESIZED, self._on_viewport_resized)

        for name, effect in self.effects.items():
            if not self.config.is_enabled(name):
                continue
            if self.context.constrained and name in CONSTRAINED_DISABLED:
                logging.info(f"Effect {name} skipped on constrained viewport")
                continue
            self._run(name, "initializing", effect.init)

        self.phase = ControllerPhase.INITIALIZED
        logging.info(f"Effects initialized: {self.config.model_dump(by_alias=True)}")
        return True

    def destroy(self) -> None:
        """Stop every effect and cancel all of their scheduled work."""
        for name, effect in self.effects.items():
            self._run(name, "destroying", effect.destroy)

        self.context.event_bus.unsubscribe(Events.VIEWPORT_RESIZED, self._on_viewport_resized)
        self.phase = ControllerPhase.DESTROYED
        logging.info("Effects destroyed")

    def toggle(self, effect_name: str, enabled: bool) -> None:
        """Switch one effect on or off.

        Only glitch, scanlines, button glow and mouse trail react at runtime.
        Other known effects just record the flag; unknown names are ignored.
        """
        if effect_name not in EFFECT_ATTRIBUTES:
            logging.debug(f"Ignoring toggle of unknown effect: {effect_name}")
            return

        if effect_name in RUNTIME_TOGGLEABLE:
            effect = self.effects[effect_name]
            if enabled:
                self._run(effect_name, "initializing", effect.init)
            else:
                self._run(effect_name, "destroying", effect.destroy)
        else:
            logging.debug(f"Effect {effect_name} only changes on next init")

        self.config = self.config.merged({effect_name: enabled})

    def trigger_glitch(self) -> bool:
        """Fire one glitch pulse now."""
        glitch = self.effects[EffectNames.GLITCH]
        assert isinstance(glitch, GlitchEffect)
        return glitch.trigger_glitch()

    def set_scanline_strength(self, strong: bool) -> None:
        """Switch scanlines between normal and strong."""
        scanlines = self.effects[EffectNames.SCANLINES]
        assert isinstance(scanlines, ScanlinesEffect)
        scanlines.set_strength(strong)

    def _on_viewport_resized(self, width: int, height: int, **_: Any) -> None:
        was_constrained = self.context.constrained
        constrained = self.evaluate_viewport(width)
        if not self.is_initialized or constrained == was_constrained:
            return

        for name, effect in self.effects.items():
            if name not in CONSTRAINED_DISABLED:
                continue
            if constrained:
                if effect.active:
                    logging.info(f"Effect {name} stopped on constrained viewport")
                self._run(name, "destroying", effect.destroy)
            elif self.config.is_enabled(name):
                if name == EffectNames.MATRIX_RAIN and self.context.surface is not None:
                    # Restarted inside this resize event, so its own handler misses it
                    self.context.surface.set_size(width, height)
                self._run(name, "initializing", effect.init)

    @staticmethod
    def _run(name: str, action: str, method: Callable[[], Any]) -> None:
        try:
            method()
        except Exception as e:
            logging.error(f"Error {action} effect {name}: {e}")


def install_auto_init(
    controller: EffectController,
    event_bus: EventBusProtocol,
    config: Mapping[str, bool] | EffectFlags | None = None,
) -> Callable[..., None]:
    """Initialize controller when the page reports it is ready.

    The subscription removes itself after the first PAGE_READY.

    Returns:
        The installed handler, for unsubscribing before the page is ready
    """

    def on_page_ready(**_: Any) -> None:
        event_bus.unsubscribe(Events.PAGE_READY, on_page_ready)
        controller.init(config)

    event_bus.subscribe(Events.PAGE_READY, on_page_ready)
    return on_page_ready
