"""Class-only overlays: scanlines and button glow."""

from matrixfx.core.constants import CssClasses, EffectNames
from matrixfx.effects.base import BaseEffect


class ScanlinesEffect(BaseEffect):
    """Scanline overlay with a normal and a strong strength."""

    name = EffectNames.SCANLINES

    def _start(self) -> bool:
        self.context.page.body.add_class(CssClasses.SCANLINES_ENABLED)
        return True

    def _stop(self) -> None:
        self.context.page.body.remove_class(
            CssClasses.SCANLINES_ENABLED, CssClasses.SCANLINES_STRONG
        )

    def set_strength(self, strong: bool = False) -> None:
        """Switch between normal and strong scanlines."""
        if strong:
            self.context.page.body.add_class(CssClasses.SCANLINES_STRONG)
        else:
            self.context.page.body.remove_class(CssClasses.SCANLINES_STRONG)


class ButtonGlowEffect(BaseEffect):
    """Pulsing glow on buttons."""

    name = EffectNames.BUTTON_GLOW

    def _start(self) -> bool:
        self.context.page.body.add_class(CssClasses.GLOW_ENABLED)
        return True

    def _stop(self) -> None:
        self.context.page.body.remove_class(CssClasses.GLOW_ENABLED)
