"""Effects driven by the controller."""

from matrixfx.effects.base import BaseEffect
from matrixfx.effects.decode import DecodeEffect
from matrixfx.effects.glitch import GlitchEffect
from matrixfx.effects.matrix_rain import MatrixRainEffect
from matrixfx.effects.mouse_trail import MouseTrailEffect
from matrixfx.effects.overlays import ButtonGlowEffect, ScanlinesEffect
from matrixfx.effects.typewriter import TypingEffect

# Initialization order used by the controller
EFFECT_REGISTRY: dict[str, type[BaseEffect]] = {
    MatrixRainEffect.name: MatrixRainEffect,
    GlitchEffect.name: GlitchEffect,
    TypingEffect.name: TypingEffect,
    ScanlinesEffect.name: ScanlinesEffect,
    ButtonGlowEffect.name: ButtonGlowEffect,
    DecodeEffect.name: DecodeEffect,
    MouseTrailEffect.name: MouseTrailEffect,
}

__all__ = [
    "BaseEffect",
    "ButtonGlowEffect",
    "DecodeEffect",
    "GlitchEffect",
    "MatrixRainEffect",
    "MouseTrailEffect",
    "ScanlinesEffect",
    "TypingEffect",
    "EFFECT_REGISTRY",
]
