"""Shared constants for the effects engine."""


class EffectNames:
    """Effect names as used in configuration and ``toggle``."""

    MATRIX_RAIN = "matrixRain"
    GLITCH = "glitch"
    TYPING = "typing"
    SCANLINES = "scanlines"
    BUTTON_GLOW = "buttonGlow"
    DECODE = "decode"
    MOUSE_TRAIL = "mouseTrail"


# Effects that can be switched on/off after the initial load
RUNTIME_TOGGLEABLE = frozenset(
    {
        EffectNames.GLITCH,
        EffectNames.SCANLINES,
        EffectNames.BUTTON_GLOW,
        EffectNames.MOUSE_TRAIL,
    }
)

# Costly effects skipped at init on constrained devices
CONSTRAINED_DISABLED = frozenset(
    {EffectNames.MATRIX_RAIN, EffectNames.SCANLINES, EffectNames.MOUSE_TRAIL}
)


class CssClasses:
    """Class names applied to page elements."""

    LIGHT_MODE = "light-mode"
    MATRIX_ENHANCED = "matrix-enhanced"
    GLITCH_ENABLED = "glitch-enabled"
    AUTO_GLITCH = "auto-glitch"
    SCANLINES_ENABLED = "scanlines-enabled"
    SCANLINES_STRONG = "scanlines-strong"
    GLOW_ENABLED = "glow-enabled"
    DECODING = "decoding"
    DECODED = "decoded"
    TYPED_TEXT = "typed-text"
    TYPING_CURSOR = "typing-cursor"
    TYPING_COMPLETE = "typing-complete"
    TRAIL_PARTICLE = "mouse-trail-particle"


class Selectors:
    """Element lookups used by the effects."""

    GLITCH_TARGET = ".the-text"
    TYPING_CONTAINER = ".hero-subtitle"
    TYPING_PREFIX = ".code-prompt"
    DECODE_MARKED = "[data-decode]"
    DECODE_DEFAULTS = ".section-label, .chapter-title, .metric-number"


# Glyph sets
RAIN_GLYPHS = "01アイウエオカキクケコサシスセソTHE해커톤빌더"
SCRAMBLE_GLYPHS = "ㄱㄴㄷㄹㅁㅂㅅㅇㅈㅊㅋㅌㅍㅎABCDEFGHIJKLMNOPQRSTUVWXYZ01234567890!@#$%"

# Theme colors (r, g, b)
RAIN_BACKGROUND_DARK = (5, 5, 5)
RAIN_BACKGROUND_LIGHT = (248, 248, 248)
RAIN_ACCENT_DARK = (0, 255, 136)
RAIN_ACCENT_LIGHT = (0, 180, 100)

RAIN_SPEED_MIN = 0.3
RAIN_SPEED_RANGE = 1.2
RAIN_OPACITY_MIN = 0.1
RAIN_OPACITY_RANGE = 0.3

FRAME_INTERVAL_MS = 16
"""Interval used by the Qt scheduler to approximate one paint frame."""
