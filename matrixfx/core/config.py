"""Configuration management using Pydantic and YAML."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


class EffectFlags(BaseModel):
    """On/off switch for every named effect.

    Keys use the camelCase effect names (``matrixRain``, ``mouseTrail``...)
    on the wire, snake_case attributes in Python. Both are accepted as input.
    """

    model_config = ConfigDict(populate_by_name=True)

    matrix_rain: bool = Field(default=True, alias="matrixRain")
    glitch: bool = True
    typing: bool = True
    scanlines: bool = True
    button_glow: bool = Field(default=True, alias="buttonGlow")
    decode: bool = True
    mouse_trail: bool = Field(default=False, alias="mouseTrail")

    def is_enabled(self, effect_name: str) -> bool:
        """Get a flag by its effect name.

        Args:
            effect_name: camelCase effect name

        Returns:
            Flag value, False for unknown names
        """
        attr = EFFECT_ATTRIBUTES.get(effect_name)
        return bool(getattr(self, attr)) if attr else False

    def merged(self, overrides: "dict[str, bool] | EffectFlags | None") -> "EffectFlags":
        """Return a copy with the given flags laid over this one."""
        data = self.model_dump(by_alias=True)
        if isinstance(overrides, EffectFlags):
            data.update(overrides.model_dump(by_alias=True))
        elif overrides:
            for key, value in overrides.items():
                attr = EFFECT_ATTRIBUTES.get(key, key)
                field = EffectFlags.model_fields.get(attr)
                if field is not None:
                    data[field.alias or attr] = value
        return EffectFlags.model_validate(data)


# camelCase effect name -> model attribute
EFFECT_ATTRIBUTES: dict[str, str] = {
    (field.alias or attr): attr for attr, field in EffectFlags.model_fields.items()
}


class RainConfig(BaseModel):
    """Matrix rain configuration."""

    font_size: int = Field(gt=0, default=14)
    speed_factor: float = Field(gt=0, default=0.4)
    reset_chance: float = Field(ge=0, le=1, default=0.025)
    trail_alpha: float = Field(gt=0, le=1, default=0.04)
    # TrueType/OpenType font with katakana and Hangul for the preview surface
    font_path: Path | None = None


class TrailConfig(BaseModel):
    """Mouse trail configuration."""

    particle_count: int = Field(ge=1, default=8)
    base_ease: float = Field(gt=0, le=1, default=0.3)
    ease_step: float = Field(gt=0, default=0.02)

    @model_validator(mode="after")
    def _check_easing_positive(self) -> "TrailConfig":
        last = self.base_ease - (self.particle_count - 1) * self.ease_step
        if last <= 0:
            raise ValueError(
                f"ease for particle {self.particle_count - 1} would be {last:.3f}, must be > 0"
            )
        return self


class GlitchConfig(BaseModel):
    """Glitch pulse configuration."""

    interval_ms: int = Field(gt=0, default=5000)
    duration_ms: int = Field(gt=0, default=400)


class DecodeConfig(BaseModel):
    """Decode (scramble reveal) configuration."""

    duration_ms: int = Field(gt=0, default=1000)
    iterations: int = Field(ge=1, default=10)
    threshold: float = Field(gt=0, le=1, default=0.5)


class TypingConfig(BaseModel):
    """Typing animation configuration."""

    speed_ms: int = Field(ge=0, default=60)
    jitter_ms: int = Field(ge=0, default=30)
    start_delay_ms: int = Field(ge=0, default=500)
    default_text: str = "A Historic Turning Point for Builders"


class ViewportConfig(BaseModel):
    """Viewport configuration."""

    mobile_breakpoint: int = Field(gt=0, default=768)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = "matrixfx.log"


class MatrixFxConfig(BaseModel):
    """Main configuration."""

    effects: EffectFlags = Field(default_factory=EffectFlags)
    rain: RainConfig = Field(default_factory=RainConfig)
    trail: TrailConfig = Field(default_factory=TrailConfig)
    glitch: GlitchConfig = Field(default_factory=GlitchConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)
    typing: TypingConfig = Field(default_factory=TypingConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> MatrixFxConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        MatrixFxConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid
    """
    if config_path is None:
        # Try multiple locations
        possible_paths = [
            Path(__file__).parent.parent.parent / "config" / "config.yaml",
            Path.home() / ".config" / "matrixfx" / "config.yaml",
            Path.home() / ".matrixfx" / "config.yaml",
        ]

        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            config_path = possible_paths[0]

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return MatrixFxConfig(**(data or {}))
