"""Pillow-backed drawing surface."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from matrixfx.core.protocols import Color


def _rgba(color: Color) -> tuple[int, int, int, int]:
    r, g, b, alpha = color
    return (r, g, b, max(0, min(255, round(alpha * 255))))


@lru_cache(maxsize=8)
def _font(
    size: int, font_path: Path | None = None
) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size)
        except OSError as e:
            logging.warning(f"Cannot load font {font_path}: {e}")
    try:
        return ImageFont.load_default(size=size)
    except (OSError, ValueError) as e:
        logging.debug(f"Scalable default font unavailable ({e}), using bitmap font")
        return ImageFont.load_default()


class PillowSurface:
    """RGBA image the matrix rain paints onto.

    Translucent fills are alpha-composited over the current content so
    repeated low-alpha fills fade older glyphs out.

    Pillow's default font has no katakana or Hangul, so most rain glyphs
    draw as missing-glyph boxes unless font_path points at a font that
    covers them.
    """

    def __init__(self, width: int, height: int, font_path: Path | None = None) -> None:
        """Initialize an opaque black surface.

        Args:
            width: Width in pixels
            height: Height in pixels
            font_path: TrueType/OpenType font for glyphs, Pillow default when None
        """
        self.image = Image.new("RGBA", (max(1, width), max(1, height)), (0, 0, 0, 255))
        self._width = width
        self._height = height
        self.font_path = font_path

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def set_size(self, width: int, height: int) -> None:
        """Resize the surface. Content is discarded, like a canvas resize."""
        self._width = width
        self._height = height
        self.image = Image.new("RGBA", (max(1, width), max(1, height)), (0, 0, 0, 255))

    def fill_rect(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        overlay = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).rectangle(
            [int(x), int(y), int(x + width) - 1, int(y + height) - 1], fill=_rgba(color)
        )
        self.image = Image.alpha_composite(self.image, overlay)

    def fill_text(self, text: str, x: float, y: float, color: Color, font_size: int) -> None:
        font = _font(font_size, self.font_path)
        draw = ImageDraw.Draw(self.image)
        if isinstance(font, ImageFont.FreeTypeFont):
            # y is the text baseline
            draw.text((x, y), text, fill=_rgba(color), font=font, anchor="ls")
        else:
            # Bitmap font only covers latin-1
            text = text.encode("latin-1", "replace").decode("latin-1")
            draw.text((x, y - font_size), text, fill=_rgba(color), font=font)

    def clear(self) -> None:
        self.image = Image.new("RGBA", self.image.size, (0, 0, 0, 255))

    def save(self, path: Path) -> None:
        """Write the surface as PNG."""
        self.image.convert("RGB").save(path, format="PNG")
