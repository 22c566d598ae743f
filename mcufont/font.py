"""Generic font interface and the operations shared by all font formats."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from dataclasses import dataclass

__all__ = [
    "FontFlags",
    "Font",
    "Whitespace",
    "PixelCallback",
    "render_character",
    "character_width",
    "character_whitespace",
    "find_font",
    "KERNING_SPACE_PERCENT",
    "KERNING_SPACE_PIXELS",
    "KERNING_LIMIT",
    "KERNING_ZONES",
    "TABSIZE",
]

# Minimum space between characters, in percent of the glyph width.
KERNING_SPACE_PERCENT = 15
# Minimum space between characters, in pixels, added to the percentage.
KERNING_SPACE_PIXELS = 3
# Maximum kerning adjustment, as percent of the glyph width.
KERNING_LIMIT = 20
# Number of vertical zones used when computing kerning.
KERNING_ZONES = 16
# Tab stop spacing, in multiples of the width of 'm'.
TABSIZE = 8

#: Receives ``(x, y, count, alpha)`` for a horizontal run of pixels.
PixelCallback = Callable[[int, int, int, int], None]


class FontFlags(enum.IntFlag):
    """Flags describing aspects of a font."""

    MONOSPACE = 0x01
    BW = 0x02


@dataclass(kw_only=True)
class Font:
    """General information about a font.

    Concrete formats override :meth:`glyph_width` and :meth:`render_glyph`;
    a bare ``Font`` holds no glyphs.
    """

    full_name: str = ""
    short_name: str = ""
    width: int = 0
    height: int = 0
    min_x_advance: int = 0
    max_x_advance: int = 0
    baseline_x: int = 0
    baseline_y: int = 0
    line_height: int = 0
    flags: FontFlags = FontFlags(0)
    fallback_character: int = 0

    def glyph_width(self, character: int) -> int:
        """Tracking width of ``character``, or 0 if the font lacks it."""
        return 0

    def render_glyph(self, x0: int, y0: int, character: int, callback: PixelCallback) -> int:
        """Render ``character`` with its top left at ``(x0, y0)``.

        Returns the character width, or 0 if the font lacks it.
        """
        return 0


@dataclass(frozen=True)
class Whitespace:
    """Empty rows and columns at each border of a glyph."""

    left: int
    top: int
    right: int
    bottom: int


def render_character(font: Font, x0: int, y0: int, character: int, callback: PixelCallback) -> int:
    """Render a character, falling back to the font's fallback glyph."""
    width = font.render_glyph(x0, y0, character, callback)
    if not width:
        width = font.render_glyph(x0, y0, font.fallback_character, callback)
    return width


def character_width(font: Font, character: int) -> int:
    """Width of a character, falling back to the font's fallback glyph."""
    width = font.glyph_width(character)
    if not width:
        width = font.glyph_width(font.fallback_character)
    return width


def character_whitespace(font: Font, character: int) -> Whitespace:
    """Count the empty space at the borders of a character.

    A fully blank character gives ``(font.width, font.height, 0, 0)``.
    """
    bounds = {"min_x": 255, "min_y": 255, "max_x": 0, "max_y": 0}

    def track(x: int, y: int, count: int, alpha: int) -> None:
        if alpha <= 7:
            return
        if bounds["min_x"] > x:
            bounds["min_x"] = x & 0xFF
        if bounds["min_y"] > y:
            bounds["min_y"] = y & 0xFF
        x += count - 1
        if bounds["max_x"] < x:
            bounds["max_x"] = x & 0xFF
        if bounds["max_y"] < y:
            bounds["max_y"] = y & 0xFF

    render_character(font, 0, 0, character, track)

    if bounds["min_x"] == 255 and bounds["min_y"] == 255:
        return Whitespace(font.width, font.height, 0, 0)
    return Whitespace(
        bounds["min_x"],
        bounds["min_y"],
        (font.width - bounds["max_x"] - 1) & 0xFF,
        (font.height - bounds["max_y"] - 1) & 0xFF,
    )


def find_font(name: str, fonts: Iterable[Font]) -> Font | None:
    """Find a font by its full or short name; None if there is none."""
    for font in fonts:
        if font.full_name == name or font.short_name == name:
            return font
    return None