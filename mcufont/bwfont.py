"""Uncompressed black and white font format.

Glyphs are stored column by column, ``height_bytes`` bytes per column, with
the least significant bit of the first byte being the top left pixel.  The
format is fast to decode and works well for small font sizes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .font import Font, PixelCallback

__all__ = ["BWCharRange", "BWFont", "BWFONT_VERSION"]

#: Version of the format that this decoder understands.
BWFONT_VERSION = 4


@dataclass(frozen=True)
class BWCharRange:
    """A contiguous range of characters and their glyph data.

    ``width`` is the common column count of all glyphs in the range, or 0
    when widths vary; in that case ``glyph_widths`` gives each glyph's
    tracking width and ``glyph_offsets`` (``char_count + 1`` entries, in
    columns) locates each glyph's data.
    """

    first_char: int
    char_count: int
    offset_x: int
    offset_y: int
    height_bytes: int
    height_pixels: int
    width: int
    glyph_data: bytes
    glyph_widths: Sequence[int] | None = None
    glyph_offsets: Sequence[int] | None = None

    def contains(self, character: int) -> bool:
        return self.first_char <= character < self.first_char + self.char_count

    def advance(self, index: int) -> int:
        """Tracking width of the glyph at ``index`` in this range."""
        if self.width:
            return (self.width + self.offset_x) & 0xFF
        assert self.glyph_widths is not None
        return self.glyph_widths[index]

    def _columns(self, index: int) -> tuple[int, int]:
        """Byte offset of the glyph data and its number of columns."""
        if self.width:
            return self.width * index * self.height_bytes, self.width
        assert self.glyph_offsets is not None
        start = self.glyph_offsets[index]
        return start * self.height_bytes, self.glyph_offsets[index + 1] - start


@dataclass(kw_only=True)
class BWFont(Font):
    """A black and white font made of uncompressed character ranges."""

    version: int = BWFONT_VERSION
    char_ranges: list[BWCharRange] = field(default_factory=list)

    def find_range(self, character: int) -> tuple[BWCharRange, int] | None:
        """Return the range holding ``character`` and its index in it."""
        for char_range in self.char_ranges:
            if char_range.contains(character):
                return char_range, character - char_range.first_char
        return None

    def glyph_width(self, character: int) -> int:
        found = self.find_range(character)
        if found is None:
            return 0
        char_range, index = found
        return char_range.advance(index)

    def render_glyph(self, x0: int, y0: int, character: int, callback: PixelCallback) -> int:
        found = self.find_range(character)
        if found is None:
            return 0
        char_range, index = found

        start, num_cols = char_range._columns(index)
        stride = char_range.height_bytes
        data = char_range.glyph_data
        x0 += char_range.offset_x
        y0 += char_range.offset_y

        for y in range(char_range.height_pixels):
            byte, mask = y >> 3, 1 << (y & 7)
            run_start: int | None = None
            for x in range(num_cols):
                lit = data[start + x * stride + byte] & mask
                if lit and run_start is None:
                    run_start = x
                elif not lit and run_start is not None:
                    callback(x0 + run_start, y0 + y, x - run_start, 255)
                    run_start = None
            if run_start is not None:
                callback(x0 + run_start, y0 + y, num_cols - run_start, 255)

        return char_range.advance(index)