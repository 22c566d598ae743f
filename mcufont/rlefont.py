"""Compressed font format based on run length and dictionary encoding."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from .font import Font, PixelCallback

__all__ = [
    "RLECharRange",
    "RLEFont",
    "RLEFONT_VERSION",
    "DICT_START",
    "REF_FILLZEROS",
]

#: Version of the format that this decoder understands.
RLEFONT_VERSION = 4

# Number of reserved codes before the dictionary entries.
DICT_START = 24
# Special reference meaning "fill with zeros to the end of the glyph".
REF_FILLZEROS = 16

RLE_CODEMASK = 0xC0
RLE_VALMASK = 0x3F
RLE_ZEROS = 0x00
RLE_64ZEROS = 0x40
RLE_ONES = 0x80
RLE_SHADE = 0xC0

# Dictionary "fill entries" that encode bits directly.
DICT_START7BIT = 4
DICT_START6BIT = 132
DICT_START5BIT = 196
DICT_START4BIT = 228
DICT_START3BIT = 244
DICT_START2BIT = 252


def _fillentry_bitcount(index: int) -> int:
    if index >= DICT_START2BIT:
        return 2
    if index >= DICT_START3BIT:
        return 3
    if index >= DICT_START4BIT:
        return 4
    if index >= DICT_START5BIT:
        return 5
    if index >= DICT_START6BIT:
        return 6
    return 7


@dataclass(frozen=True)
class RLECharRange:
    """A contiguous range of characters with their encoded glyphs.

    ``glyph_offsets`` indexes ``glyph_data``; each glyph begins with its
    width byte followed by its codewords.
    """

    first_char: int
    char_count: int
    glyph_offsets: Sequence[int]
    glyph_data: bytes

    def contains(self, character: int) -> bool:
        return self.first_char <= character < self.first_char + self.char_count


@dataclass(kw_only=True)
class RLEFont(Font):
    """A font whose glyphs are run length and dictionary compressed."""

    version: int = RLEFONT_VERSION
    dictionary_data: bytes = b""
    dictionary_offsets: Sequence[int] = ()
    rle_entry_count: int = 0
    dict_entry_count: int = 0
    char_ranges: list[RLECharRange] = field(default_factory=list)

    def find_glyph(self, character: int) -> bytes | None:
        """Return the encoded glyph for ``character``, width byte first."""
        for char_range in self.char_ranges:
            if char_range.contains(character):
                offset = char_range.glyph_offsets[character - char_range.first_char]
                return bytes(char_range.glyph_data[offset:])
        return None

    def glyph_width(self, character: int) -> int:
        glyph = self.find_glyph(character)
        return glyph[0] if glyph else 0

    def render_glyph(self, x0: int, y0: int, character: int, callback: PixelCallback) -> int:
        glyph = self.find_glyph(character)
        if not glyph:
            return 0
        if self.width <= 0:
            raise ValueError("font width must be positive to render glyphs")

        renderer = _Renderer(self, x0, y0, callback)
        codes: Iterator[int] = iter(glyph[1:])
        while renderer.y < renderer.y_end:
            code = next(codes, None)
            if code is None:
                raise ValueError(f"glyph data for character {character} is truncated")
            renderer.glyph_codeword(code)
        return glyph[0]


class _Renderer:
    """Tracks the next pixel position while a glyph is decoded."""

    def __init__(self, font: RLEFont, x0: int, y0: int, callback: PixelCallback):
        self.font = font
        self.x_begin = x0
        self.x_end = x0 + font.width
        self.x = x0
        self.y = y0
        self.y_end = y0 + font.height
        self.callback = callback

    def write_pixels(self, count: int, alpha: int) -> None:
        while self.x + count >= self.x_end:
            rowlen = self.x_end - self.x
            self.callback(self.x, self.y, rowlen, alpha)
            count -= rowlen
            self.x = self.x_begin
            self.y += 1
        if count:
            self.callback(self.x, self.y, count, alpha)
            self.x += count

    def skip_pixels(self, count: int) -> None:
        self.x += count
        while self.x >= self.x_end:
            self.x -= self.x_end - self.x_begin
            self.y += 1

    def _dict_entry(self, index: int) -> bytes:
        offsets = self.font.dictionary_offsets
        return self.font.dictionary_data[offsets[index]:offsets[index + 1]]

    def rle_dictentry(self, index: int) -> None:
        for code in self._dict_entry(index):
            kind, value = code & RLE_CODEMASK, code & RLE_VALMASK
            if kind == RLE_ZEROS:
                self.skip_pixels(value)
            elif kind == RLE_64ZEROS:
                self.skip_pixels((value + 1) * 64)
            elif kind == RLE_ONES:
                self.write_pixels(value + 1, 255)
            else:
                self.write_pixels((value >> 4) + 1, (value & 0xF) * 0x11)

    def bin_codeword(self, code: int) -> None:
        bits = code - DICT_START7BIT
        runlen = 0
        for _ in range(_fillentry_bitcount(code)):
            if bits & 1:
                runlen += 1
            else:
                if runlen:
                    self.write_pixels(runlen, 255)
                    runlen = 0
                self.skip_pixels(1)
            bits >>= 1
        if runlen:
            self.write_pixels(runlen, 255)

    def ref_codeword(self, code: int) -> None:
        if code == 0:
            self.skip_pixels(1)
        elif code <= 15:
            self.write_pixels(1, 0x11 * code)
        elif code == REF_FILLZEROS:
            self.y = self.y_end
        elif code < DICT_START:
            pass  # reserved
        elif code < DICT_START + self.font.rle_entry_count:
            self.rle_dictentry(code - DICT_START)
        else:
            self.bin_codeword(code)

    def ref_dictentry(self, index: int) -> None:
        for code in self._dict_entry(index):
            self.ref_codeword(code)

    def glyph_codeword(self, code: int) -> None:
        font = self.font
        if DICT_START + font.rle_entry_count <= code < DICT_START + font.dict_entry_count:
            self.ref_dictentry(code - DICT_START)
        else:
            self.ref_codeword(code)