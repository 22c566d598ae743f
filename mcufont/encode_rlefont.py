"""Encoding of a whole font into the run length / dictionary format.

The dictionary entries are either run length encoded or reference encoded
(made of references to other entries).  Glyphs are always reference
encoded.  Decoding helpers are provided to verify the result.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .datafile import DataFile, DictEntry, FontInfo
from .rle_tree import build_tree, encode_ref, encode_rle, fillentry_bitcount
from .rlefont import (
    DICT_START,
    DICT_START7BIT,
    REF_FILLZEROS,
    RLE_64ZEROS,
    RLE_CODEMASK,
    RLE_ONES,
    RLE_VALMASK,
    RLE_ZEROS,
)

__all__ = [
    "EncodingError",
    "EncodedFont",
    "encode_font",
    "decode_glyph",
    "get_encoded_size",
]


class EncodingError(ValueError):
    """Raised when encoded data is invalid or fails verification."""


@dataclass
class EncodedFont:
    """Encoded dictionary entries and glyphs of a font.

    Dictionary codes start at ``DICT_START`` with the run length encoded
    entries, followed by the reference encoded ones.
    """

    rle_dictionary: list[list[int]] = field(default_factory=list)
    ref_dictionary: list[list[int]] = field(default_factory=list)
    glyphs: list[list[int]] = field(default_factory=list)

    def decode_glyph(self, index: int, fontinfo: FontInfo) -> list[int]:
        """Decode the glyph at ``index`` back into pixel alphas."""
        return decode_glyph(self, self.glyphs[index], fontinfo)

    def encoded_size(self) -> int:
        """Total size in bytes of the encoded dictionary and glyphs."""
        total = 0
        for entry in (*self.rle_dictionary, *self.ref_dictionary):
            total += len(entry)
            if entry:
                total += 2  # offset table entry
        for glyph in self.glyphs:
            total += len(glyph) + 2 + 1  # offset and width table entries
        return total


def _decode_rle(rlestring: Sequence[int]) -> list[int]:
    pixels: list[int] = []
    for code in rlestring:
        kind, value = code & RLE_CODEMASK, code & RLE_VALMASK
        if kind == RLE_ZEROS:
            pixels.extend([0] * value)
        elif kind == RLE_64ZEROS:
            pixels.extend([0] * ((value + 1) * 64))
        elif kind == RLE_ONES:
            pixels.extend([15] * (value + 1))
        else:
            pixels.extend([value & 0xF] * ((value >> 4) + 1))
    return pixels


def decode_glyph(encoded: EncodedFont, refstring: Sequence[int], fontinfo: FontInfo) -> list[int]:
    """Decode a reference encoded string into pixel alphas."""
    result: list[int] = []
    glyph_size = fontinfo.max_width * fontinfo.max_height
    rle_count = len(encoded.rle_dictionary)

    for ref in refstring:
        if ref <= 15:
            result.append(ref)
        elif ref == REF_FILLZEROS:
            result = result[:glyph_size] + [0] * max(0, glyph_size - len(result))
        elif ref < DICT_START:
            raise EncodingError(f"unknown code: {ref}")
        elif ref - DICT_START < rle_count:
            result.extend(_decode_rle(encoded.rle_dictionary[ref - DICT_START]))
        elif ref - DICT_START - rle_count < len(encoded.ref_dictionary):
            part = encoded.ref_dictionary[ref - DICT_START - rle_count]
            result.extend(decode_glyph(encoded, part, fontinfo))
        else:
            bits = ref - DICT_START7BIT
            result.extend(15 if bits & (1 << i) else 0 for i in range(fillentry_bitcount(ref)))
    return result


def _sorted_dictionary(dictionary: Sequence[DictEntry]) -> list[DictEntry]:
    """Run length entries first, then reference entries, empty ones last."""
    return sorted(dictionary, key=lambda d: (not d.replacement, d.ref_encode))


def _first_mismatch(a: Sequence[int], b: Sequence[int]) -> int:
    return next((i for i, (x, y) in enumerate(zip(a, b)) if x != y), min(len(a), len(b)))


def encode_font(datafile: DataFile, fast: bool = True) -> EncodedFont:
    """Encode all dictionary entries and glyphs of ``datafile``.

    The slow mode finds the shortest encodings and verifies every glyph
    by decoding it again.
    """
    result = EncodedFont()
    dictionary = _sorted_dictionary(datafile.dictionary)
    tree = build_tree(dictionary, fast)

    for entry in dictionary:
        if not entry.replacement:
            continue
        if entry.ref_encode:
            result.ref_dictionary.append(encode_ref(entry.replacement, tree, False, fast))
        else:
            result.rle_dictionary.append(encode_rle(entry.replacement))

    for glyph in datafile.glyphs:
        result.glyphs.append(encode_ref(glyph.data, tree, True, fast))

    if not fast:
        for index, glyph in enumerate(datafile.glyphs):
            decoded = result.decode_glyph(index, datafile.fontinfo)
            if decoded != glyph.data:
                pos = _first_mismatch(decoded, glyph.data)
                raise EncodingError(f"verification of glyph {index} failed at position {pos}")

    return result


def get_encoded_size(datafile: DataFile, fast: bool = True) -> int:
    """Encode ``datafile`` and return the size of the result in bytes."""
    return encode_font(datafile, fast).encoded_size()