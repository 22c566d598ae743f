"""In-memory representation of a font while it is being encoded.

The data file format is line based text: a tag followed by its values.
Glyph and dictionary pixel data are written as strings of hexadecimal
alpha values, one digit (0-F) per pixel.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TextIO
import io

__all__ = [
    "DataFileError",
    "DictEntry",
    "GlyphEntry",
    "FontInfo",
    "DataFile",
    "format_pixels",
    "parse_pixels",
    "FORMAT_VERSION",
    "DICTIONARY_SIZE",
    "FLAG_MONOSPACE",
    "FLAG_BW",
]

#: Version of the text format written by :meth:`DataFile.save`.
FORMAT_VERSION = 1
#: Number of dictionary entries; the 24 codes before them are reserved.
DICTIONARY_SIZE = 256 - 24

FLAG_MONOSPACE = 0x01
FLAG_BW = 0x02

_HEX_DIGITS = "0123456789ABCDEF"
_GLYPH_CHARS = "....,,,,----XXXX"
_DEFAULT_SEED = 1234


class DataFileError(ValueError):
    """Raised when a data file cannot be read."""


@dataclass
class DictEntry:
    """A dictionary entry: a block of pixels that glyphs may refer to."""

    replacement: list[int] = field(default_factory=list)
    score: int = 0
    ref_encode: bool = False


@dataclass
class GlyphEntry:
    """A glyph, its tracking width and the characters it represents."""

    data: list[int] = field(default_factory=list)
    chars: list[int] = field(default_factory=list)
    width: int = 0


@dataclass
class FontInfo:
    """Information that applies to all glyphs of a font."""

    name: str = ""
    max_width: int = 0
    max_height: int = 0
    baseline_x: int = 0
    baseline_y: int = 0
    line_height: int = 0
    flags: int = 0


def format_pixels(pixels: Iterable[int]) -> str:
    """Write pixel alphas as hexadecimal digits."""
    digits = []
    for pixel in pixels:
        if not 0 <= pixel <= 15:
            raise ValueError(f"invalid pixel alpha: {pixel}")
        digits.append(_HEX_DIGITS[pixel])
    return "".join(digits)


def parse_pixels(text: str) -> list[int]:
    """Read hexadecimal pixel alphas, stopping at the first other character."""
    pixels = []
    for ch in text.lstrip():
        value = _HEX_DIGITS.find(ch)
        if value < 0:
            break
        pixels.append(value)
    return pixels


def _int_field(tokens: Sequence[str], index: int, tag: str) -> int:
    try:
        return int(tokens[index])
    except (IndexError, ValueError):
        raise DataFileError(f"malformed {tag} line") from None


class DataFile:
    """The dictionary, glyph table and font information of a font."""

    def __init__(
        self,
        dictionary: Iterable[DictEntry] = (),
        glyphs: Iterable[GlyphEntry] = (),
        fontinfo: FontInfo | None = None,
        seed: int = _DEFAULT_SEED,
    ):
        self.dictionary: list[DictEntry] = list(dictionary)
        self.glyphs: list[GlyphEntry] = list(glyphs)
        self.fontinfo: FontInfo = fontinfo if fontinfo is not None else FontInfo()
        #: Random generator seed, stored for deterministic processing.
        self.seed: int = seed
        while len(self.dictionary) < DICTIONARY_SIZE:
            self.dictionary.append(DictEntry())
        self.low_score_index = 0
        self._update_low_score_index()

    def _update_low_score_index(self) -> None:
        self.low_score_index = min(
            range(len(self.dictionary)), key=lambda i: self.dictionary[i].score
        )

    def save(self, stream: TextIO) -> None:
        """Write the font to ``stream`` in the text format."""
        info = self.fontinfo
        stream.write(f"Version {FORMAT_VERSION}\n")
        stream.write(f"FontName {info.name}\n")
        stream.write(f"MaxWidth {info.max_width}\n")
        stream.write(f"MaxHeight {info.max_height}\n")
        stream.write(f"BaselineX {info.baseline_x}\n")
        stream.write(f"BaselineY {info.baseline_y}\n")
        stream.write(f"LineHeight {info.line_height}\n")
        stream.write(f"Flags {info.flags}\n")
        stream.write(f"RandomSeed {self.seed}\n")

        for entry in self.dictionary:
            if entry.replacement:
                stream.write(
                    f"DictEntry {entry.score} {int(entry.ref_encode)} "
                    f"{format_pixels(entry.replacement)}\n"
                )

        for glyph in self.glyphs:
            chars = ",".join(str(c) for c in glyph.chars)
            stream.write(f"Glyph {chars} {glyph.width} {format_pixels(glyph.data)}\n")

    def dumps(self) -> str:
        """Return the font in the text format."""
        out = io.StringIO()
        self.save(out)
        return out.getvalue()

    @classmethod
    def load(cls, stream: TextIO) -> DataFile:
        """Read a font in the text format from ``stream``."""
        fontinfo = FontInfo()
        dictionary: list[DictEntry] = []
        glyphs: list[GlyphEntry] = []
        seed = _DEFAULT_SEED
        version = -1

        int_fields = {
            "MaxWidth": "max_width",
            "MaxHeight": "max_height",
            "BaselineX": "baseline_x",
            "BaselineY": "baseline_y",
            "LineHeight": "line_height",
            "Flags": "flags",
        }

        for raw_line in stream:
            line = raw_line.rstrip("\n")
            tokens = line.split()
            if not tokens:
                continue
            tag = tokens[0]

            if tag == "Version":
                version = _int_field(tokens, 1, tag)
            elif tag == "FontName":
                fontinfo.name = line.lstrip()[len(tag):].lstrip()
            elif tag in int_fields:
                setattr(fontinfo, int_fields[tag], _int_field(tokens, 1, tag))
            elif tag == "RandomSeed":
                seed = _int_field(tokens, 1, tag)
            elif tag == "DictEntry" and len(dictionary) < DICTIONARY_SIZE:
                score = _int_field(tokens, 1, tag)
                ref_encode = bool(_int_field(tokens, 2, tag))
                replacement = parse_pixels(tokens[3]) if len(tokens) > 3 else []
                dictionary.append(DictEntry(replacement, score, ref_encode))
            elif tag == "Glyph":
                if len(tokens) < 4:
                    raise DataFileError("malformed Glyph line")
                width = _int_field(tokens, 2, tag)
                data = parse_pixels(tokens[3])
                if len(data) != fontinfo.max_width * fontinfo.max_height:
                    raise DataFileError(f"wrong glyph data length: {len(data)}")
                try:
                    chars = [int(part) for part in tokens[1].split(",")]
                except ValueError:
                    raise DataFileError(f"malformed glyph characters: {tokens[1]}") from None
                glyphs.append(GlyphEntry(data, chars, width))

        if version != FORMAT_VERSION:
            raise DataFileError(f"unsupported data file version: {version}")

        return cls(dictionary, glyphs, fontinfo, seed)

    @classmethod
    def loads(cls, text: str) -> DataFile:
        """Read a font from a string in the text format."""
        return cls.load(io.StringIO(text))

    def set_dictionary_entry(self, index: int, value: DictEntry) -> None:
        """Replace a dictionary entry, keeping the low score index current."""
        if not 0 <= index < len(self.dictionary):
            raise IndexError(f"dictionary index out of range: {index}")
        self.dictionary[index] = value
        if (index == self.low_score_index
                or self.dictionary[self.low_score_index].score > value.score):
            self._update_low_score_index()

    def char_to_glyph_map(self) -> dict[int, int]:
        """Map each character code to the index of its glyph."""
        mapping: dict[int, int] = {}
        for index, glyph in enumerate(self.glyphs):
            for char in glyph.chars:
                mapping[char] = index
        return dict(sorted(mapping.items()))

    def glyph_to_text(self, index: int) -> str:
        """Draw a glyph as lines of text, one character per pixel."""
        width = self.fontinfo.max_width
        data = self.glyphs[index].data
        rows = []
        for y in range(self.fontinfo.max_height):
            row = data[y * width:(y + 1) * width]
            if len(row) != width:
                raise IndexError(f"glyph {index} has too little data")
            rows.append("".join(_GLYPH_CHARS[p] for p in row) + "\n")
        return "".join(rows)