# mcufont

Tools for compact bitmap fonts of the kind used on small displays:
decoding glyphs from a black & white format and a run-length /
dictionary compressed format, scaling and kerning them, laying out and
word-wrapping text, and building the compressed encoding from a
plain-text font description.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

Decoding and layout:

- `mcufont.encoding` – `decode_char(data, pos)` returns
  `(code_point, next_pos)` for UTF-8 bytes, `rewind(data, pos)` steps back
  one character, and `iter_chars(data)` yields the code points of a `str`
  or `bytes` up to its end or first NUL. Malformed sequences are passed
  through as raw byte values; code points are limited to 16 bits.
- `mcufont.font` – the `Font` base class (name, box size, baseline, line
  height, `FontFlags` and fallback character), `render_character` and
  `character_width` (both fall back to the font's fallback character when
  a glyph is missing), `character_whitespace` (returns a `Whitespace` with
  `left`, `top`, `right`, `bottom`) and `find_font(name, fonts)`, which
  searches a given collection by full or short name.
- `mcufont.bwfont` – `BWFont` and `BWCharRange`, the uncompressed
  black & white format, stored column by column.
- `mcufont.rlefont` – `RLEFont` and `RLECharRange`, the dictionary and
  run-length compressed format.
- `mcufont.scaledfont` – `scale_font(basefont, x_scale, y_scale)` returns a
  `ScaledFont` that renders any font enlarged by integer factors.
- `mcufont.kerning` – `compute_kerning(font, c1, c2)`, the x offset for
  `c2` after `c1`, found by comparing the facing glyph edges. Monospace
  fonts, whitespace and digits are not kerned.
- `mcufont.justify` – `Align` (`LEFT`, `CENTER`, `RIGHT`),
  `get_string_width`, `render_aligned` and `render_justified`, with tab
  stops and kerning. Trailing whitespace is not rendered; a justified line
  that ends in a newline or at the end of the text is rendered left
  aligned.
- `mcufont.wordwrap` – `wordwrap(font, width, text)` yields
  `(text_from_line_start, character_count)` for each line, balancing
  consecutive lines as pairs; `is_wrap_space` tells where lines may break.
  A `ValueError` is raised if one character is wider than `width`.

Encoding:

- `mcufont.datafile` – `DataFile` with its `dictionary` (`DictEntry`),
  `glyphs` (`GlyphEntry`), `fontinfo` (`FontInfo`) and `seed`; reading and
  writing the line-based text description with `DataFile.load`,
  `DataFile.loads`, `DataFile.save` and `DataFile.dumps`;
  `char_to_glyph_map`, `glyph_to_text` and `set_dictionary_entry`.
  `format_pixels` and `parse_pixels` convert pixel alphas (0–15) to and
  from hexadecimal digits. Unreadable files raise `DataFileError`.
- `mcufont.rle_tree` – `encode_rle`, the `DictTreeNode` lookup tree built
  by `build_tree`, and `encode_ref`, which encodes pixels as dictionary
  references either greedily (`fast=True`) or as the shortest encoding
  (`fast=False`, which needs a tree built with `fast=False`).
- `mcufont.encode_rlefont` – `encode_font(datafile, fast)` returns an
  `EncodedFont` (`rle_dictionary`, `ref_dictionary`, `glyphs`);
  `decode_glyph`, `EncodedFont.decode_glyph`, `EncodedFont.encoded_size`
  and `get_encoded_size`. In slow mode every glyph is decoded again and
  checked; a mismatch raises `EncodingError`.

## Examples

Encoding a font description and checking the result:

```python
from mcufont.datafile import DataFile
from mcufont.encode_rlefont import encode_font

text = """Version 1
FontName Sans Serif
MaxWidth 4
MaxHeight 6
BaselineX 1
BaselineY 1
Glyph 65 4 0F0F0F0F0F0F0F0F0F0F0F0F
"""

datafile = DataFile.loads(text)
encoded = encode_font(datafile, fast=False)
assert encoded.decode_glyph(0, datafile.fontinfo) == datafile.glyphs[0].data
print(encoded.encoded_size())
```

Rendering a glyph through a pixel callback, which receives
`(x, y, count, alpha)` for each horizontal run:

```python
from mcufont.bwfont import BWCharRange, BWFont
from mcufont.font import render_character

glyph_range = BWCharRange(
    first_char=ord("A"), char_count=1, offset_x=0, offset_y=0,
    height_bytes=1, height_pixels=2, width=2,
    glyph_data=bytes([0b01, 0b11]),
)
font = BWFont(width=2, height=2, char_ranges=[glyph_range])

runs = []
width = render_character(font, 0, 0, ord("A"), lambda *run: runs.append(run))
# runs == [(0, 0, 2, 255), (1, 1, 1, 255)], width == 2
```

Lines from `wordwrap` can be handed to `render_aligned` or
`render_justified` with their character count; the character callback
receives `(x, y, character)` and returns the width it drew.

## What the package does not do

- It has no command-line tool.
- It ships no fonts, and `find_font` only searches the fonts it is given.
- It does not import fonts from other file formats; font descriptions are
  read from the `DataFile` text format.
- It does not optimise the dictionary; `DataFile` keeps whatever entries
  it was given.
- It does not write encoded fonts out to a file. Turning an `EncodedFont`
  into the tables of an `RLEFont` (offsets, character ranges, glyph width
  bytes) is left to the caller.
- Rendering stops at the pixel callback; drawing into an image or onto a
  screen is up to the caller.