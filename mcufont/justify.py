"""Rendering of single lines of text: left, center, right and justified.

Handles tab stops and kerning.  Text may be given as ``str`` or as UTF-8
``bytes``; a ``count`` of 0 means "until the end of the text".
"""

from __future__ import annotations

import enum
from collections.abc import Callable

from .encoding import decode_char, rewind
from .font import TABSIZE, Font, character_width
from .kerning import compute_kerning

__all__ = [
    "Align",
    "CharacterCallback",
    "get_string_width",
    "render_aligned",
    "render_justified",
]

#: Receives ``(x, y, character)`` and returns the width of the character.
CharacterCallback = Callable[[int, int, int], int]

_UNLIMITED = 0xFFFF
_TAB = ord("\t")
_SPACE = ord(" ")
_NBSP = 0xA0
_STRIPPED = frozenset({_SPACE, _NBSP, ord("\n"), ord("\r"), _TAB})
_JUSTIFY_SPACES = frozenset({_SPACE, _NBSP})


class Align(enum.IntEnum):
    """Horizontal alignment of a line."""

    LEFT = 0
    CENTER = 1
    RIGHT = 2


def _as_bytes(text: str | bytes) -> bytes:
    return text.encode("utf-8") if isinstance(text, str) else bytes(text)


def _c_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _c_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    return a - _c_div(a, b) * b


def _at_end(data: bytes, pos: int) -> bool:
    return pos >= len(data) or data[pos] == 0


def _round_to_tab(font: Font, x0: int, x: int) -> int:
    """Round ``x`` up to the next tab stop, always advancing by a space."""
    tabw = character_width(font, ord("m")) * TABSIZE
    x += character_width(font, _SPACE)
    dx = x - x0 + font.baseline_x
    return x + tabw - _c_mod(dx, tabw)


def _round_to_prev_tab(font: Font, x0: int, x: int) -> int:
    """Round ``x`` down to the previous tab stop, always moving by a space."""
    tabw = character_width(font, ord("m")) * TABSIZE
    x -= character_width(font, _SPACE)
    dx = x0 - x + font.baseline_x
    return x - (tabw - _c_mod(dx, tabw))


def _string_width(font: Font, data: bytes, count: int, kern: bool) -> int:
    result = 0
    c1 = 0
    pos = 0
    for _ in range(count or _UNLIMITED):
        if _at_end(data, pos):
            break
        c2, pos = decode_char(data, pos)
        if c2 == _TAB:
            result = _round_to_tab(font, 0, result)
            c1 = _SPACE
            continue
        if kern and c1:
            result += compute_kerning(font, c1, c2)
        result += character_width(font, c2)
        c1 = c2
    return result


def get_string_width(font: Font, text: str | bytes, kern: bool = False) -> int:
    """Width of ``text`` in pixels, optionally taking kerning into account."""
    return _string_width(font, _as_bytes(text), 0, kern)


def _strip_spaces(data: bytes, count: int) -> tuple[int, int]:
    """Character count without trailing spaces, and the last character read.

    The last character is reported as 0 when the text ended within ``count``.
    """
    index = 0
    result = 0
    last = 0
    pos = 0
    for _ in range(count or _UNLIMITED):
        if _at_end(data, pos):
            break
        index += 1
        last, pos = decode_char(data, pos)
        if last not in _STRIPPED:
            result = index
    if _at_end(data, pos):
        last = 0
    return result, last


def _render_left(font: Font, x0: int, y0: int, data: bytes, count: int,
                 callback: CharacterCallback) -> None:
    x = x0 - font.baseline_x
    c1 = 0
    pos = 0
    for _ in range(count):
        c2, pos = decode_char(data, pos)
        if c2 == _TAB:
            x = _round_to_tab(font, x0, x)
            c1 = _SPACE
            continue
        if c1:
            x += compute_kerning(font, c1, c2)
        x += callback(x, y0, c2)
        c1 = c2


def _render_right(font: Font, x0: int, y0: int, data: bytes, count: int,
                  callback: CharacterCallback) -> None:
    pos = 0
    for _ in range(count):
        _, pos = decode_char(data, pos)

    x = x0 - font.baseline_x
    c2 = 0
    for _ in range(count):
        pos = rewind(data, pos)
        c1, _ = decode_char(data, pos)
        if c1 == _TAB:
            x = _round_to_prev_tab(font, x0, x)
            c2 = _SPACE
            continue
        x -= character_width(font, c1)
        if c2:
            x -= compute_kerning(font, c1, c2)
        callback(x, y0, c1)
        c2 = c1


def render_aligned(font: Font, x0: int, y0: int, align: Align, text: str | bytes,
                   callback: CharacterCallback, count: int = 0) -> None:
    """Render one line aligned at ``x0``, which is its left, center or right edge.

    Trailing whitespace is not rendered.
    """
    align = Align(align)
    data = _as_bytes(text)
    count, _ = _strip_spaces(data, count)

    if align is Align.LEFT:
        _render_left(font, x0, y0, data, count, callback)
    elif align is Align.CENTER:
        string_width = _string_width(font, data, count, False)
        _render_left(font, x0 - _c_div(string_width, 2), y0, data, count, callback)
    else:
        _render_right(font, x0, y0, data, count, callback)


def render_justified(font: Font, x0: int, y0: int, width: int, text: str | bytes,
                     callback: CharacterCallback, count: int = 0) -> None:
    """Render one line stretched to ``width`` by widening its spaces.

    Lines that end in a newline or at the end of the text are rendered
    left aligned instead.
    """
    data = _as_bytes(text)
    count, last_char = _strip_spaces(data, count)

    if last_char in (ord("\n"), 0):
        _render_left(font, x0, y0, data, count, callback)
        return

    adjustment = width - _string_width(font, data, count, False)

    num_spaces = 0
    pos = 0
    for _ in range(count):
        if _at_end(data, pos):
            break
        char, pos = decode_char(data, pos)
        if char in _JUSTIFY_SPACES:
            num_spaces += 1

    x = x0 - font.baseline_x
    c1 = 0
    pos = 0
    for _ in range(count):
        c2, pos = decode_char(data, pos)

        if c2 == _TAB:
            before = x
            x = _round_to_tab(font, x0, x)
            adjustment -= x - before - character_width(font, _TAB)
            c1 = c2
            continue

        if c2 in _JUSTIFY_SPACES:
            step = _c_div(adjustment + num_spaces // 2, num_spaces)
            adjustment -= step
            num_spaces -= 1
            x += step

        if c1:
            kerning = compute_kerning(font, c1, c2)
            x += kerning
            adjustment -= kerning

        x += callback(x, y0, c2)
        c1 = c2