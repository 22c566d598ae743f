"""Automatic kerning between pairs of characters.

Fixes pairs such as ``WA`` or ``L'`` that would otherwise have too much
space between them, by comparing the facing edges of the two glyphs.
"""

from __future__ import annotations

from .font import (
    KERNING_LIMIT,
    KERNING_SPACE_PERCENT,
    KERNING_SPACE_PIXELS,
    KERNING_ZONES,
    Font,
    FontFlags,
    render_character,
)

__all__ = ["compute_kerning"]


def _do_kerning(c: int) -> bool:
    """Whether kerning applies against this character."""
    if c in (ord(" "), ord("\n"), ord("\r"), ord("\t")):
        return False
    # Digits keep their width so that tables stay aligned.
    return not ord("0") <= c <= ord("9")


def _c_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def compute_kerning(font: Font, c1: int, c2: int) -> int:
    """Offset to add to the x position of ``c2`` when it follows ``c1``."""
    if font.flags & FontFlags.MONOSPACE:
        return 0
    if not _do_kerning(c1) or not _do_kerning(c2):
        return 0

    zoneheight = max(1, (font.height + KERNING_ZONES - 1) // KERNING_ZONES)
    left_edge = [255] * KERNING_ZONES
    right_edge = [0] * KERNING_ZONES

    def zone_of(y: int) -> int | None:
        zone = y // zoneheight
        return zone if 0 <= zone < KERNING_ZONES else None

    def fit_right(x: int, y: int, count: int, alpha: int) -> None:
        if alpha > 7:
            zone = zone_of(y)
            x += count - 1
            if zone is not None and x > right_edge[zone]:
                right_edge[zone] = x & 0xFF

    def fit_left(x: int, y: int, count: int, alpha: int) -> None:
        if alpha > 7:
            zone = zone_of(y)
            if zone is not None and x < left_edge[zone]:
                left_edge[zone] = x & 0xFF

    w1 = render_character(font, 0, 0, c1, fit_right)
    w2 = render_character(font, 0, 0, c2, fit_left)

    min_space = 255
    for left, right in zip(left_edge, right_edge):
        if left == 255 or right == 0:
            continue
        min_space = min(min_space, (w1 - right + left) & 0xFF)

    if min_space == 255:
        return 0

    normal_space = _c_div(_c_div(w1 + w2, 2) * KERNING_SPACE_PERCENT, 100)
    normal_space += KERNING_SPACE_PIXELS
    adjust = normal_space - min_space
    max_adjust = _c_div(-max(w1, w2) * KERNING_LIMIT, 100)
    return max(min(adjust, 0), max_adjust)