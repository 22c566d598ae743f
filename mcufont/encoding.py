"""Character decoding for text fed to the renderer.

Text is handled as UTF-8 bytes.  Only the Basic Multilingual Plane is
supported, so decoded code points are limited to 16 bits.  A NUL byte or
the end of the data terminates the text.
"""

from __future__ import annotations

from collections.abc import Iterator

__all__ = ["decode_char", "rewind", "iter_chars"]


def _byte(data: bytes, pos: int) -> int:
    """Return the byte at ``pos``, or 0 past the end of the data."""
    return data[pos] if 0 <= pos < len(data) else 0


def decode_char(data: bytes, pos: int) -> tuple[int, int]:
    """Decode the character starting at ``pos``.

    Returns ``(code_point, next_pos)``.  At the end of the text the code
    point is 0 and the position is left unchanged.  Malformed sequences are
    passed through as their raw byte value, as the renderer expects.
    """
    c = _byte(data, pos)
    if not c:
        return 0, pos
    pos += 1

    if c & 0x80 == 0:
        return c, pos
    if c & 0xC0 == 0x80:
        # Dangling continuation byte of a cut multibyte sequence.
        return c, pos
    if _byte(data, pos) & 0xC0 == 0xC0:
        # Lead byte not followed by any continuation bytes.
        return c, pos

    seqlen = 2
    mask = 0x20
    result = 0
    while c & mask and seqlen < 5:
        seqlen += 1
        mask >>= 1
        result = ((result << 6) | (_byte(data, pos) & 0x3F)) & 0xFFFF
        pos += 1

    result = ((result << 6) | (_byte(data, pos) & 0x3F)) & 0xFFFF
    pos += 1
    result = (result | ((c & (mask - 1)) << ((seqlen - 1) * 6))) & 0xFFFF
    return result, min(pos, len(data))


def rewind(data: bytes, pos: int) -> int:
    """Return the start position of the character before ``pos``."""
    if pos <= 0:
        raise ValueError("cannot rewind past the start of the text")
    pos -= 1
    while pos > 0 and data[pos] & 0x80 and data[pos] & 0xC0 != 0xC0:
        pos -= 1
    return pos


def iter_chars(data: bytes | str) -> Iterator[int]:
    """Yield the code points of ``data`` up to its end or first NUL."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    pos = 0
    while True:
        char, pos = decode_char(data, pos)
        if not char:
            return
        yield char