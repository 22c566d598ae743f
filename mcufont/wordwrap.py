"""Word wrapping that balances consecutive lines as pairs.

Lines are produced as ``(text, count)``: the text from the start of the
line to the end of the input, as UTF-8 bytes, and the number of characters
that belong to the line.  The remainder of the text is kept so that the
justification code can tell whether the line ended in a line break.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from .encoding import decode_char, rewind
from .font import TABSIZE, Font, character_width

__all__ = ["is_wrap_space", "wordwrap"]

_WRAP_SPACES = frozenset(map(ord, " \n\t\r-"))
_NEWLINE = ord("\n")


def is_wrap_space(character: int) -> bool:
    """Whether a line may be broken at this character."""
    return character in _WRAP_SPACES


@dataclass(frozen=True)
class _WordLen:
    word: int = 0
    space: int = 0
    chars: int = 0


@dataclass
class _LineLen:
    start: int = 0
    chars: int = 0
    width: int = 0
    linebreak: bool = False
    last_word: _WordLen = field(default_factory=_WordLen)
    last_word_2: _WordLen = field(default_factory=_WordLen)


def _at_end(data: bytes, pos: int) -> bool:
    return pos >= len(data) or data[pos] == 0


def _get_wordlen(font: Font, data: bytes, pos: int) -> tuple[_WordLen, int, bool]:
    """Measure the next word and the whitespace after it.

    Returns the measurement, the position after it and whether the word
    ends in a line break or the end of the text.
    """
    word = space = chars = 0
    start = pos
    c, pos = decode_char(data, pos)
    while c and not is_wrap_space(c):
        chars += 1
        word += character_width(font, c)
        start = pos
        c, pos = decode_char(data, pos)

    while c and is_wrap_space(c):
        chars += 1
        if c in (ord(" "), ord("-")):
            space += character_width(font, c)
        elif c == ord("\t"):
            space += character_width(font, ord("m")) * TABSIZE
        elif c == _NEWLINE:
            start = pos
            break
        start = pos
        c, pos = decode_char(data, pos)

    # The first character of the next word was read; put it back.
    if c:
        pos = start
    return _WordLen(word, space, chars), pos, c in (0, _NEWLINE)


def _append_word(font: Font, width: int, line: _LineLen, data: bytes, pos: int) -> tuple[bool, int]:
    wordlen, after, linebreak = _get_wordlen(font, data, pos)
    if line.width + wordlen.word > width:
        return False, pos
    line.last_word_2 = line.last_word
    line.last_word = wordlen
    line.linebreak = linebreak
    line.chars += wordlen.chars
    line.width += wordlen.word + wordlen.space
    return True, after


def _append_char(font: Font, width: int, line: _LineLen, data: bytes, pos: int) -> tuple[bool, int]:
    c, after = decode_char(data, pos)
    if not c:
        return False, pos
    w = character_width(font, c)
    if line.width + w > width:
        return False, pos
    line.chars += 1
    line.width += w
    return True, after


def _tune_lines(data: bytes, current: _LineLen, previous: _LineLen, max_width: int) -> None:
    """Move the last word of ``previous`` to ``current`` if that balances them."""
    curw1 = current.width - current.last_word.space
    prevw1 = previous.width - previous.last_word.space
    delta1 = (max_width - prevw1) ** 2 + (max_width - curw1) ** 2

    curw2 = current.width + previous.last_word.word
    prevw2 = (previous.width - previous.last_word.word
              - previous.last_word.space - previous.last_word_2.space)
    delta2 = (max_width - prevw2) ** 2 + (max_width - curw2) ** 2

    if delta1 > delta2 and curw2 <= max_width:
        moved = previous.last_word
        previous.chars -= moved.chars
        current.chars += moved.chars
        previous.width -= moved.word + moved.space
        current.width += moved.word + moved.space
        previous.last_word = previous.last_word_2
        for _ in range(moved.chars):
            current.start = rewind(data, current.start)


def wordwrap(font: Font, width: int, text: str | bytes) -> Iterator[tuple[bytes, int]]:
    """Split ``text`` into lines no wider than ``width`` pixels.

    Yields ``(text_from_line_start, character_count)`` for each line.
    Raises ValueError if a single character is wider than ``width``.
    """
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    current = _LineLen()
    previous = _LineLen()
    pos = 0

    while not _at_end(data, pos):
        appended, pos = _append_word(font, width, current, data, pos)

        if not appended or current.linebreak:
            if not current.chars:
                # A word longer than a line: cut it where it overflows.
                added = True
                while added:
                    added, pos = _append_char(font, width, current, data, pos)
                if not current.chars:
                    raise ValueError(f"width {width} is too small for a single character")

            if previous.chars:
                if not previous.linebreak and not current.linebreak:
                    _tune_lines(data, current, previous, width)
                yield data[previous.start:], previous.chars

            previous = replace(current)
            current.start = pos
            current.chars = 0
            current.width = 0
            current.linebreak = False
            current.last_word = _WordLen()

    if previous.chars:
        yield data[previous.start:], previous.chars
    if current.chars:
        yield data[current.start:], current.chars