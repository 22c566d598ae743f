from dataclasses import dataclass, field

import pytest

from mcufont.encoding import iter_chars
from mcufont.font import Font, FontFlags
from mcufont.justify import get_string_width
from mcufont.wordwrap import is_wrap_space, wordwrap


@dataclass(kw_only=True)
class FakeFont(Font):
    widths: dict = field(default_factory=dict)

    def glyph_width(self, character):
        if not character:
            return 0
        return self.widths.get(character, 5)

    def render_glyph(self, x0, y0, character, callback):
        return self.glyph_width(character)


@pytest.fixture
def font():
    return FakeFont(width=5, height=8, flags=FontFlags.MONOSPACE, fallback_character=ord("?"))


def line_text(line):
    data, count = line
    return "".join(chr(c) for c, _ in zip(iter_chars(data), range(count)))


@pytest.mark.parametrize("char", [" ", "\n", "\t", "\r", "-"])
def test_wrap_spaces(char):
    assert is_wrap_space(ord(char)) is True


@pytest.mark.parametrize("char", ["a", "_", "0", "\xa0"])
def test_non_wrap_spaces(char):
    assert is_wrap_space(ord(char)) is False


def test_text_that_fits_is_one_line(font):
    text = "hello world"
    lines = list(wordwrap(font, 1000, text))
    assert lines == [(text.encode(), len(text))]


def test_newline_forces_break(font):
    lines = list(wordwrap(font, 1000, "ab\ncd"))
    assert lines == [(b"ab\ncd", 3), (b"cd", 2)]


def test_long_word_is_cut(font):
    lines = list(wordwrap(font, 20, "aaaaaaaaaa"))
    counts = [count for _, count in lines]
    assert sum(counts) == 10
    assert all(0 < count <= 4 for count in counts)
    assert counts == [4, 4, 2]


@pytest.mark.parametrize("width", [30, 45, 60, 100])
def test_lines_cover_text_and_fit(font, width):
    text = "the quick brown fox jumps over the lazy dog again and again"
    lines = list(wordwrap(font, width, text))
    assert sum(count for _, count in lines) == len(text)
    assert "".join(line_text(line) for line in lines) == text
    for line in lines:
        assert get_string_width(font, line_text(line).rstrip()) <= width


def test_lines_start_where_previous_ended(font):
    text = "one two three four five six"
    lines = list(wordwrap(font, 50, text))
    data = text.encode()
    offset = 0
    for rest, count in lines:
        assert data.endswith(rest)
        assert len(data) - len(rest) == offset
        offset += len(line_text((rest, count)).encode())


def test_generator_can_stop_early(font):
    lines = wordwrap(font, 20, "aaaa bbbb cccc dddd")
    first = next(lines)
    assert line_text(first).rstrip() == "aaaa"


def test_empty_text_yields_nothing(font):
    assert list(wordwrap(font, 100, "")) == []


def test_width_smaller_than_a_character(font):
    with pytest.raises(ValueError):
        list(wordwrap(font, 3, "abc"))