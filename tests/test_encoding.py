import pytest

from mcufont.encoding import decode_char, iter_chars, rewind


def test_ascii_character():
    assert decode_char(b"A", 0) == (65, 1)


def test_end_of_text_returns_zero_and_keeps_position():
    assert decode_char(b"", 0) == (0, 0)
    assert decode_char(b"ab", 2) == (0, 2)


def test_nul_byte_terminates():
    assert decode_char(b"\x00a", 0) == (0, 0)
    assert list(iter_chars(b"ab\x00cd")) == [ord("a"), ord("b")]


@pytest.mark.parametrize("text", ["hello", "h\u00e9llo", "\u20ac100", "\u00e4\u00f6\u00fc\u4e2d"])
def test_iter_chars_matches_code_points(text):
    assert list(iter_chars(text)) == [ord(c) for c in text]


def test_iter_chars_accepts_bytes_and_str_alike():
    text = "\u00c5ngstr\u00f6m"
    assert list(iter_chars(text.encode("utf-8"))) == list(iter_chars(text))


def test_multibyte_advances_by_sequence_length():
    data = "\u20ac".encode("utf-8")
    assert decode_char(data, 0) == (0x20AC, len(data))


def test_dangling_continuation_byte_passed_through():
    assert decode_char(b"\x80a", 0) == (0x80, 1)


def test_lead_byte_without_continuation_passed_through():
    assert decode_char(b"\xc3\xc3", 0) == (0xC3, 1)


def test_rewind_reverses_forward_walk():
    data = "a\u00e9\u20acb\u4e2d".encode("utf-8")
    starts = []
    pos = 0
    while True:
        char, nxt = decode_char(data, pos)
        if not char:
            break
        starts.append(pos)
        pos = nxt
    backwards = []
    while pos > 0:
        pos = rewind(data, pos)
        backwards.append(pos)
    assert backwards == list(reversed(starts))


def test_rewind_at_start_raises():
    with pytest.raises(ValueError):
        rewind(b"abc", 0)