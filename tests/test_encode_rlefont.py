import pytest

from mcufont.datafile import DataFile, DictEntry, FontInfo, GlyphEntry
from mcufont.encode_rlefont import (
    EncodedFont,
    EncodingError,
    decode_glyph,
    encode_font,
    get_encoded_size,
)

TESTFILE = (
    "Version 1\n"
    "FontName Sans Serif\n"
    "MaxWidth 4\n"
    "MaxHeight 6\n"
    "BaselineX 1\n"
    "BaselineY 1\n"
    "DictEntry 1 0 0E0E\n"
    "DictEntry 1 0 000000000000\n"
    "DictEntry 1 0 EEEE\n"
    "DictEntry 1 1 0E0E0E0E\n"
    "Glyph 0 4 0E0E0E0E0E0E0E0E0E0E0E0E\n"
    "Glyph 1 4 0E0E0000000000000000000E\n"
    "Glyph 2 4 0000EEEE000EEE0000EEEE00\n"
)


@pytest.fixture
def datafile():
    return DataFile.loads(TESTFILE)


def test_encode(datafile):
    e = encode_font(datafile, False)
    assert len(e.glyphs) == 3
    assert e.rle_dictionary[0] == [0x01, 0xCE, 0x01, 0xCE]
    assert e.rle_dictionary[1] == [0x0C]
    assert e.rle_dictionary[2] == [0xFE]
    assert e.ref_dictionary[0] == [24, 24]
    assert e.glyphs[0] == [27, 27, 27]
    assert e.glyphs[1] == [24, 0, 132, 25, 14]
    assert e.glyphs[2] == [228, 26, 244, 14, 14, 14, 228, 26, 16]


def test_decode(datafile):
    e = encode_font(datafile, False)
    for i in range(3):
        assert e.decode_glyph(i, datafile.fontinfo) == datafile.glyphs[i].data


def test_fast_encoding_decodes_back(datafile):
    e = encode_font(datafile, True)
    assert len(e.glyphs) == len(datafile.glyphs)
    for i, glyph in enumerate(datafile.glyphs):
        assert decode_glyph(e, e.glyphs[i], datafile.fontinfo) == glyph.data


def test_slow_is_not_longer_than_fast(datafile):
    slow = encode_font(datafile, False)
    fast = encode_font(datafile, True)
    for s, f in zip(slow.glyphs, fast.glyphs):
        assert len(s) <= len(f)


@pytest.mark.parametrize("fast", [True, False])
def test_get_encoded_size_matches_method(datafile, fast):
    assert get_encoded_size(datafile, fast) == encode_font(datafile, fast).encoded_size()


def test_empty_encoded_font_has_zero_size():
    assert EncodedFont().encoded_size() == 0


def test_rle_entries_sorted_before_ref_entries():
    info = FontInfo(max_width=2, max_height=2)
    dictionary = [
        DictEntry([0, 15, 0, 15], 1, True),
        DictEntry([0, 15], 1, False),
    ]
    glyphs = [GlyphEntry([0, 15, 0, 15], [65], 2)]
    df = DataFile(dictionary, glyphs, info)
    e = encode_font(df, False)
    assert len(e.rle_dictionary) == 1
    assert len(e.ref_dictionary) == 1
    assert e.decode_glyph(0, info) == [0, 15, 0, 15]


def test_fill_zeros_pads_to_glyph_size():
    info = FontInfo(max_width=2, max_height=2)
    assert decode_glyph(EncodedFont(), [15, 16], info) == [15, 0, 0, 0]


def test_unknown_code_raises():
    with pytest.raises(EncodingError):
        decode_glyph(EncodedFont(), [17], FontInfo(max_width=1, max_height=1))


def test_blank_glyph_round_trip():
    info = FontInfo(max_width=3, max_height=3)
    df = DataFile([], [GlyphEntry([0] * 9, [32], 3)], info)
    for fast in (True, False):
        e = encode_font(df, fast)
        assert e.decode_glyph(0, info) == [0] * 9