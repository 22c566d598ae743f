import pytest

from mcufont.datafile import DataFile, DictEntry
from mcufont.rle_tree import (
    DictTreeNode,
    build_tree,
    encode_ref,
    encode_rle,
    fillentry_bitcount,
)
from mcufont.rlefont import DICT_START, REF_FILLZEROS, RLE_64ZEROS

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


@pytest.mark.parametrize(
    "index, bits",
    [(4, 7), (131, 7), (132, 6), (196, 5), (228, 4), (244, 3), (252, 2), (255, 2)],
)
def test_fillentry_bitcount(index, bits):
    assert fillentry_bitcount(index) == bits


def test_encode_rle_dictionary(datafile):
    assert encode_rle(datafile.dictionary[0].replacement) == [0x01, 0xCE, 0x01, 0xCE]
    assert encode_rle(datafile.dictionary[1].replacement) == [0x0C]
    assert encode_rle(datafile.dictionary[2].replacement) == [0xFE]


def test_encode_rle_long_zero_runs():
    assert encode_rle([0] * 64) == [RLE_64ZEROS]
    assert encode_rle([0] * 100) == [RLE_64ZEROS, 36]


def test_encode_rle_full_run_of_ones():
    assert encode_rle([15] * 64) == [0xBF]


def test_encode_rle_invalid_alpha():
    with pytest.raises(ValueError):
        encode_rle([0, 16])


def test_ref_dictionary_entry(datafile):
    tree = build_tree(datafile.dictionary, False)
    assert encode_ref(datafile.dictionary[3].replacement, tree, False, False) == [24, 24]


@pytest.mark.parametrize(
    "index, expected",
    [
        (0, [27, 27, 27]),
        (1, [24, 0, 132, 25, 14]),
        (2, [228, 26, 244, 14, 14, 14, 228, 26, 16]),
    ],
)
def test_glyph_encoding_optimal(datafile, index, expected):
    tree = build_tree(datafile.dictionary, False)
    assert encode_ref(datafile.glyphs[index].data, tree, True, False) == expected


def test_glyph_encoding_fast(datafile):
    tree = build_tree(datafile.dictionary, True)
    assert encode_ref(datafile.glyphs[0].data, tree, True, True) == [27, 27, 27]
    assert encode_ref(datafile.dictionary[3].replacement, tree, False, True) == [24, 24]


def test_optimal_is_never_longer_than_fast(datafile):
    fast_tree = build_tree(datafile.dictionary, True)
    slow_tree = build_tree(datafile.dictionary, False)
    for glyph in datafile.glyphs:
        fast = encode_ref(glyph.data, fast_tree, True, True)
        slow = encode_ref(glyph.data, slow_tree, True, False)
        assert len(slow) <= len(fast)


def test_fast_fills_trailing_zeros():
    tree = build_tree([], True)
    assert encode_ref([15, 0, 0], tree, True, True) == [15, REF_FILLZEROS]


def test_root_children_encode_alphas():
    tree = build_tree([], True)
    for alpha in range(16):
        node = tree.child(alpha)
        assert (node.index, node.length, node.ref) == (alpha, 1, False)


def test_node_rejects_invalid_alpha():
    node = DictTreeNode()
    with pytest.raises(ValueError):
        node.child(16)
    with pytest.raises(ValueError):
        node.set_child(16, DictTreeNode())


def test_set_child_round_trip():
    node = DictTreeNode()
    child = DictTreeNode(index=30)
    node.set_child(7, child)
    assert node.child(7) is child
    assert node.child(6) is None


def test_slow_encoding_needs_suffix_links(datafile):
    tree = build_tree(datafile.dictionary, True)
    with pytest.raises(ValueError):
        encode_ref(datafile.glyphs[1].data, tree, True, False)


def test_suffix_links_of_root_children():
    tree = build_tree([], False)
    assert tree.child(0).suffix is tree
    assert tree.child(15).suffix is tree


def test_non_ref_entry_replaces_ref_entry():
    dictionary = [DictEntry([0, 15], ref_encode=True), DictEntry([0, 15])]
    tree = build_tree(dictionary, True)
    node = tree.child(0).child(15)
    assert node.index == DICT_START + 1
    assert node.ref is False


def test_empty_entry_ends_dictionary():
    dictionary = [DictEntry([0, 15]), DictEntry(), DictEntry([15, 0])]
    tree = build_tree(dictionary, True)
    assert tree.child(0).child(15).index == DICT_START
    assert tree.child(15).child(0) is None