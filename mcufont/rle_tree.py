"""Dictionary lookup tree and the encoders built on it.

The dictionary entries form a tree keyed by pixel alpha.  With suffix
links filled in it supports an Aho-Corasick style search that, combined
with a breadth first search, finds the shortest reference encoding of a
pixel string.  Without suffix links only a greedy encoding is possible.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from .datafile import DictEntry
from .rlefont import (
    DICT_START,
    DICT_START2BIT,
    DICT_START3BIT,
    DICT_START4BIT,
    DICT_START5BIT,
    DICT_START6BIT,
    DICT_START7BIT,
    REF_FILLZEROS,
    RLE_64ZEROS,
    RLE_ONES,
    RLE_SHADE,
    RLE_ZEROS,
)

__all__ = [
    "DictTreeNode",
    "fillentry_bitcount",
    "encode_rle",
    "build_tree",
    "encode_ref",
]

_UNREACHABLE = 9999999


def _check_alpha(pixel: int) -> None:
    if not 0 <= pixel <= 15:
        raise ValueError(f"invalid pixel alpha: {pixel}")


def fillentry_bitcount(index: int) -> int:
    """Number of pixels encoded directly by the fill entry ``index``."""
    if index >= DICT_START2BIT:
        return 2
    if index >= DICT_START3BIT:
        return 3
    if index >= DICT_START4BIT:
        return 4
    if index >= DICT_START5BIT:
        return 5
    if index >= DICT_START6BIT:
        return 6
    return 7


def _fillentry_pixels(index: int) -> list[int]:
    bits = index - DICT_START7BIT
    return [15 if bits & (1 << j) else 0 for j in range(fillentry_bitcount(index))]


def _runs(pixels: Sequence[int]) -> Iterator[tuple[int, int]]:
    pos = 0
    while pos < len(pixels):
        pixel = pixels[pos]
        count = 1
        while pos + count < len(pixels) and pixels[pos + count] == pixel:
            count += 1
        yield pixel, count
        pos += count


def encode_rle(pixels: Sequence[int]) -> list[int]:
    """Run length encode a dictionary entry."""
    result: list[int] = []
    for pixel, count in _runs(pixels):
        _check_alpha(pixel)
        if pixel == 0:
            # Long runs use multiples of 64 first, the rest plain zero codes.
            while count >= 64:
                c = 64 if count > 4096 else count // 64
                result.append(RLE_64ZEROS | (c - 1))
                count -= c * 64
            if count:
                result.append(RLE_ZEROS | count)
        elif pixel == 15:
            while count:
                c = min(count, 64)
                result.append(RLE_ONES | (c - 1))
                count -= c
        else:
            while count:
                c = min(count, 4)
                result.append(RLE_SHADE | ((c - 1) << 4) | pixel)
                count -= c
    return result


class DictTreeNode:
    """A node of the dictionary tree.

    ``index`` is the dictionary code ending here, or -1 for intermediate
    nodes; ``length`` is the depth; ``ref`` marks reference encoded
    entries; ``suffix`` points to the longest proper suffix in the tree.
    """

    __slots__ = ("index", "ref", "length", "suffix", "_children")

    def __init__(self, index: int = -1, ref: bool = False, length: int = 0):
        self.index = index
        self.ref = ref
        self.length = length
        self.suffix: DictTreeNode | None = None
        self._children: list[DictTreeNode | None] = [None] * 16

    def child(self, pixel: int) -> DictTreeNode | None:
        """The child for the given alpha, or None."""
        _check_alpha(pixel)
        return self._children[pixel]

    def set_child(self, pixel: int, node: DictTreeNode | None) -> None:
        """Set the child for the given alpha."""
        _check_alpha(pixel)
        self._children[pixel] = node

    def _items(self) -> Iterator[tuple[int, DictTreeNode]]:
        for pixel, node in enumerate(self._children):
            if node is not None:
                yield pixel, node


def _add_entry(root: DictTreeNode, entry: Sequence[int], index: int, ref: bool) -> DictTreeNode:
    node = root
    for pixel in entry:
        branch = node.child(pixel)
        if branch is None:
            branch = DictTreeNode()
            node.set_child(pixel, branch)
        node = branch
    # A non-ref entry is preferred, as it can be used in more places.
    if node.index < 0 or (node.ref and not ref):
        node.index = index
        node.ref = ref
        node.length = len(entry)
    return node


def _find_node(root: DictTreeNode, entry: Sequence[int]) -> DictTreeNode | None:
    node: DictTreeNode | None = root
    for pixel in entry:
        node = node.child(pixel)
        if node is None:
            return None
    return node


def _fill_suffixes(root: DictTreeNode) -> None:
    stack: list[tuple[DictTreeNode, tuple[int, ...]]] = [(root, ())]
    while stack:
        node, entry = stack.pop()
        node.suffix = root
        for i in range(1, len(entry)):
            found = _find_node(root, entry[i:])
            if found is not None:
                node.suffix = found
                break
        for pixel, child in node._items():
            stack.append((child, entry + (pixel,)))


def build_tree(dictionary: Iterable[DictEntry], fast: bool = True) -> DictTreeNode:
    """Build the lookup tree for a dictionary and return its root.

    Entries are numbered from ``DICT_START`` and read up to the first empty
    one.  Unless ``fast``, the fill entries and suffix links needed for the
    optimal encoding are added too.
    """
    root = DictTreeNode()
    for alpha in range(16):
        root.set_child(alpha, DictTreeNode(alpha, False, 1))

    index = DICT_START
    for entry in dictionary:
        if not entry.replacement:
            break
        _add_entry(root, entry.replacement, index, entry.ref_encode)
        index += 1

    if not fast:
        for code in range(index, 256):
            _add_entry(root, _fillentry_pixels(code), code, False)
        _fill_suffixes(root)

    return root


@dataclass(frozen=True)
class _Link:
    previous: int = 0
    index: int = -1
    length: int = _UNREACHABLE


def _next_suffix(node: DictTreeNode) -> DictTreeNode:
    if node.suffix is None:
        raise ValueError("dictionary tree has no suffix links; build it with fast=False")
    return node.suffix


def _encode_ref_slow(pixels: Sequence[int], root: DictTreeNode, is_glyph: bool) -> list[int]:
    n = len(pixels)
    chain = [_Link() for _ in range(n + 1)]
    chain[0] = _Link(0, 0, 0)

    node = root
    for pos, pixel in enumerate(pixels):
        branch = node.child(pixel)
        while branch is None:
            node = _next_suffix(node)
            branch = node.child(pixel)
        node = branch

        suffix = node
        while suffix is not root:
            if suffix.index >= 0 and (is_glyph or not suffix.ref):
                previous = pos + 1 - suffix.length
                length = chain[previous].length + 1
                if length < chain[pos + 1].length:
                    chain[pos + 1] = _Link(previous, suffix.index, length)
            suffix = _next_suffix(suffix)

    if is_glyph:
        for pos in range(n - 1, 0, -1):
            if pixels[pos] != 0:
                break
            length = chain[pos].length + 1
            if length <= chain[n].length:
                chain[n] = _Link(pos, REF_FILLZEROS, length)

    result = []
    pos = n
    for _ in range(chain[n].length):
        result.append(chain[pos].index)
        pos = chain[pos].previous
    result.reverse()
    return result


def _walk_tree(root: DictTreeNode, pixels: Sequence[int], start: int, is_glyph: bool) -> tuple[int, int]:
    """Longest usable match from ``start``: ``(length, index)``."""
    best_length = 0
    index = -1
    node: DictTreeNode | None = root
    for length, pixel in enumerate(pixels[start:], start=1):
        node = node.child(pixel)
        if node is None:
            break
        if (is_glyph or not node.ref) and node.index >= 0:
            index = node.index
            best_length = length
    if index < 0:
        raise ValueError("walk_tree failed to find a valid encoding")
    return best_length, index


def _encode_ref_fast(pixels: Sequence[int], root: DictTreeNode, is_glyph: bool) -> list[int]:
    end = len(pixels)
    if is_glyph:
        while end > 0 and pixels[end - 1] == 0:
            end -= 1

    result = []
    pos = 0
    while pos < end:
        length, index = _walk_tree(root, pixels, pos, is_glyph)
        pos += length
        result.append(index)

    if pos < len(pixels):
        result.append(REF_FILLZEROS)
    return result


def encode_ref(pixels: Sequence[int], tree: DictTreeNode, is_glyph: bool, fast: bool = True) -> list[int]:
    """Reference encode a glyph or dictionary entry.

    Reference encoded dictionary entries are only used inside glyphs.  The
    fast encoder is greedy; the other finds the shortest encoding and
    needs a tree built with ``fast=False``.
    """
    if fast:
        return _encode_ref_fast(pixels, tree, is_glyph)
    return _encode_ref_slow(pixels, tree, is_glyph)