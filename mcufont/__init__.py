"""Compact bitmap font decoding, text layout and run-length font encoding."""

__version__ = "0.1.0"

__all__ = [
    "bwfont",
    "datafile",
    "encode_rlefont",
    "encoding",
    "font",
    "justify",
    "kerning",
    "rle_tree",
    "rlefont",
    "scaledfont",
    "wordwrap",
]