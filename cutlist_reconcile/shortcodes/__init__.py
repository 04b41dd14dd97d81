"""Shortcode codec and shared pattern vocabulary."""

from .codec import (
    decode,
    decode_sides,
    describe,
    edgeband_material_code,
    encode,
    encode_edgebanding,
    encode_sides,
    parse_token,
    split_overrides,
)
from .vocabulary import EDGE_CODES

__all__ = [
    "EDGE_CODES",
    "decode",
    "decode_sides",
    "describe",
    "edgeband_material_code",
    "encode",
    "encode_edgebanding",
    "encode_sides",
    "parse_token",
    "split_overrides",
]
