"""Shortcode vocabulary and free-text pattern tables.

Two kinds of tables live here:

- Code tables for the compact shortcode dialect (side codes such as
  ``2L``, ``4S``, ``L2W``).
- Ordered (regex, canonical code) tables describing how people write the
  same things in free text ("all edges", "white melamine", "bpg"). The
  correction diff detector scans them top to bottom and the first match
  wins, so ORDER IS PART OF THE CONTRACT.

All free-text patterns expect lowercased input.

Usage:
    from cutlist_reconcile.shortcodes.vocabulary import EDGE_CODES, EDGE_NOTATION_PATTERNS

    EDGE_CODES["2L"]   # ("L1", "L2")
"""

import re
from typing import Dict, List, Pattern, Tuple

from ..models.operations import EDGE_SIDES

# ===========================================================================
# Side codes
# ===========================================================================

# Code -> sides it stands for
EDGE_CODES: Dict[str, Tuple[str, ...]] = {
    # No banding
    "0": (),
    "-": (),
    "NONE": (),

    # Single edges
    "L": ("L1",),
    "L1": ("L1",),
    "L2": ("L2",),
    "W": ("W1",),
    "W1": ("W1",),
    "W2": ("W2",),

    # Both of one dimension
    "2L": ("L1", "L2"),
    "2W": ("W1", "W2"),

    # Three edges
    "L2W": ("L1", "W1", "W2"),      # 1 long + 2 width
    "L2W1": ("L1", "W1", "W2"),     # alias for L2W
    "2L1W": ("L1", "L2", "W1"),     # 2 long + 1 width
    "2LW": ("L1", "L2", "W1"),      # alias for 2L1W

    # All four edges
    "2L2W": EDGE_SIDES,
    "ALL": EDGE_SIDES,
    "4": EDGE_SIDES,
    "4S": EDGE_SIDES,
}

# Side set -> abbreviation used when encoding. Side sets not listed here
# are encoded as the sorted concatenation of their codes ("L1W1").
SIDE_ABBREVIATIONS: List[Tuple[frozenset, str]] = [
    (frozenset(EDGE_SIDES), "4S"),
    (frozenset(("L1", "L2")), "2L"),
    (frozenset(("W1", "W2")), "2W"),
]

# ===========================================================================
# Free-text patterns (lowercased input)
# ===========================================================================

# "300 x 600", "300x600", "300 × 600"
DIMENSION_PATTERN: Pattern = re.compile(r'(\d+)\s*[×x]\s*(\d+)')

# Explicit quantity marker: "qty 2", "q3", "x4", "×2"
QUANTITY_MARKER_PATTERN: Pattern = re.compile(r'\b(?:qty|q|x|×)\s*\d+')

# Edge notation, priority ordered
EDGE_NOTATION_PATTERNS: List[Tuple[Pattern, str]] = [
    (re.compile(r'\b1l\b'), "L1"),
    (re.compile(r'\b2l\b'), "L2"),
    (re.compile(r'\b1w\b'), "W1"),
    (re.compile(r'\b2w\b'), "W2"),
    (re.compile(r'\beb\s*all\b'), "EB:4"),
    (re.compile(r'\ball\s*edges?\b'), "EB:4"),
    (re.compile(r'\b2l\s*2w\b'), "EB:4"),
    (re.compile(r'\b4\s*edges?\b'), "EB:4"),
]

# Material names, priority ordered
MATERIAL_PATTERNS: List[Tuple[Pattern, str]] = [
    (re.compile(r'\bwhite\s*(?:mel(?:amine)?|board)?\b'), "W"),
    (re.compile(r'\bwm\b'), "W"),
    (re.compile(r'\bply(?:wood)?\b'), "Ply"),
    (re.compile(r'\bblack\b'), "B"),
    (re.compile(r'\bmdf\b'), "MDF"),
    (re.compile(r'\boak\b'), "Oak"),
]

# Groove tokens, priority ordered. The canonical code is a display hint;
# the detector reports the part's actual groove sides.
GROOVE_TOKEN_PATTERNS: List[Tuple[Pattern, str]] = [
    (re.compile(r'\bgl\b'), "Groove L"),
    (re.compile(r'\bgw\b'), "Groove W"),
    (re.compile(r'\bgrv?\b'), "Groove"),
    (re.compile(r'\bback\s*groove\b'), "BPG"),
    (re.compile(r'\bbpg\b'), "BPG"),
]

# Override parameter prefixes -> override name ("GL@d10w4")
OVERRIDE_PREFIXES: Dict[str, str] = {
    "d": "depth",
    "depth": "depth",
    "t": "depth",           # tape thickness is stored as depth
    "thk": "depth",
    "thickness": "depth",
    "w": "width",
    "width": "width",
    "o": "offset",
    "off": "offset",
    "offset": "offset",
    "dia": "diameter",
    "diameter": "diameter",
    "c": "count",
    "cnt": "count",
    "count": "count",
    "cc": "centers",
    "ctr": "centers",
    "centers": "centers",
}
