"""Encode operation sets as compact shortcodes, and recognise known codes.

Token formats, emitted in this order and space-joined:

    EB:<material>:<sides>              EB:W:4S, EB:WH08:L1W1
    GR:<type>:<depth>x<width>@<side>   GR:DADO:8x4@W1
    H:<type>@<face>                    H:SYS32@left
    CNC:<type>                         CNC:POCKET1

Decoding is table driven: it recognises these four shapes and the side
codes in EDGE_CODES, nothing more.

Usage:
    from cutlist_reconcile.shortcodes import encode, decode_sides

    encode(ops)            # "EB:EB:2L GR:BPG:8x4@W2"
    decode_sides("2L1W")   # ("L1", "L2", "W1")
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

from ..catalog import EMPTY_CATALOG, OperationTypeCatalog
from ..config import Config, default_config
from ..models.operations import (
    CncEntry,
    Edgebanding,
    GrooveEntry,
    HoleEntry,
    OperationSet,
)
from ..utils.numbers import format_number
from .vocabulary import EDGE_CODES, OVERRIDE_PREFIXES, SIDE_ABBREVIATIONS

logger = logging.getLogger(__name__)

TOKEN_KINDS = ("EB", "GR", "H", "CNC")

_GROOVE_CODE = re.compile(r'^([^:@\s]+):(\d+(?:\.\d+)?)x(\d+(?:\.\d+)?)@(\S+)$', re.IGNORECASE)
_HOLE_CODE = re.compile(r'^([^:@\s]+)@(\S+)$')
_EDGEBAND_CODE = re.compile(r'^([^:\s]+):(\S+)$')
_OVERRIDE_PART = re.compile(r'([a-z]+)(\d+(?:\.\d+)?)')
_BARE_NUMBER = re.compile(r'^\d+(?:\.\d+)?$')


# ===========================================================================
# Encoding
# ===========================================================================

def encode_sides(sides: Iterable[str]) -> str:
    """
    Abbreviate a set of banded sides.

    4 sides -> "4S", both long -> "2L", both short -> "2W", anything else
    -> sorted concatenation ("L1W1"). No sides -> "".
    """
    side_set = frozenset(sides)
    if not side_set:
        return ""
    for members, code in SIDE_ABBREVIATIONS:
        if side_set == members:
            return code
    return "".join(sorted(side_set))


def edgeband_material_code(
    edgeband_id: Optional[str],
    catalog: OperationTypeCatalog = EMPTY_CATALOG,
    config: Config = default_config,
) -> str:
    """Material slot of an EB token: catalog code, else truncated id, else default."""
    code = catalog.edgeband_code(edgeband_id)
    if code:
        return code
    if edgeband_id:
        return edgeband_id[:config.edgeband_code_length]
    return config.default_edgeband_code


def encode_edgebanding(
    edgebanding: Optional[Edgebanding],
    catalog: OperationTypeCatalog = EMPTY_CATALOG,
    config: Config = default_config,
) -> str:
    """EB token, or "" when no side is banded."""
    if edgebanding is None:
        return ""
    sides_code = encode_sides(edgebanding.applied_sides())
    if not sides_code:
        return ""
    material = edgeband_material_code(edgebanding.edgeband_id, catalog, config)
    return f"EB:{material}:{sides_code}"


def encode_groove(groove: GrooveEntry) -> str:
    return f"GR:{groove.type_code}:{format_number(groove.depth_mm)}x{format_number(groove.width_mm)}@{groove.side}"


def encode_hole(hole: HoleEntry) -> str:
    return f"H:{hole.type_code}@{hole.face}"


def encode_cnc(cnc: CncEntry) -> str:
    return f"CNC:{cnc.type_code}"


def encode(
    ops: Optional[OperationSet],
    catalog: OperationTypeCatalog = EMPTY_CATALOG,
    config: Config = default_config,
) -> str:
    """
    Encode an operation set as space-joined tokens.

    Component order is fixed (edging, grooves, holes, CNC); list items keep
    their order. Pure and deterministic.
    """
    if ops is None:
        return ""

    tokens: List[str] = []

    eb_token = encode_edgebanding(ops.edgebanding, catalog, config)
    if eb_token:
        tokens.append(eb_token)

    tokens.extend(encode_groove(g) for g in ops.grooves)
    tokens.extend(encode_hole(h) for h in ops.holes)
    tokens.extend(encode_cnc(c) for c in ops.cnc)

    return " ".join(tokens)


# ===========================================================================
# Table lookup / decoding
# ===========================================================================

def decode_sides(code: str) -> Optional[Tuple[str, ...]]:
    """Sides for a known side code ("2L", "4s", "L2W"); None if unknown."""
    if code is None:
        return None
    return EDGE_CODES.get(code.strip().upper())


def parse_token(token: str) -> Optional[Tuple[str, str]]:
    """
    Split a token into (kind, code).

    Example:
        parse_token("GR:DADO:8x4@W1")  -> ("GR", "DADO:8x4@W1")
        parse_token("hello")           -> None
    """
    if not token or ":" not in token:
        return None
    kind, code = token.split(":", 1)
    kind = kind.strip().upper()
    if kind not in TOKEN_KINDS or not code:
        return None
    return kind, code


def decode(text: str) -> OperationSet:
    """
    Recognise canonical tokens in a shortcode string.

    Tokens that do not match a known shape are skipped. The EB material
    slot becomes ``edgeband_id`` unless it is the default placeholder.
    """
    ops = OperationSet()
    if not text:
        return ops

    for token in text.split():
        parsed = parse_token(token)
        if parsed is None:
            logger.debug("Skipping unrecognised shortcode token '%s'", token)
            continue
        kind, code = parsed

        if kind == "EB":
            match = _EDGEBAND_CODE.match(code)
            sides = decode_sides(match.group(2)) if match else None
            if sides is None:
                logger.debug("Unknown side code in '%s'", token)
                continue
            material = match.group(1)
            ops.edgebanding = Edgebanding(
                sides={side: True for side in sides},
                edgeband_id=None if material == default_config.default_edgeband_code else material,
            )

        elif kind == "GR":
            match = _GROOVE_CODE.match(code)
            if not match:
                logger.debug("Malformed groove token '%s'", token)
                continue
            type_code, depth, width, side = match.groups()
            ops.grooves.append(GrooveEntry(
                type_code=type_code,
                side=side.upper(),
                width_mm=float(width),
                depth_mm=float(depth),
            ))

        elif kind == "H":
            match = _HOLE_CODE.match(code)
            if not match:
                logger.debug("Malformed hole token '%s'", token)
                continue
            ops.holes.append(HoleEntry(type_code=match.group(1), face=match.group(2)))

        else:
            ops.cnc.append(CncEntry(type_code=code))

    return ops


def split_overrides(raw: str) -> Tuple[str, Dict[str, float]]:
    """
    Split a code with ``@`` overrides into base code and override values.

    Supported formats after the @:
    - "10"       -> {"value": 10}
    - "d10"      -> {"depth": 10}
    - "d10w4"    -> {"depth": 10, "width": 4}
    - "dia8"     -> {"diameter": 8}
    - "cc128"    -> {"centers": 128}
    - "c5"       -> {"count": 5}
    Unknown prefixes are kept under their own name.

    Example:
        split_overrides("gl@d10w4")  -> ("GL", {"depth": 10.0, "width": 4.0})
    """
    raw = (raw or "").strip()
    if "@" not in raw:
        return raw.upper(), {}

    base, override_str = raw.split("@", 1)
    override_str = override_str.strip().lower()
    overrides: Dict[str, float] = {}

    if _BARE_NUMBER.match(override_str):
        overrides["value"] = float(override_str)
        return base.strip().upper(), overrides

    for prefix, number in _OVERRIDE_PART.findall(override_str):
        name = OVERRIDE_PREFIXES.get(prefix, prefix)
        value = float(number)
        overrides[name] = float(round(value)) if name == "count" else value

    return base.strip().upper(), overrides


# ===========================================================================
# Human-readable notes
# ===========================================================================

def describe(
    ops: Optional[OperationSet],
    catalog: OperationTypeCatalog = EMPTY_CATALOG,
) -> str:
    """
    Render operations as notes text using catalog display names.

    Example:
        "Edging: White 0.8mm on L1,L2 | Groove: Dado 4x8mm on W1 | Holes: System 32 on F"
    """
    if ops is None:
        return ""

    notes: List[str] = []

    if ops.edgebanding and ops.edgebanding.applied_sides():
        sides = ops.edgebanding.applied_sides()
        eb_id = ops.edgebanding.edgeband_id
        material = catalog.name_for("edgeband", catalog.edgeband_code(eb_id) or eb_id) if eb_id else "EB"
        notes.append(f"Edging: {material} on {','.join(sides)}")

    if ops.grooves:
        grooves = ", ".join(
            f"{catalog.name_for('groove', g.type_code)} "
            f"{format_number(g.width_mm)}x{format_number(g.depth_mm)}mm on {g.side}"
            for g in ops.grooves
        )
        notes.append(f"Groove: {grooves}")

    if ops.holes:
        holes = ", ".join(f"{catalog.name_for('hole', h.type_code)} on {h.face}" for h in ops.holes)
        notes.append(f"Holes: {holes}")

    if ops.cnc:
        notes.append("CNC: " + ", ".join(catalog.name_for("cnc", c.type_code) for c in ops.cnc))

    return " | ".join(notes)
