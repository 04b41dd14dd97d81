"""Operation set model: edgebanding, grooves, holes and CNC routing.

Edge identifiers for a rectangular part:
    L1 = first long edge (the "front" or visible edge)
    L2 = second long edge (the "back" edge)
    W1 = first width edge (the "left" edge)
    W2 = second width edge (the "right" edge)

An OperationSet doubles as a *partial* set for suggestions: an
``edgebanding`` of None means "not specified" and empty lists mean
"nothing to add".
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..utils.numbers import to_number

logger = logging.getLogger(__name__)

EDGE_SIDES = ("L1", "L2", "W1", "W2")


@dataclass
class Edgebanding:
    """
    Which edges receive edge tape.

    Attributes:
        sides: Side code -> applied flag. Sides absent from the mapping
            are treated as not banded.
        edgeband_id: Optional reference into the edgeband library
    """
    sides: Dict[str, bool] = field(default_factory=dict)
    edgeband_id: Optional[str] = None

    def applied_sides(self) -> List[str]:
        """Sides with tape applied, in lexicographic order."""
        return sorted(side for side, applied in self.sides.items() if applied)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"sides": dict(self.sides)}
        if self.edgeband_id:
            d["edgeband_id"] = self.edgeband_id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edgebanding":
        """
        Accepts a side map, a list of banded sides, or a side code.

        Example:
            {"sides": {"L1": True}}  {"sides": ["L1", "W1"]}  {"sides": "2L"}
        """
        sides = data.get("sides") or {}
        if isinstance(sides, str):
            from ..shortcodes.vocabulary import EDGE_CODES

            banded = EDGE_CODES.get(sides.strip().upper())
            if banded is None:
                logger.warning("Unknown edge side code '%s', ignoring", sides)
                sides = {}
            else:
                sides = {side: side in banded for side in EDGE_SIDES}
        elif isinstance(sides, (list, tuple)):
            # ["L1", "W1"] shorthand
            sides = {str(side): True for side in sides}
        elif not isinstance(sides, dict):
            logger.warning("Ignoring edge sides of type %s", type(sides).__name__)
            sides = {}
        return cls(
            sides={str(k): bool(v) for k, v in sides.items()},
            edgeband_id=data.get("edgeband_id"),
        )


@dataclass
class GrooveEntry:
    """A groove running parallel to one edge (e.g. a back panel groove)."""
    type_code: str
    side: str
    width_mm: float = 4.0
    depth_mm: float = 8.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type_code": self.type_code,
            "width_mm": self.width_mm,
            "depth_mm": self.depth_mm,
            "side": self.side,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GrooveEntry":
        width = to_number(data.get("width_mm"))
        depth = to_number(data.get("depth_mm"))
        return cls(
            type_code=str(data.get("type_code") or ""),
            side=str(data.get("side") or ""),
            width_mm=width if width is not None else 4.0,
            depth_mm=depth if depth is not None else 8.0,
        )


@dataclass
class HoleEntry:
    """A drilling pattern on one face (e.g. System 32 on the front)."""
    type_code: str
    face: str = "F"

    def to_dict(self) -> Dict[str, Any]:
        return {"type_code": self.type_code, "face": self.face}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HoleEntry":
        return cls(
            type_code=str(data.get("type_code") or ""),
            face=str(data.get("face") or "F"),
        )


@dataclass
class CncEntry:
    """A CNC routing program reference."""
    type_code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type_code": self.type_code}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CncEntry":
        return cls(type_code=str(data.get("type_code") or ""))


@dataclass
class OperationSet:
    """
    All manufacturing operations attached to a part.

    Attributes:
        edgebanding: Edge tape configuration (None = not specified)
        grooves: Groove operations, in entry order
        holes: Drilling patterns, in entry order
        cnc: CNC operations, in entry order
    """
    edgebanding: Optional[Edgebanding] = None
    grooves: List[GrooveEntry] = field(default_factory=list)
    holes: List[HoleEntry] = field(default_factory=list)
    cnc: List[CncEntry] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when no side is banded and no list carries an entry."""
        banded = bool(self.edgebanding and self.edgebanding.applied_sides())
        return not (banded or self.grooves or self.holes or self.cnc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        d: Dict[str, Any] = {}
        if self.edgebanding is not None:
            d["edgebanding"] = self.edgebanding.to_dict()
        if self.grooves:
            d["grooves"] = [g.to_dict() for g in self.grooves]
        if self.holes:
            d["holes"] = [h.to_dict() for h in self.holes]
        if self.cnc:
            d["cnc"] = [c.to_dict() for c in self.cnc]
        return d

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "OperationSet":
        """Build from a store record; entries that are not objects are skipped."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ignoring ops of type %s", type(data).__name__)
            return cls()
        edgebanding = data.get("edgebanding") or data.get("edging")
        return cls(
            edgebanding=Edgebanding.from_dict(edgebanding) if isinstance(edgebanding, dict) else None,
            grooves=[GrooveEntry.from_dict(g) for g in _records(data.get("grooves"))],
            holes=[HoleEntry.from_dict(h) for h in _records(data.get("holes"))],
            cnc=[CncEntry.from_dict(c) for c in _records(data.get("cnc"))],
        )


def _records(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
