"""Data models for the cutlist reconciliation layer."""

from .operations import (
    EDGE_SIDES,
    CncEntry,
    Edgebanding,
    GrooveEntry,
    HoleEntry,
    OperationSet,
)
from .part import Part, PartStatus, Size

__all__ = [
    "EDGE_SIDES",
    "CncEntry",
    "Edgebanding",
    "GrooveEntry",
    "HoleEntry",
    "OperationSet",
    "Part",
    "PartStatus",
    "Size",
]
