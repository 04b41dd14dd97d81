"""Part record model.

A Part is one rectangular panel entry as held by the external session
store. Records arrive as dicts using the store's keys::

    {
        "part_id": "p-1",
        "label": "Side panel",
        "size": {"L": 720, "W": 560},
        "thickness_mm": 18,
        "qty": 2,
        "material_id": "W",
        "ops": {...},
        "_originalText": "2x side 720 x 560 white",
        "_status": "pending",
        "project_code": "K-104", "batch_id": "b1", "page_number": 1,
    }

``_originalText`` is provenance for diffing only and ``_status`` is review
state; neither is canonical cut data.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.numbers import to_number
from .operations import OperationSet

logger = logging.getLogger(__name__)


class PartStatus(Enum):
    """Review state of a part in the intake inbox."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Size:
    """Panel size in millimetres. L is conventionally >= W."""
    L: float
    W: float

    def to_dict(self) -> Dict[str, float]:
        return {"L": self.L, "W": self.W}


@dataclass
class Part:
    """
    One panel entry of a cutlist.

    Attributes:
        part_id: Unique id, stable until a merge collapses the part
        size: Length/width in mm (None when extraction found none)
        thickness_mm: Board thickness in mm
        qty: Number of identical panels
        label: Free-text part name
        material_id: Material reference
        ops: Operation set
        original_text: Raw source snippet (``_originalText``)
        status: Review state (``_status``)
        project_code: Project code shared by the pages of one submission
        batch_id: Page/file batch the part was ingested with
        page_number: 1-based page within the submission
        total_pages: Declared page count of the submission
        source_file: File name the batch came from
        confidence: Extraction confidence reported by the upstream step
        invalid: Set by validation when the record breaks an invariant
        validation_error: Reasons joined with "; " (``_validation_error``)
    """

    part_id: str
    size: Optional[Size] = None
    thickness_mm: Optional[float] = None
    qty: int = 1
    label: Optional[str] = None
    material_id: Optional[str] = None
    ops: OperationSet = field(default_factory=OperationSet)
    original_text: Optional[str] = None
    status: PartStatus = PartStatus.PENDING

    # Multi-page provenance
    project_code: Optional[str] = None
    batch_id: Optional[str] = None
    page_number: Optional[int] = None
    total_pages: Optional[int] = None
    source_file: Optional[str] = None

    confidence: Optional[float] = None

    # Set by validation, never by extraction
    invalid: bool = False
    validation_error: Optional[str] = None

    @property
    def is_rejected(self) -> bool:
        return self.status is PartStatus.REJECTED

    def evolve(self, **changes: Any) -> "Part":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the store's record shape."""
        d: Dict[str, Any] = {
            "part_id": self.part_id,
            "size": self.size.to_dict() if self.size else None,
            "thickness_mm": self.thickness_mm,
            "qty": self.qty,
            "material_id": self.material_id,
            "ops": self.ops.to_dict(),
            "_status": self.status.value,
        }
        optional = {
            "label": self.label,
            "_originalText": self.original_text,
            "project_code": self.project_code,
            "batch_id": self.batch_id,
            "page_number": self.page_number,
            "total_pages": self.total_pages,
            "source_file": self.source_file,
            "confidence": self.confidence,
            "_validation_error": self.validation_error,
        }
        d.update({k: v for k, v in optional.items() if v is not None})
        if self.invalid:
            d["_invalid"] = True
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Part":
        """
        Build a Part from a store record.

        Accepts ``size: {L, W}`` or flat ``L``/``W`` keys. Values that are
        not numeric are kept as None (or qty 0) so validation can flag them
        instead of failing the whole load.
        """
        size_data = data.get("size")
        if isinstance(size_data, dict):
            length, width = to_number(size_data.get("L")), to_number(size_data.get("W"))
        else:
            length, width = to_number(data.get("L")), to_number(data.get("W"))
        size = Size(length, width) if length is not None and width is not None else None

        qty_raw = data.get("qty")
        if qty_raw is None:
            qty = 1
        else:
            qty_number = to_number(qty_raw)
            qty = int(qty_number) if qty_number is not None and qty_number.is_integer() else 0

        status_raw = data.get("_status", data.get("status")) or PartStatus.PENDING.value
        try:
            status = PartStatus(str(status_raw).lower())
        except ValueError:
            logger.warning("Unknown status '%s' on part %s, treating as pending",
                           status_raw, data.get("part_id"))
            status = PartStatus.PENDING

        page_number = to_number(data.get("page_number"))
        total_pages = to_number(data.get("total_pages"))

        return cls(
            part_id=str(data.get("part_id") or data.get("id") or ""),
            size=size,
            thickness_mm=to_number(data.get("thickness_mm")),
            qty=qty,
            label=data.get("label"),
            material_id=data.get("material_id"),
            ops=OperationSet.from_dict(data.get("ops")),
            original_text=data.get("_originalText", data.get("original_text")),
            status=status,
            project_code=data.get("project_code"),
            batch_id=data.get("batch_id"),
            page_number=int(page_number) if page_number is not None else None,
            total_pages=int(total_pages) if total_pages is not None else None,
            source_file=data.get("source_file"),
            confidence=to_number(data.get("confidence")),
            invalid=bool(data.get("_invalid", False)),
            validation_error=data.get("_validation_error"),
        )
