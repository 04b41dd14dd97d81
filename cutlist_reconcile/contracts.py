"""Derived result types handed back to the external store.

None of these is persisted: each is recomputed from the current Part
collection on every pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .models import OperationSet, Part, Size
from .utils.numbers import format_number


class MergeContractError(ValueError):
    """A merge request that breaks the quantity-sum invariant or names unknown parts."""


class CorrectionType(Enum):
    """How a canonical value differs from the raw text."""
    SWAP = "swap"
    NORMALIZE = "normalize"
    INFER = "infer"
    FIX = "fix"


@dataclass(frozen=True)
class Correction:
    """One detected difference between source text and a canonical field."""
    field: str
    original: str
    normalized: str
    type: CorrectionType

    def to_dict(self) -> Dict[str, str]:
        return {
            "field": self.field,
            "original": self.original,
            "normalized": self.normalized,
            "type": self.type.value,
        }


@dataclass
class DuplicateGroup:
    """
    Parts that describe the same physical panel.

    Attributes:
        key: Normalized key (largest dimension first, material, thickness)
        parts: (part, index in the input list) in input order
        dimensions: Sorted dimensions, L >= W
        material_id: Material shared by the group ("" when unset)
        thickness_mm: Thickness used in the key
        total_qty: Sum of member quantities
    """
    key: str
    parts: List[Tuple[Part, int]] = field(default_factory=list)
    dimensions: Optional[Size] = None
    material_id: str = ""
    thickness_mm: Optional[float] = None
    total_qty: int = 0

    @property
    def part_ids(self) -> List[str]:
        return [part.part_id for part, _ in self.parts]

    @property
    def indices(self) -> List[int]:
        return [index for _, index in self.parts]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "partIds": self.part_ids,
            "indices": self.indices,
            "dimensions": self.dimensions.to_dict() if self.dimensions else None,
            "materialId": self.material_id,
            "thicknessMm": self.thickness_mm,
            "totalQty": self.total_qty,
        }


@dataclass
class ProjectBatch:
    """One page or file of a multi-page submission."""
    batch_id: Optional[str]
    project_code: str
    page_number: Optional[int] = None
    total_pages: Optional[int] = None
    source_file: Optional[str] = None
    part_ids: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Display label such as "Page 2 of 3"."""
        if self.page_number is None:
            return "Merged" if self.batch_id is None else f"Batch {self.batch_id}"
        text = f"Page {self.page_number}"
        if self.total_pages:
            text += f" of {self.total_pages}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batchId": self.batch_id,
            "projectCode": self.project_code,
            "pageNumber": self.page_number,
            "totalPages": self.total_pages,
            "sourceFile": self.source_file,
            "partIds": list(self.part_ids),
        }


@dataclass
class ProjectGroup:
    """All batches sharing a project code."""
    project_code: str
    batches: List[ProjectBatch] = field(default_factory=list)
    total_parts: int = 0

    @property
    def part_ids(self) -> List[str]:
        return [pid for batch in self.batches for pid in batch.part_ids]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectCode": self.project_code,
            "batches": [b.to_dict() for b in self.batches],
            "totalParts": self.total_parts,
        }


@dataclass
class OperationSuggestion:
    """
    Default operations proposed from a part's label.

    Attributes:
        name: Rule name (e.g. "Fixed Shelf")
        description: Short explanation shown to the user
        ops: Partial operation set to merge in when accepted
        confidence: Fixed rule confidence
    """
    name: str
    description: str
    ops: OperationSet
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "ops": self.ops.to_dict(),
            "confidence": self.confidence,
        }


def format_dimensions(length: float, width: float) -> str:
    """Render "L×W" the way corrections and previews show it."""
    return f"{format_number(length)}×{format_number(width)}"
