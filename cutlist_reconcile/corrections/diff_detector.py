"""Reconstruct the corrections the upstream parser applied to a part.

Compares a part's raw ``_originalText`` with its canonical field values and
reports, per category, what was swapped, normalized or inferred. The part is
never modified; results are recomputed on every call.

Categories, in output order (at most one correction each):
1. dimensions - "300 x 600" stored as L=600, W=300 (swap)
2. edging     - first edge notation found in the text (normalize)
3. material   - first material name whose spelling differs from its code
4. quantity   - no quantity marker and qty == 1 (infer)
5. groove     - groove token in the text and the part carries grooves

Usage:
    from cutlist_reconcile.corrections import detect_diffs

    for c in detect_diffs(part):
        print(f"{c.field}: {c.original} -> {c.normalized} ({c.type.value})")
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from ..contracts import Correction, CorrectionType, format_dimensions
from ..models import Part
from ..shortcodes.vocabulary import (
    DIMENSION_PATTERN,
    EDGE_NOTATION_PATTERNS,
    GROOVE_TOKEN_PATTERNS,
    MATERIAL_PATTERNS,
    QUANTITY_MARKER_PATTERN,
)

logger = logging.getLogger(__name__)


def _detect_swap(text: str, part: Part) -> Optional[Correction]:
    if part.size is None:
        return None
    match = DIMENSION_PATTERN.search(text)
    if not match:
        return None
    first, second = int(match.group(1)), int(match.group(2))
    if first < second and part.size.L == second and part.size.W == first:
        return Correction(
            field="dimensions",
            original=format_dimensions(first, second),
            normalized=format_dimensions(part.size.L, part.size.W),
            type=CorrectionType.SWAP,
        )
    return None


def _detect_edging(text: str) -> Optional[Correction]:
    for pattern, code in EDGE_NOTATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return Correction("edging", match.group(0), code, CorrectionType.NORMALIZE)
    return None


def _detect_material(text: str) -> Optional[Correction]:
    for pattern, code in MATERIAL_PATTERNS:
        match = pattern.search(text)
        if match and match.group(0).lower() != code.lower():
            return Correction("material", match.group(0), code, CorrectionType.NORMALIZE)
    return None


def _detect_quantity(text: str, part: Part) -> Optional[Correction]:
    if part.qty == 1 and not QUANTITY_MARKER_PATTERN.search(text):
        return Correction("quantity", "(not specified)", "1", CorrectionType.INFER)
    return None


def _detect_groove(text: str, part: Part) -> Optional[Correction]:
    if not part.ops.grooves:
        return None
    for pattern, _ in GROOVE_TOKEN_PATTERNS:
        match = pattern.search(text)
        if match:
            sides = "+".join(g.side for g in part.ops.grooves)
            return Correction("groove", match.group(0), f"GR:{sides}", CorrectionType.NORMALIZE)
    return None


def detect_diffs(part: Part) -> List[Correction]:
    """
    Corrections explaining how ``part`` differs from its source text.

    Args:
        part: Part with optional ``original_text``

    Returns:
        Ordered list of corrections; empty when there is no source text or
        nothing matched.
    """
    if not part.original_text or not isinstance(part.original_text, str):
        return []

    text = part.original_text.lower().strip()
    if not text:
        return []

    candidates = [
        _detect_swap(text, part),
        _detect_edging(text),
        _detect_material(text),
        _detect_quantity(text, part),
        _detect_groove(text, part),
    ]
    return [c for c in candidates if c is not None]


def detect_diffs_for_parts(parts: Iterable[Part]) -> Dict[str, List[Correction]]:
    """Map part_id -> corrections, omitting parts with none."""
    results: Dict[str, List[Correction]] = {}
    for part in parts:
        corrections = detect_diffs(part)
        if corrections:
            results[part.part_id] = corrections
    logger.debug("Corrections found on %d parts", len(results))
    return results


def summarize_corrections(corrections_by_part: Dict[str, List[Correction]]) -> Dict[str, int]:
    """
    Count corrections by type.

    Example:
        {"swap": 2, "normalize": 5, "infer": 1, "fix": 0, "total": 8}
    """
    counts = Counter(
        c.type.value
        for corrections in corrections_by_part.values()
        for c in corrections
    )
    summary = {t.value: counts.get(t.value, 0) for t in CorrectionType}
    summary["total"] = sum(counts.values())
    return summary
