"""Validation for part records.

Rules:
- size must be present with L > 0 and W > 0
- thickness_mm, when present, must be > 0
- qty must be an integer >= 1
- edgebanding and groove sides must be one of L1, L2, W1, W2

Invalid parts are NEVER dropped -- they are kept with ``invalid=True`` and
a ``validation_error`` so the reviewer can see why.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from .models import EDGE_SIDES, Part

logger = logging.getLogger(__name__)


def validate_part(part: Part) -> Tuple[Part, bool, Optional[str]]:
    """
    Validate a single part.

    Checks:
    1. Size present, both dimensions positive
    2. Thickness positive when given
    3. Quantity is a positive integer
    4. Edge sides used by edgebanding and grooves are known

    Args:
        part: Part record

    Returns:
        Tuple of (part, is_valid, error_message)
        - If valid: (part, True, None)
        - If invalid: (flagged_copy, False, "reason")
          flagged_copy has invalid=True and validation_error="reason"
    """
    errors: List[str] = []

    # Check 1: Dimensions
    if part.size is None:
        errors.append("missing size")
    else:
        if part.size.L is None or part.size.L <= 0:
            errors.append(f"non-positive length: {part.size.L}")
        if part.size.W is None or part.size.W <= 0:
            errors.append(f"non-positive width: {part.size.W}")

    # Check 2: Thickness
    if part.thickness_mm is not None and part.thickness_mm <= 0:
        errors.append(f"non-positive thickness: {part.thickness_mm}")

    # Check 3: Quantity
    if not isinstance(part.qty, int) or isinstance(part.qty, bool) or part.qty < 1:
        errors.append(f"invalid quantity: {part.qty}")

    # Check 4: Edge sides
    if part.ops.edgebanding is not None:
        for side in part.ops.edgebanding.sides:
            if side not in EDGE_SIDES:
                errors.append(f"unknown edge side '{side}'")
    for groove in part.ops.grooves:
        if groove.side not in EDGE_SIDES:
            errors.append(f"unknown groove side '{groove.side}'")

    if errors:
        error_msg = "; ".join(errors)
        return part.evolve(invalid=True, validation_error=error_msg), False, error_msg

    if part.invalid:
        # Clear a stale flag from an earlier pass
        return part.evolve(invalid=False, validation_error=None), True, None
    return part, True, None


def validate_and_repair_all(parts: List[Part]) -> Tuple[List[Part], Dict[str, Any]]:
    """
    Validate a list of parts.

    Invalid parts are NOT dropped -- they are flagged.

    Args:
        parts: List of parts

    Returns:
        Tuple of (checked_parts, stats)
        stats = {"valid": N, "invalid": N, "total": N, "errors": {"reason": count}}
    """
    checked: List[Part] = []
    stats: Dict[str, Any] = {"valid": 0, "invalid": 0, "total": len(parts), "errors": {}}

    for part in parts:
        result, is_valid, error = validate_part(part)
        checked.append(result)

        if is_valid:
            stats["valid"] += 1
        else:
            stats["invalid"] += 1
            logger.warning("Part %s failed validation: %s", part.part_id, error)
            for e in error.split("; "):
                stats["errors"][e] = stats["errors"].get(e, 0) + 1

    logger.debug("Validation: %d valid, %d invalid", stats["valid"], stats["invalid"])
    return checked, stats
