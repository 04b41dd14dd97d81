"""Duplicate group detection and merge planning.

Two rows describe the same physical panel when their normalized key
matches: dimensions sorted largest first, material, thickness. A panel
entered as 600x300 and one entered as 300x600 therefore collide.

Merging is two-phase. This module computes a MergePlan (survivor, parts to
remove, new quantity); the caller's store performs the mutation.
``MergePlan.apply`` is a reference implementation of that store step that
enforces the quantity-sum contract.

Usage:
    from cutlist_reconcile.dedupe import detect_duplicates, plan_group_merge

    groups = detect_duplicates(parts, dismissed={"600x300|W|18"})
    for group in groups:
        plan = plan_group_merge(group)
        parts = plan.apply(parts)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from ..config import Config, default_config
from ..contracts import DuplicateGroup, MergeContractError
from ..models import Part, Size
from ..shortcodes import encode
from ..utils.numbers import format_number

logger = logging.getLogger(__name__)


def duplicate_key(part: Part, config: Config = default_config) -> Optional[str]:
    """
    Normalized duplicate key, or None when the part has no usable size
    (missing, zero or negative dimensions).

    Example:
        Part(size=Size(300, 600), material_id="W", thickness_mm=18)
        -> "600x300|W|18"
    """
    if part.size is None or not part.size.L > 0 or not part.size.W > 0:
        return None

    high, low = sorted((part.size.L, part.size.W), reverse=True)
    material = part.material_id or config.default_material_key
    thickness = part.thickness_mm or config.default_thickness_mm
    key = f"{format_number(high)}x{format_number(low)}|{material}|{format_number(thickness)}"

    if config.duplicates_require_same_ops:
        key += f"|{encode(part.ops, config=config)}"
    return key


def detect_duplicates(
    parts: List[Part],
    dismissed: Optional[Iterable[str]] = None,
    config: Config = default_config,
) -> List[DuplicateGroup]:
    """
    Group parts that share a duplicate key.

    Rejected parts and parts without dimensions are skipped. Groups keep
    insertion order (first member seen) and only groups with two or more
    members are returned.

    Args:
        parts: Current part list
        dismissed: Keys the user marked as "not duplicates"
        config: Key settings

    Returns:
        List of DuplicateGroup
    """
    dismissed_keys: Set[str] = set(dismissed or ())
    groups: Dict[str, DuplicateGroup] = {}

    for index, part in enumerate(parts):
        if part.is_rejected:
            continue
        key = duplicate_key(part, config)
        if key is None:
            continue

        group = groups.get(key)
        if group is None:
            high, low = sorted((part.size.L, part.size.W), reverse=True)
            group = DuplicateGroup(
                key=key,
                dimensions=Size(high, low),
                material_id=part.material_id or "",
                thickness_mm=part.thickness_mm or config.default_thickness_mm,
            )
            groups[key] = group

        group.parts.append((part, index))
        group.total_qty += part.qty or 1

    result = [
        g for g in groups.values()
        if len(g.parts) > 1 and g.key not in dismissed_keys
    ]
    logger.debug("Duplicate groups: %d (%d dismissed)", len(result),
                 sum(1 for g in groups.values() if len(g.parts) > 1 and g.key in dismissed_keys))
    return result


def mergeable_count(groups: Iterable[DuplicateGroup]) -> int:
    """Number of parts a merge of every group would remove."""
    return sum(len(g.parts) - 1 for g in groups)


@dataclass
class MergePlan:
    """
    Intended result of collapsing several parts into one.

    Attributes:
        survivor_id: Part that stays and receives ``new_qty``
        merged_ids: Every part taking part in the merge, survivor included
        new_qty: Quantity to assign to the survivor
        expected_qty: Sum of the merged parts' quantities when planned
    """
    survivor_id: str
    merged_ids: List[str] = field(default_factory=list)
    new_qty: int = 0
    expected_qty: int = 0

    @property
    def remove_ids(self) -> List[str]:
        return [pid for pid in self.merged_ids if pid != self.survivor_id]

    @property
    def is_consistent(self) -> bool:
        return self.new_qty == self.expected_qty and self.survivor_id in self.merged_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "survivorId": self.survivor_id,
            "removeIds": self.remove_ids,
            "newQty": self.new_qty,
            "expectedQty": self.expected_qty,
        }

    def apply(self, parts: List[Part]) -> List[Part]:
        """
        Return a new part list with the merge performed.

        The survivor keeps its position and fields except ``qty``; the other
        merged parts are removed. Input parts are not modified.

        Raises:
            MergeContractError: if the plan breaks the quantity-sum contract
                against ``parts``
        """
        validate_merge_plan(self, parts)
        remove = set(self.remove_ids)
        result = []
        for part in parts:
            if part.part_id in remove:
                continue
            if part.part_id == self.survivor_id:
                part = part.evolve(qty=self.new_qty)
            result.append(part)
        logger.debug("Merged %d parts into %s (qty %d)", len(remove), self.survivor_id, self.new_qty)
        return result


def merge_parts(
    parts: List[Part],
    part_ids: List[str],
    into_part_id: str,
    new_qty: Optional[int] = None,
) -> MergePlan:
    """
    Compute the merge of ``part_ids`` into ``into_part_id``.

    Only computes: a caller-supplied ``new_qty`` that differs from the sum
    is recorded as-is and caught by ``validate_merge_plan``.

    Args:
        parts: Current part list
        part_ids: Parts to merge (survivor included)
        into_part_id: Survivor
        new_qty: Quantity the caller intends to set (defaults to the sum)
    """
    by_id = {p.part_id: p for p in parts}
    merged_ids = list(dict.fromkeys(part_ids))
    expected = sum(by_id[pid].qty or 1 for pid in merged_ids if pid in by_id)
    return MergePlan(
        survivor_id=into_part_id,
        merged_ids=merged_ids,
        new_qty=expected if new_qty is None else new_qty,
        expected_qty=expected,
    )


def plan_group_merge(group: DuplicateGroup, into_part_id: Optional[str] = None) -> MergePlan:
    """
    Merge plan for a whole duplicate group.

    The survivor defaults to the first member; ``new_qty`` is the group's
    total quantity.
    """
    survivor = into_part_id or group.part_ids[0]
    return MergePlan(
        survivor_id=survivor,
        merged_ids=group.part_ids,
        new_qty=group.total_qty,
        expected_qty=group.total_qty,
    )


def validate_merge_plan(plan: MergePlan, parts: List[Part]) -> None:
    """
    Check a merge plan against the current part list.

    Raises:
        MergeContractError: unknown part ids, survivor not merged, or
            ``new_qty`` not equal to the sum of merged quantities
    """
    by_id = {p.part_id: p for p in parts}

    unknown = [pid for pid in plan.merged_ids if pid not in by_id]
    if unknown:
        raise MergeContractError(f"Merge references unknown parts: {', '.join(unknown)}")

    if plan.survivor_id not in plan.merged_ids:
        raise MergeContractError(f"Survivor {plan.survivor_id} is not among the merged parts")

    actual = sum(by_id[pid].qty or 1 for pid in plan.merged_ids)
    if plan.new_qty != actual:
        raise MergeContractError(
            f"new_qty {plan.new_qty} does not equal the sum of merged quantities ({actual})"
        )
