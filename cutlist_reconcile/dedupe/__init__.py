"""Duplicate group detection and merge resolution."""

from .duplicates import (
    MergePlan,
    detect_duplicates,
    duplicate_key,
    merge_parts,
    mergeable_count,
    plan_group_merge,
    validate_merge_plan,
)

__all__ = [
    "MergePlan",
    "detect_duplicates",
    "duplicate_key",
    "merge_parts",
    "mergeable_count",
    "plan_group_merge",
    "validate_merge_plan",
]
