"""
test_dedupe.py - Unit tests for duplicate detection and merge planning.

Tests cover:
  - Orientation-invariant keys and quantity totals
  - Singletons, rejected parts and parts without size never group
  - Insertion order, dismissed keys, defaults in the key
  - Optional operation-set equality in the key
  - Merge planning, the quantity-sum contract and merge idempotence
"""

import pytest

from cutlist_reconcile.config import Config
from cutlist_reconcile.contracts import MergeContractError
from cutlist_reconcile.dedupe import (
    MergePlan,
    detect_duplicates,
    duplicate_key,
    merge_parts,
    mergeable_count,
    plan_group_merge,
    validate_merge_plan,
)
from cutlist_reconcile.models import GrooveEntry, OperationSet, PartStatus, Size


class TestDuplicateKey:
    """Tests for duplicate_key."""

    def test_sorted_descending(self, make_part):
        assert duplicate_key(make_part(L=300, W=600)) == "600x300|W|18"

    def test_defaults_for_missing_material_and_thickness(self, make_part):
        part = make_part(material_id=None, thickness_mm=None)
        assert duplicate_key(part) == "600x300|default|18"

    def test_missing_size(self, make_part):
        assert duplicate_key(make_part(size=None)) is None
        assert duplicate_key(make_part(L=0, W=300)) is None

    def test_negative_size(self, make_part):
        assert duplicate_key(make_part(L=300, W=-600)) is None
        assert duplicate_key(make_part(L=-300, W=600)) is None

    def test_ops_folded_in_when_configured(self, make_part, edges):
        part = make_part(ops=OperationSet(edgebanding=edges("L1")))
        key = duplicate_key(part, Config(duplicates_require_same_ops=True))
        assert key == "600x300|W|18|EB:EB:L1"


class TestDetectDuplicates:
    """Tests for detect_duplicates."""

    def test_orientation_invariant(self, make_part):
        parts = [make_part("a", L=600, W=300, qty=2), make_part("b", L=300, W=600, qty=3)]
        groups = detect_duplicates(parts)
        assert len(groups) == 1
        assert groups[0].part_ids == ["a", "b"]
        assert groups[0].indices == [0, 1]
        assert groups[0].total_qty == 5
        assert groups[0].dimensions == Size(600, 300)

    def test_negative_sizes_never_group(self, make_part):
        parts = [make_part("a", L=300, W=-600), make_part("b", L=-600, W=300)]
        assert detect_duplicates(parts) == []

    def test_singletons_never_group(self, make_part):
        parts = [
            make_part("a"),
            make_part("b"),
            make_part("c", L=900, W=450),
            make_part("d", material_id="Ply"),
            make_part("e", thickness_mm=16),
        ]
        groups = detect_duplicates(parts)
        assert [g.part_ids for g in groups] == [["a", "b"]]

    def test_rejected_parts_excluded(self, make_part):
        parts = [make_part("a"), make_part("b", status=PartStatus.REJECTED)]
        assert detect_duplicates(parts) == []

    def test_rejected_member_dropped_from_larger_group(self, make_part):
        parts = [make_part("a"), make_part("b", status=PartStatus.REJECTED), make_part("c")]
        groups = detect_duplicates(parts)
        assert groups[0].part_ids == ["a", "c"]
        assert groups[0].indices == [0, 2]

    def test_square_parts(self, make_part):
        parts = [make_part("a", L=400, W=400), make_part("b", L=400, W=400)]
        assert len(detect_duplicates(parts)) == 1

    def test_parts_without_size_skipped(self, make_part):
        parts = [make_part("a", size=None), make_part("b", size=None)]
        assert detect_duplicates(parts) == []

    def test_insertion_order(self, make_part):
        parts = [
            make_part("a", L=900, W=450),
            make_part("b"),
            make_part("c"),
            make_part("d", L=450, W=900),
        ]
        keys = [g.key for g in detect_duplicates(parts)]
        assert keys == ["900x450|W|18", "600x300|W|18"]

    def test_dismissed_keys(self, make_part):
        parts = [make_part("a"), make_part("b")]
        assert detect_duplicates(parts, dismissed={"600x300|W|18"}) == []

    def test_different_ops_group_by_default(self, make_part):
        """Operation sets are ignored unless configured otherwise."""
        parts = [
            make_part("a", ops=OperationSet(grooves=[GrooveEntry("DADO", "W1")])),
            make_part("b"),
        ]
        assert len(detect_duplicates(parts)) == 1
        assert detect_duplicates(parts, config=Config(duplicates_require_same_ops=True)) == []

    def test_does_not_mutate_input(self, make_part):
        parts = [make_part("a", qty=2), make_part("b", qty=3)]
        detect_duplicates(parts)
        assert [p.qty for p in parts] == [2, 3]

    def test_mergeable_count(self, make_part):
        parts = [make_part("a"), make_part("b"), make_part("c"), make_part("d", L=900), make_part("e", L=900)]
        assert mergeable_count(detect_duplicates(parts)) == 3


class TestMergePlanning:
    """Tests for merge_parts, plan_group_merge and MergePlan.apply."""

    def test_merge_parts_computes_sum(self, make_part):
        parts = [make_part("a", qty=2), make_part("b", qty=3), make_part("c")]
        plan = merge_parts(parts, ["a", "b"], "a")
        assert plan.new_qty == 5
        assert plan.expected_qty == 5
        assert plan.remove_ids == ["b"]
        assert plan.is_consistent

    def test_merge_parts_records_caller_qty(self, make_part):
        parts = [make_part("a", qty=2), make_part("b", qty=3)]
        plan = merge_parts(parts, ["a", "b"], "b", new_qty=4)
        assert plan.new_qty == 4
        assert not plan.is_consistent

    def test_apply_survivor_keeps_position(self, make_part):
        parts = [make_part("x", L=900), make_part("a", qty=2), make_part("b", qty=3)]
        merged = merge_parts(parts, ["a", "b"], "a").apply(parts)
        assert [p.part_id for p in merged] == ["x", "a"]
        assert merged[1].qty == 5
        assert parts[1].qty == 2

    def test_plan_group_merge_default_survivor(self, make_part):
        parts = [make_part("a", qty=1), make_part("b", L=300, W=600, qty=4)]
        plan = plan_group_merge(detect_duplicates(parts)[0])
        assert plan.survivor_id == "a"
        assert plan.new_qty == 5

    def test_merge_idempotence(self, make_part):
        """After merging, re-running detection yields no group for that key."""
        parts = [make_part("a", qty=2), make_part("b", L=300, W=600, qty=1), make_part("c", L=900)]
        group = detect_duplicates(parts)[0]
        merged = plan_group_merge(group, into_part_id="b").apply(parts)
        assert [p.qty for p in merged if p.part_id == "b"] == [3]
        assert all(g.key != group.key for g in detect_duplicates(merged))

    def test_wrong_qty_rejected(self, make_part):
        parts = [make_part("a", qty=2), make_part("b", qty=3)]
        plan = merge_parts(parts, ["a", "b"], "a", new_qty=3)
        with pytest.raises(MergeContractError, match="sum"):
            plan.apply(parts)

    def test_unknown_part_rejected(self, make_part):
        parts = [make_part("a")]
        with pytest.raises(MergeContractError, match="unknown"):
            validate_merge_plan(MergePlan("a", ["a", "zz"], 2, 2), parts)

    def test_survivor_must_be_merged(self, make_part):
        parts = [make_part("a"), make_part("b"), make_part("c")]
        with pytest.raises(MergeContractError, match="Survivor"):
            validate_merge_plan(MergePlan("c", ["a", "b"], 2, 2), parts)

    def test_contract_error_is_value_error(self):
        assert issubclass(MergeContractError, ValueError)

    def test_to_dict(self, make_part):
        parts = [make_part("a", qty=2), make_part("b", qty=3)]
        assert merge_parts(parts, ["a", "b"], "a").to_dict() == {
            "survivorId": "a",
            "removeIds": ["b"],
            "newQty": 5,
            "expectedQty": 5,
        }
