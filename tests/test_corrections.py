"""
test_corrections.py - Unit tests for the correction diff detector.

Tests cover:
  - Dimension swap detection and its no-false-positive counterpart
  - Edge notation table priority
  - Material normalization (only when spelling differs)
  - Quantity inference
  - Groove inference (requires groove operations on the part)
  - Totality: missing text, missing size, no matches
  - Per-part mapping and summary counts
"""

from cutlist_reconcile.contracts import Correction, CorrectionType
from cutlist_reconcile.corrections import detect_diffs, detect_diffs_for_parts, summarize_corrections
from cutlist_reconcile.models import GrooveEntry, OperationSet


def _by_field(corrections):
    return {c.field: c for c in corrections}


class TestDimensionSwap:
    """Tests for the dimensions category."""

    def test_swap_detected(self, make_part):
        part = make_part(L=600, W=300, original_text="300 x 600")
        swaps = [c for c in detect_diffs(part) if c.type is CorrectionType.SWAP]
        assert swaps == [Correction("dimensions", "300×600", "600×300", CorrectionType.SWAP)]

    def test_no_swap_when_already_ordered(self, make_part):
        part = make_part(L=600, W=300, original_text="600 x 300")
        assert not [c for c in detect_diffs(part) if c.type is CorrectionType.SWAP]

    def test_no_swap_when_values_differ(self, make_part):
        """Text 300x600 but canonical 650x300: not a pure swap."""
        part = make_part(L=650, W=300, original_text="300x600")
        assert "dimensions" not in _by_field(detect_diffs(part))

    def test_unicode_times_sign(self, make_part):
        part = make_part(L=720, W=560, original_text="Side 560×720 white")
        assert _by_field(detect_diffs(part))["dimensions"].normalized == "720×560"

    def test_missing_size(self, make_part):
        part = make_part(size=None, original_text="300 x 600")
        assert "dimensions" not in _by_field(detect_diffs(part))


class TestEdgeNotation:
    """Tests for the edging category."""

    def test_all_edges(self, make_part):
        c = _by_field(detect_diffs(make_part(original_text="door all edges")))["edging"]
        assert (c.original, c.normalized, c.type) == ("all edges", "EB:4", CorrectionType.NORMALIZE)

    def test_first_table_entry_wins(self, make_part):
        """'2l 2w' hits the earlier '2l' entry before the 2l 2w -> EB:4 entry."""
        c = _by_field(detect_diffs(make_part(original_text="panel 2l 2w")))["edging"]
        assert c.normalized == "L2"

    def test_single_edge_codes(self, make_part):
        assert _by_field(detect_diffs(make_part(original_text="shelf 1l")))["edging"].normalized == "L1"
        assert _by_field(detect_diffs(make_part(original_text="shelf 1w")))["edging"].normalized == "W1"

    def test_eb_all(self, make_part):
        c = _by_field(detect_diffs(make_part(original_text="EB ALL")))["edging"]
        assert c.original == "eb all"
        assert c.normalized == "EB:4"


class TestMaterial:
    """Tests for the material category."""

    def test_white_melamine(self, make_part):
        c = _by_field(detect_diffs(make_part(original_text="shelf white melamine")))["material"]
        assert (c.original, c.normalized) == ("white melamine", "W")

    def test_plywood(self, make_part):
        c = _by_field(detect_diffs(make_part(original_text="back plywood")))["material"]
        assert c.normalized == "Ply"

    def test_already_canonical_not_reported(self, make_part):
        """'mdf' equals 'MDF' case-insensitively."""
        assert "material" not in _by_field(detect_diffs(make_part(original_text="top mdf")))

    def test_first_match_decides(self, make_part):
        """'mdf' listed after 'black': black is reported, mdf ignored."""
        c = _by_field(detect_diffs(make_part(original_text="mdf black")))["material"]
        assert c.normalized == "B"

    def test_canonical_match_does_not_stop_scan(self, make_part):
        """'ply' is already canonical; the later 'black' is still reported."""
        c = _by_field(detect_diffs(make_part(original_text="ply black")))["material"]
        assert (c.original, c.normalized) == ("black", "B")


class TestQuantity:
    """Tests for the quantity category."""

    def test_inferred_when_no_marker(self, make_part):
        c = _by_field(detect_diffs(make_part(qty=1, original_text="side panel")))["quantity"]
        assert (c.original, c.normalized, c.type) == ("(not specified)", "1", CorrectionType.INFER)

    def test_not_inferred_with_marker(self, make_part):
        assert "quantity" not in _by_field(detect_diffs(make_part(qty=1, original_text="shelf qty 1")))

    def test_not_inferred_when_qty_above_one(self, make_part):
        assert "quantity" not in _by_field(detect_diffs(make_part(qty=2, original_text="side panel")))


class TestGroove:
    """Tests for the groove category."""

    def test_reported_with_groove_ops(self, make_part):
        ops = OperationSet(grooves=[GrooveEntry("DADO", "W1"), GrooveEntry("DADO", "W2")])
        c = _by_field(detect_diffs(make_part(ops=ops, original_text="fixed shelf grv")))["groove"]
        assert (c.original, c.normalized) == ("grv", "GR:W1+W2")

    def test_back_groove(self, make_part):
        ops = OperationSet(grooves=[GrooveEntry("BPG", "W2")])
        c = _by_field(detect_diffs(make_part(ops=ops, original_text="side back groove")))["groove"]
        assert c.normalized == "GR:W2"

    def test_not_reported_without_groove_ops(self, make_part):
        assert "groove" not in _by_field(detect_diffs(make_part(original_text="side bpg")))


class TestTotality:
    """Detection never raises and returns [] when there is nothing to say."""

    def test_no_original_text(self, make_part):
        assert detect_diffs(make_part(original_text=None)) == []
        assert detect_diffs(make_part(original_text="   ")) == []

    def test_output_order(self, make_part):
        part = make_part(L=600, W=300, qty=1, original_text="300 x 600 all edges white")
        fields = [c.field for c in detect_diffs(part)]
        assert fields == ["dimensions", "edging", "material"]

    def test_does_not_mutate_part(self, make_part):
        part = make_part(L=600, W=300, original_text="300 x 600")
        before = part.to_dict()
        detect_diffs(part)
        assert part.to_dict() == before


class TestBulk:
    """Tests for detect_diffs_for_parts and summarize_corrections."""

    def test_map_omits_clean_parts(self, make_part):
        parts = [
            make_part("a", original_text="300 x 600"),
            make_part("b", qty=2, original_text="600 x 300 qty 2"),
            make_part("c"),
        ]
        result = detect_diffs_for_parts(parts)
        assert list(result) == ["a"]

    def test_summary_counts(self, make_part):
        parts = [
            make_part("a", original_text="300 x 600 white board"),
            make_part("b", original_text="door"),
        ]
        summary = summarize_corrections(detect_diffs_for_parts(parts))
        assert summary["swap"] == 1
        assert summary["normalize"] == 1
        assert summary["infer"] == 1
        assert summary["fix"] == 0
        assert summary["total"] == 3
