"""
test_catalog_config.py - Unit tests for the operation-type catalog and Config.

Tests cover:
  - Catalog lookups, name fallbacks and edgeband code resolution
  - Catalog loading from YAML and JSON, skipped entries
  - Config defaults and YAML overrides
"""

import json

import pytest

from cutlist_reconcile.catalog import EMPTY_CATALOG, OperationTypeCatalog
from cutlist_reconcile.config import Config, default_config


class TestCatalog:
    """Tests for OperationTypeCatalog."""

    def test_lookup_case_insensitive(self, sample_catalog):
        assert sample_catalog.get("groove", "dado").name == "Dado"
        assert sample_catalog.get("groove", "dado").defaults["width_mm"] == 4

    def test_name_fallback(self, sample_catalog):
        assert sample_catalog.name_for("hole", "SYS32") == "System 32"
        assert sample_catalog.name_for("hole", "H99") == "H99"

    def test_edgeband_code(self, sample_catalog):
        assert sample_catalog.edgeband_code("eb-white-08") == "WH08"
        assert sample_catalog.edgeband_code("WH08") == "WH08"
        assert sample_catalog.edgeband_code("nope") is None
        assert sample_catalog.edgeband_code(None) is None

    def test_len_and_iter(self, sample_catalog):
        assert len(sample_catalog) == 4
        assert {t.category for t in sample_catalog} == {"edgeband", "groove", "hole", "cnc"}
        assert len(EMPTY_CATALOG) == 0

    def test_skips_bad_entries(self):
        catalog = OperationTypeCatalog.from_dict({
            "paint": [{"code": "RED", "name": "Red"}],
            "groove": [{"name": "No code"}, {"code": "BPG"}],
        })
        assert len(catalog) == 1
        assert catalog.name_for("groove", "BPG") == "BPG"

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("hole:\n  - {code: SYS32, name: System 32}\n", encoding="utf-8")
        assert OperationTypeCatalog.from_file(path).name_for("hole", "SYS32") == "System 32"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"cnc": [{"code": "POCKET1", "name": "Hinge pocket"}]}), encoding="utf-8")
        assert OperationTypeCatalog.from_file(path).name_for("cnc", "POCKET1") == "Hinge pocket"

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            OperationTypeCatalog.from_file(path)

    def test_to_dict(self, sample_catalog):
        d = sample_catalog.get("edgeband", "WH08").to_dict()
        assert d["id"] == "eb-white-08"
        assert d["name"] == "White 0.8mm"


class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        assert default_config.default_thickness_mm == 18.0
        assert default_config.suggestion_confidence == 0.85
        assert default_config.min_label_length == 2
        assert default_config.duplicates_require_same_ops is False

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "reconcile.yaml"
        path.write_text("duplicates_require_same_ops: true\nmin_label_length: 3\nbogus: 1\n", encoding="utf-8")
        config = Config.from_yaml(path)
        assert config.duplicates_require_same_ops is True
        assert config.min_label_length == 3
        assert config.default_thickness_mm == 18.0

    def test_from_yaml_empty(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path) == Config()

    def test_from_yaml_not_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            Config.from_yaml(path)
