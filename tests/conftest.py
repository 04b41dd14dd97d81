"""
conftest.py - Shared pytest fixtures for the cutlist_reconcile test suite.

All tests are pure unit tests over in-memory part lists; files are only
written under ``tmp_path``.

Import-path bootstrapping:
    The repository root is inserted into sys.path so that
    ``cutlist_reconcile.*`` imports resolve without an install.
"""

import os
import sys

import pytest

# ---------------------------------------------------------------------------
# Ensure the repository root is on the import path before package imports.
# ---------------------------------------------------------------------------
_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)


# ---------------------------------------------------------------------------
# Part factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_part():
    """
    Factory for Part records with sensible defaults.

    Defaults: 600x300 mm, 18 mm, qty 1, material "W", pending.
    Keyword ``L``/``W`` set the size; ``size=None`` removes it.
    """
    from cutlist_reconcile.models import Part, Size

    counter = {"n": 0}

    def _make(part_id=None, L=600, W=300, **kwargs):
        counter["n"] += 1
        if "size" not in kwargs:
            kwargs["size"] = Size(L, W)
        kwargs.setdefault("thickness_mm", 18)
        kwargs.setdefault("material_id", "W")
        return Part(part_id=part_id or f"p{counter['n']}", **kwargs)

    return _make


@pytest.fixture
def edges():
    """Build a full four-side Edgebanding from banded side names: edges("L1", "W1")."""
    from cutlist_reconcile.models import EDGE_SIDES, Edgebanding

    def _edges(*sides, edgeband_id=None):
        return Edgebanding(sides={s: s in sides for s in EDGE_SIDES}, edgeband_id=edgeband_id)

    return _edges


@pytest.fixture(scope="session")
def sample_catalog():
    """Catalog with one entry per category."""
    from cutlist_reconcile.catalog import OperationTypeCatalog

    return OperationTypeCatalog.from_dict({
        "edgeband": [{"code": "WH08", "name": "White 0.8mm", "id": "eb-white-08"}],
        "groove": [{"code": "DADO", "name": "Dado", "defaults": {"width_mm": 4, "depth_mm": 8}}],
        "hole": [{"code": "SYS32", "name": "System 32"}],
        "cnc": [{"code": "POCKET1", "name": "Hinge pocket"}],
    })


@pytest.fixture
def three_page_project(make_part):
    """Project K-104 ingested as three page batches, plus one unrelated part."""
    return [
        make_part("a1", project_code="K-104", batch_id="b2", page_number=2, total_pages=3),
        make_part("a2", project_code="K-104", batch_id="b1", page_number=1, total_pages=3),
        make_part("a3", L=720, W=560, project_code="K-104", batch_id="b3", page_number=3, total_pages=3),
        make_part("a4", L=400, W=400, project_code="K-104", batch_id="b1", page_number=1, total_pages=3),
        make_part("x1", L=900, W=450),
    ]
