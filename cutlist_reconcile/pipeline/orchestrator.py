"""Main orchestrator for a reconciliation pass.

Runs the components over one snapshot of the part list:
1. Validate part records (flag, never drop)
2. Detect corrections against the source text
3. Detect duplicate groups
4. Propose operation suggestions from part names
5. List projects whose pages are not merged yet

Nothing is mutated: merges and suggestion applies are left to the caller.

Usage:
    from cutlist_reconcile.pipeline import reconcile

    report = reconcile(parts, dismissed_groups={"600x300|W|18"})
    print(len(report.duplicate_groups))
    report.save("out/")
"""

import json
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..catalog import EMPTY_CATALOG, OperationTypeCatalog
from ..config import Config, default_config
from ..contracts import Correction, DuplicateGroup, OperationSuggestion, ProjectGroup
from ..corrections import detect_diffs_for_parts, summarize_corrections
from ..dedupe import detect_duplicates, mergeable_count
from ..models import Part
from ..projects import get_unmerged_projects
from ..shortcodes import encode
from ..suggestions import NAME_RULES, NameRule, suggest_for_parts
from ..validator import validate_and_repair_all

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    """
    Complete result of a reconciliation pass.

    Attributes:
        parts: Parts after validation (invalid ones flagged)
        validation: Validation stats
        corrections: part_id -> corrections
        duplicate_groups: Duplicate groups, insertion order
        suggestions: part_id -> suggestion not yet applied
        unmerged_projects: Projects with two or more batches
        shortcodes: part_id -> encoded operation set
        timing: Seconds spent per stage
    """
    parts: List[Part] = field(default_factory=list)
    validation: Dict[str, Any] = field(default_factory=dict)
    corrections: Dict[str, List[Correction]] = field(default_factory=dict)
    duplicate_groups: List[DuplicateGroup] = field(default_factory=list)
    suggestions: Dict[str, OperationSuggestion] = field(default_factory=dict)
    unmerged_projects: List[ProjectGroup] = field(default_factory=list)
    shortcodes: Dict[str, str] = field(default_factory=dict)
    timing: Dict[str, float] = field(default_factory=dict)

    @property
    def correction_summary(self) -> Dict[str, int]:
        return summarize_corrections(self.corrections)

    @property
    def mergeable_parts(self) -> int:
        return mergeable_count(self.duplicate_groups)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "partCount": len(self.parts),
            "validation": self.validation,
            "correctionSummary": self.correction_summary,
            "corrections": {
                pid: [c.to_dict() for c in items] for pid, items in self.corrections.items()
            },
            "duplicateGroups": [g.to_dict() for g in self.duplicate_groups],
            "mergeableParts": self.mergeable_parts,
            "suggestions": {pid: s.to_dict() for pid, s in self.suggestions.items()},
            "unmergedProjects": [p.to_dict() for p in self.unmerged_projects],
            "shortcodes": self.shortcodes,
            "timing": self.timing,
        }

    def save(self, output_dir: str) -> None:
        """Save the report to directory."""
        os.makedirs(output_dir, exist_ok=True)
        with open(os.path.join(output_dir, "ReconciliationReport.json"), "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)


class CutlistReconciler:
    """
    Runs every reconciliation component over a part list.

    Usage:
        reconciler = CutlistReconciler(
            config=Config(duplicates_require_same_ops=True),
            catalog=OperationTypeCatalog.from_file("catalog.yaml"),
            rules=load_name_rules("rules.yaml"),
        )
        report = reconciler.run(parts)
    """

    def __init__(
        self,
        config: Config = None,
        catalog: OperationTypeCatalog = None,
        rules: Optional[Sequence[NameRule]] = None,
    ):
        """
        Initialize reconciler.

        Args:
            config: Configuration (uses default if None)
            catalog: Operation-type catalog for shortcodes
            rules: Extra name rules, consulted before the built-in table
        """
        self.config = config or default_config
        self.catalog = catalog or EMPTY_CATALOG
        self.rules: List[NameRule] = list(rules or []) + list(NAME_RULES)

    def run(
        self,
        parts: List[Part],
        dismissed_groups: Optional[Iterable[str]] = None,
    ) -> ReconciliationReport:
        """
        Reconcile one snapshot of parts.

        Args:
            parts: Current part list
            dismissed_groups: Duplicate keys the user marked as not duplicates

        Returns:
            ReconciliationReport
        """
        report = ReconciliationReport()

        t0 = time.time()
        report.parts, report.validation = validate_and_repair_all(parts)
        report.timing["validate"] = time.time() - t0

        t0 = time.time()
        report.corrections = detect_diffs_for_parts(report.parts)
        report.timing["corrections"] = time.time() - t0

        t0 = time.time()
        report.duplicate_groups = detect_duplicates(report.parts, dismissed_groups, self.config)
        report.timing["duplicates"] = time.time() - t0

        t0 = time.time()
        report.suggestions = suggest_for_parts(report.parts, self.rules, self.config)
        report.timing["suggestions"] = time.time() - t0

        t0 = time.time()
        report.unmerged_projects = get_unmerged_projects(report.parts)
        report.timing["projects"] = time.time() - t0

        report.shortcodes = {
            p.part_id: encode(p.ops, self.catalog, self.config) for p in report.parts
        }

        logger.info(
            "Reconciled %d parts: %d corrected, %d duplicate groups, %d suggestions, %d unmerged projects",
            len(report.parts), len(report.corrections), len(report.duplicate_groups),
            len(report.suggestions), len(report.unmerged_projects),
        )
        return report


def reconcile(
    parts: List[Part],
    dismissed_groups: Optional[Iterable[str]] = None,
    config: Config = None,
    catalog: OperationTypeCatalog = None,
    rules: Optional[Sequence[NameRule]] = None,
) -> ReconciliationReport:
    """
    Convenience function to run a reconciliation pass.

    Example:
        report = reconcile(parts)
        print(report.correction_summary)
    """
    reconciler = CutlistReconciler(config=config, catalog=catalog, rules=rules)
    return reconciler.run(parts, dismissed_groups)
