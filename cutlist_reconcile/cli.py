"""Command line entry point: reconcile a JSON part payload."""

import argparse
import logging
import sys

from .catalog import OperationTypeCatalog
from .config import Config, default_config
from .pipeline import CutlistReconciler
from .suggestions import load_name_rules
from .utils.io import load_parts

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cutlist-reconcile",
        description="Cutlist reconciliation: corrections, duplicates, suggestions, project merges",
    )
    parser.add_argument("parts", help="Path to parts JSON (list or {\"parts\": [...]})")
    parser.add_argument("--config", help="YAML file with Config overrides")
    parser.add_argument("--catalog", help="Operation-type catalog (YAML or JSON)")
    parser.add_argument("--rules", help="YAML file with extra part-name rules")
    parser.add_argument("--dismiss", nargs="*", default=[], metavar="KEY",
                        help="Duplicate group keys marked as not duplicates")
    parser.add_argument("--out", help="Output directory for ReconciliationReport.json")
    parser.add_argument("--log-level", help="Logging level (default from config)")
    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = Config.from_yaml(args.config) if args.config else default_config
        catalog = OperationTypeCatalog.from_file(args.catalog) if args.catalog else None
        rules = load_name_rules(args.rules) if args.rules else None
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    parts, errors = load_parts(args.parts)
    for error in errors:
        logger.warning(error)
    if not parts:
        print(f"Error: no parts loaded from {args.parts}", file=sys.stderr)
        return 1

    reconciler = CutlistReconciler(config=config, catalog=catalog, rules=rules)
    report = reconciler.run(parts, dismissed_groups=args.dismiss)

    print(f"Reconciled {len(report.parts)} parts from {args.parts}")
    print(f"  Validation: {report.validation['valid']} valid, {report.validation['invalid']} invalid")
    print(f"  Corrections: {report.correction_summary}")
    print(f"  Duplicate groups: {len(report.duplicate_groups)} "
          f"({report.mergeable_parts} parts mergeable)")
    for group in report.duplicate_groups:
        print(f"    {group.key}: {', '.join(group.part_ids)} (total qty {group.total_qty})")
    print(f"  Suggestions: {len(report.suggestions)}")
    for part_id, suggestion in report.suggestions.items():
        print(f"    {part_id}: {suggestion.name} ({suggestion.description})")
    print(f"  Unmerged projects: {len(report.unmerged_projects)}")
    for project in report.unmerged_projects:
        pages = ", ".join(b.label for b in project.batches)
        print(f"    {project.project_code}: {pages} ({project.total_parts} parts)")

    if args.out:
        report.save(args.out)
        print(f"\nReport saved to: {args.out}/")

    return 0


if __name__ == "__main__":
    sys.exit(main())
