"""Multi-page project batch merging.

A scanned three-page cutlist arrives as three batches sharing a
``project_code``. Until the user confirms the pages belong together each
batch keeps its own ``batch_id``/``page_number`` provenance. Merging
collapses that provenance into one logical batch. It never touches
quantities and never deduplicates; run duplicate detection afterwards to
surface genuine repeats across pages.

Parts of a project with no ``batch_id`` form the already-merged batch, so a
second merge of the same project is a no-op.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..config import Config, default_config
from ..contracts import DuplicateGroup, ProjectBatch, ProjectGroup
from ..dedupe import detect_duplicates
from ..models import Part

logger = logging.getLogger(__name__)


def _batch_sort_key(item):
    position, batch = item
    unnumbered = batch.page_number is None
    return (unnumbered, batch.page_number or 0, position)


def group_projects(parts: Iterable[Part]) -> List[ProjectGroup]:
    """
    Group non-rejected parts by project code, then by batch.

    Projects come back in first-seen order; batches within a project are
    ordered by page number (unnumbered batches last, first-seen order
    between equals).
    """
    projects: "OrderedDict[str, OrderedDict[Optional[str], ProjectBatch]]" = OrderedDict()
    counts: Dict[str, int] = {}

    for part in parts:
        if part.is_rejected or not part.project_code:
            continue
        code = part.project_code
        batches = projects.setdefault(code, OrderedDict())
        batch = batches.get(part.batch_id)
        if batch is None:
            batch = ProjectBatch(
                batch_id=part.batch_id,
                project_code=code,
                page_number=part.page_number,
                total_pages=part.total_pages,
                source_file=part.source_file,
            )
            batches[part.batch_id] = batch
        else:
            # First non-empty value wins
            batch.page_number = batch.page_number if batch.page_number is not None else part.page_number
            batch.total_pages = batch.total_pages or part.total_pages
            batch.source_file = batch.source_file or part.source_file
        batch.part_ids.append(part.part_id)
        counts[code] = counts.get(code, 0) + 1

    groups = []
    for code, batches in projects.items():
        ordered = [b for _, b in sorted(enumerate(batches.values()), key=_batch_sort_key)]
        groups.append(ProjectGroup(project_code=code, batches=ordered, total_parts=counts[code]))
    return groups


def get_unmerged_projects(parts: Iterable[Part]) -> List[ProjectGroup]:
    """Projects that still have two or more distinct batches."""
    unmerged = [g for g in group_projects(parts) if len(g.batches) >= 2]
    logger.debug("Unmerged projects: %d", len(unmerged))
    return unmerged


@dataclass
class ProjectMergePlan:
    """
    Intended result of merging a project's batches.

    Attributes:
        project_code: Project being merged
        part_ids: Parts whose batch/page provenance is cleared
        batches_merged: Number of batches collapsed (0 for a no-op)
        remaining_unmerged_batches: Always 0 once the plan is applied
    """
    project_code: str
    part_ids: List[str] = field(default_factory=list)
    batches_merged: int = 0
    remaining_unmerged_batches: int = 0

    @property
    def is_noop(self) -> bool:
        return not self.part_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectCode": self.project_code,
            "partIds": list(self.part_ids),
            "batchesMerged": self.batches_merged,
            "remainingUnmergedBatches": self.remaining_unmerged_batches,
        }

    def apply(self, parts: List[Part]) -> List[Part]:
        """
        Return a new part list with batch provenance cleared.

        ``batch_id``, ``page_number`` and ``total_pages`` are reset;
        ``project_code`` and ``source_file`` are kept. Inputs are untouched.
        """
        targets = set(self.part_ids)
        return [
            p.evolve(batch_id=None, page_number=None, total_pages=None) if p.part_id in targets else p
            for p in parts
        ]


def merge_project_batches(parts: List[Part], project_code: str) -> ProjectMergePlan:
    """
    Plan the merge of every batch under ``project_code``.

    A project that is already merged (or unknown) gives a no-op plan with
    ``batches_merged == 0``.
    """
    group = next((g for g in group_projects(parts) if g.project_code == project_code), None)
    if group is None or len(group.batches) < 2:
        logger.debug("Project %s has nothing to merge", project_code)
        return ProjectMergePlan(project_code=project_code)

    part_ids = [
        p.part_id for p in parts
        if p.project_code == project_code and not p.is_rejected
        and (p.batch_id is not None or p.page_number is not None or p.total_pages is not None)
    ]
    logger.info("Merging %d batches of project %s (%d parts)",
                len(group.batches), project_code, len(part_ids))
    return ProjectMergePlan(
        project_code=project_code,
        part_ids=part_ids,
        batches_merged=len(group.batches),
    )


def merge_all_projects(parts: List[Part]) -> List[ProjectMergePlan]:
    """Merge plans for every unmerged project, in first-seen order."""
    return [merge_project_batches(parts, g.project_code) for g in get_unmerged_projects(parts)]


@dataclass
class ProjectMergePreview:
    """A project's parts and the repeats among them, shown before merging."""
    project_code: str
    parts: List[Part] = field(default_factory=list)
    duplicate_groups: List[DuplicateGroup] = field(default_factory=list)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectCode": self.project_code,
            "partIds": [p.part_id for p in self.parts],
            "duplicateGroups": [g.to_dict() for g in self.duplicate_groups],
        }


def preview_project_merge(
    parts: List[Part],
    project_code: str,
    config: Config = default_config,
) -> ProjectMergePreview:
    """Collect a project's parts and run duplicate detection over them."""
    project_parts = [p for p in parts if p.project_code == project_code and not p.is_rejected]
    return ProjectMergePreview(
        project_code=project_code,
        parts=project_parts,
        duplicate_groups=detect_duplicates(project_parts, config=config),
    )
