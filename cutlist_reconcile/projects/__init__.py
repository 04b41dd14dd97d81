"""Project batch merging for multi-page submissions."""

from .batch_merger import (
    ProjectMergePlan,
    ProjectMergePreview,
    get_unmerged_projects,
    group_projects,
    merge_all_projects,
    merge_project_batches,
    preview_project_merge,
)

__all__ = [
    "ProjectMergePlan",
    "ProjectMergePreview",
    "get_unmerged_projects",
    "group_projects",
    "merge_all_projects",
    "merge_project_batches",
    "preview_project_merge",
]
