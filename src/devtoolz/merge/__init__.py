"""Merge subpackage for devtoolz merge-status operations.

This package decides, per project, whether branch work has been merged back
to trunk, based purely on commit-log metadata.

Modules:
    models: Targets, markers, statuses and report rows
    filters: Noise-commit filtering
    marker: Merge marker recognition in trunk history
    status_resolver: Single-project classification
    reconcile: Concurrent, order-preserving group reconciliation
    discovery: Projects containing a given branch
    exceptions: Merge-status error taxonomy
"""

from __future__ import annotations

from .discovery import branch_probe, discover_branched_projects, list_projects
from .exceptions import (
    BranchNotFoundError,
    MergeMarkerParseError,
    MergeStatusError,
    UnknownBranchGroupError,
    UnknownProjectError,
)
from .filters import (
    DEFAULT_NOISE_PATTERNS,
    SCAFFOLDING_NOISE_PATTERNS,
    build_noise_patterns,
    filter_log,
    is_noise,
)
from .marker import announcement_pattern, find_marker, parse_marker_revision
from .models import (
    FAILED_STATUS,
    BranchGroup,
    MergeMarker,
    MergeStatus,
    MergeStatusRecord,
    ProjectFailure,
    ProjectMergeTarget,
    ReportRow,
    join_uri,
)
from .reconcile import (
    find_branch_group,
    gather_ordered,
    reconcile_branch_group,
    reconcile_targets,
    resolve_group_targets,
    resolve_target,
)
from .status_resolver import classify, resolve_merge_status

__all__ = [
    "BranchGroup",
    "BranchNotFoundError",
    "DEFAULT_NOISE_PATTERNS",
    "FAILED_STATUS",
    "MergeMarker",
    "MergeMarkerParseError",
    "MergeStatus",
    "MergeStatusError",
    "MergeStatusRecord",
    "ProjectFailure",
    "ProjectMergeTarget",
    "ReportRow",
    "SCAFFOLDING_NOISE_PATTERNS",
    "UnknownBranchGroupError",
    "UnknownProjectError",
    "announcement_pattern",
    "branch_probe",
    "build_noise_patterns",
    "classify",
    "discover_branched_projects",
    "filter_log",
    "find_branch_group",
    "find_marker",
    "gather_ordered",
    "is_noise",
    "join_uri",
    "list_projects",
    "parse_marker_revision",
    "reconcile_branch_group",
    "reconcile_targets",
    "resolve_group_targets",
    "resolve_merge_status",
    "resolve_target",
]
