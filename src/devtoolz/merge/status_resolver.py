"""Merge status resolution for a single project.

Compares a project's branch history against the newest merge marker in its
trunk history. This is a snapshot comparison: it trusts the marker to declare
merge provenance and relies on revision numbers being globally monotonic, so
trunk and branch revisions are directly comparable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from devtoolz.core.vcs import CommitLogEntry, VersionControlLogSource

from .exceptions import BranchNotFoundError
from .filters import DEFAULT_NOISE_PATTERNS, filter_log
from .marker import find_marker
from .models import MergeMarker, MergeStatus, MergeStatusRecord, ProjectMergeTarget

logger = logging.getLogger(__name__)


def classify(marker: MergeMarker | None, remaining: Sequence[CommitLogEntry]) -> MergeStatus:
    """Classify filtered branch commits against the active merge marker.

    Args:
        marker: Newest merge marker for the branch, if any
        remaining: Qualifying branch commits, newest first

    Returns:
        PENDING when work exists past the marker (or no marker exists),
        MERGED when every qualifying commit is at or below the marker,
        EMPTY when nothing qualifies.
    """
    if not remaining:
        return MergeStatus.EMPTY
    if marker is None:
        return MergeStatus.PENDING
    if remaining[0].revision > marker.source_revision:
        return MergeStatus.PENDING
    return MergeStatus.MERGED


async def resolve_merge_status(
    target: ProjectMergeTarget,
    target_branch: str,
    log_source: VersionControlLogSource,
    log_limit: int,
    author: str | None = None,
    noise_patterns: Iterable[str] = DEFAULT_NOISE_PATTERNS,
) -> MergeStatusRecord:
    """Resolve one project's merge status for *target_branch*.

    Raises:
        PathNotFoundError: Trunk or branch path does not exist
        LogRetrievalError: The log source failed for either path
        MergeMarkerParseError: A matching trunk marker carried no revision
        BranchNotFoundError: The branch log is empty
    """
    trunk_log = await log_source.get_log(target.trunk_path, limit=log_limit)
    marker = find_marker(trunk_log, target_branch)

    branch_path = target.branch_path(target_branch)
    branch_log = await log_source.get_log(branch_path, stop_at_branch_creation=True)
    if not branch_log:
        raise BranchNotFoundError(branch_path)

    remaining = filter_log(branch_log, noise_patterns, author)
    status = classify(marker, remaining)

    logger.debug(
        "%s: %d of %d branch commits qualify, marker=%s, status=%s",
        target.project,
        len(remaining),
        len(branch_log),
        marker.source_revision if marker else None,
        status.name,
    )
    return MergeStatusRecord(
        project=target.project,
        status=status,
        outstanding_commit_count=len(remaining),
    )
