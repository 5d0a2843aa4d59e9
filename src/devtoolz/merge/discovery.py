"""Discovery of projects that carry a given branch.

Lists every project under the repository root and keeps those whose
branches directory contains the target branch. Probes are independent
read-only listings and run concurrently; a backend failure aborts the pass.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence

from devtoolz.core.vcs import PathNotFoundError, VersionControlLogSource

from .models import join_uri
from .reconcile import DEFAULT_MAX_CONCURRENCY, gather_ordered

logger = logging.getLogger(__name__)

BranchProbe = Callable[[str], Awaitable[bool]]


async def list_projects(log_source: VersionControlLogSource, repository_root: str) -> list[str]:
    """Return the names of the directories directly under the repository root."""
    children = await log_source.list_children(repository_root)
    return [child.name.rstrip("/") for child in children if child.is_dir]


def branch_probe(
    log_source: VersionControlLogSource,
    repository_root: str,
    target_branch: str,
    branches_segment: str = "branches/",
) -> BranchProbe:
    """Build a probe answering "does this project contain *target_branch*?".

    A project without a branches directory answers False rather than failing.
    """

    async def _probe(project: str) -> bool:
        branches_path = join_uri(repository_root, project, branches_segment)
        try:
            children = await log_source.list_children(branches_path)
        except PathNotFoundError:
            logger.debug("%s has no branches directory", project)
            return False
        return any(child.is_dir and child.name.rstrip("/") == target_branch for child in children)

    return _probe


async def discover_branched_projects(
    all_projects: Sequence[str],
    probe: BranchProbe,
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> list[str]:
    """Keep the projects for which *probe* returns True, in input order."""
    outcomes = await gather_ordered(
        all_projects,
        probe,
        max_concurrency=max_concurrency,
        fail_fast=True,
    )
    return [project for project, keep in zip(all_projects, outcomes) if keep is True]
