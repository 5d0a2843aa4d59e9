"""Concurrent reconciliation of a branch group.

Resolves every project of a group concurrently and re-sequences the results
into the group's declared order. Two failure policies are supported:

- collect-partial (default): project-level errors become ProjectFailure rows
  and every sibling runs to completion.
- fail-fast: the first error cancels in-flight siblings and propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, TypeVar

from devtoolz.core.vcs import VCSError

from .exceptions import (
    BranchNotFoundError,
    MergeMarkerParseError,
    UnknownBranchGroupError,
    UnknownProjectError,
)
from .models import BranchGroup, MergeStatusRecord, ProjectFailure, ProjectMergeTarget, ReportRow
from .status_resolver import resolve_merge_status

if TYPE_CHECKING:
    from devtoolz.context import RunContext

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_CONCURRENCY = 8

# Errors isolated to a single project; anything else is a defect and propagates.
PROJECT_LEVEL_ERRORS: tuple[type[Exception], ...] = (
    VCSError,
    MergeMarkerParseError,
    BranchNotFoundError,
)


async def gather_ordered(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    *,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    fail_fast: bool = False,
    capture: tuple[type[BaseException], ...] = PROJECT_LEVEL_ERRORS,
) -> list[R | BaseException]:
    """Run *fn* over *items* concurrently, returning outcomes in input order.

    Args:
        items: Inputs; the output has one outcome per input at the same index
        fn: Coroutine function applied to each item
        max_concurrency: Upper bound on simultaneously running calls
        fail_fast: Cancel siblings and re-raise on the first exception
        capture: Exception types returned as outcomes in collect-partial mode

    Returns:
        Results, or captured exceptions in place of results (collect-partial only).
    """
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be >= 1")
    if not items:
        return []

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _bounded(item: T) -> R:
        async with semaphore:
            return await fn(item)

    tasks = [asyncio.create_task(_bounded(item)) for item in items]

    if fail_fast:
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException) and not isinstance(outcome, capture):
            raise outcome
    return list(outcomes)


def find_branch_group(groups: Iterable[BranchGroup], name: str) -> BranchGroup:
    """Return the group called *name* (exact, case-sensitive match).

    Raises:
        UnknownBranchGroupError: If no group has that name.
    """
    for group in groups:
        if group.name == name:
            return group
    raise UnknownBranchGroupError(name)


def resolve_group_targets(
    group: BranchGroup,
    registry: Mapping[str, ProjectMergeTarget],
) -> list[ProjectMergeTarget]:
    """Map the group's project names to targets, preserving declared order.

    Raises:
        UnknownProjectError: Listing every name absent from *registry*.
    """
    missing = [name for name in group.projects if name not in registry]
    if missing:
        raise UnknownProjectError(missing)
    return [registry[name] for name in group.projects]


async def resolve_target(target: ProjectMergeTarget, context: RunContext) -> MergeStatusRecord:
    """Resolve a single target with the options carried by *context*."""
    return await resolve_merge_status(
        target,
        context.target_branch,
        context.log_source,
        context.log_limit,
        author=context.author,
        noise_patterns=context.noise_patterns,
    )


async def reconcile_targets(
    targets: Sequence[ProjectMergeTarget],
    context: RunContext,
) -> list[ReportRow]:
    """Resolve *targets* concurrently under the context's failure policy."""

    async def _resolve(target: ProjectMergeTarget) -> MergeStatusRecord:
        return await resolve_target(target, context)

    outcomes = await gather_ordered(
        targets,
        _resolve,
        max_concurrency=context.max_concurrency,
        fail_fast=context.fail_fast,
    )

    rows: list[ReportRow] = []
    for target, outcome in zip(targets, outcomes):
        if isinstance(outcome, BaseException):
            logger.warning("Merge status failed for %s: %s", target.project, outcome)
            rows.append(ProjectFailure.from_exception(target.project, outcome))
        else:
            rows.append(outcome)
    return rows


async def reconcile_branch_group(
    group: BranchGroup,
    registry: Mapping[str, ProjectMergeTarget],
    context: RunContext,
) -> list[ReportRow]:
    """Reconcile every project of *group* and return rows in declared order.

    Raises:
        UnknownProjectError: Before any resolution starts, if the group names
            a project missing from *registry*.
    """
    targets = resolve_group_targets(group, registry)
    logger.debug("Reconciling group %s (%d projects)", group.name, len(targets))
    return await reconcile_targets(targets, context)
