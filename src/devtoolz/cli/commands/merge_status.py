"""Merge status for a configured branch group or a single project.

Group mode reconciles every project of the group and reports per-project
failures as ERROR rows (collect-partial) unless ``--fail-fast`` is given.
Single-project mode aborts on the project's error, since it is the only
project requested.
"""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Optional

import typer

from devtoolz.cli.helpers import (
    console,
    exit_with_error,
    get_log_source_or_exit,
    load_config_or_exit,
    show_banner,
)
from devtoolz.cli.ui import emit_report
from devtoolz.config import DEFAULT_CONFIG_FILENAME
from devtoolz.context import RunContext
from devtoolz.core.vcs import VCSError
from devtoolz.merge import (
    MergeStatusError,
    UnknownProjectError,
    find_branch_group,
    reconcile_branch_group,
    resolve_target,
)
from devtoolz.merge.models import ReportRow


async def _resolve_single_project(project: str, context: RunContext) -> list[ReportRow]:
    registry = context.config.build_registry()
    if project not in registry:
        raise UnknownProjectError([project])
    return [await resolve_target(registry[project], context)]


async def _resolve_branch_group(group_name: str, context: RunContext) -> list[ReportRow]:
    group = find_branch_group(context.config.branch_groups, group_name)
    return await reconcile_branch_group(group, context.config.build_registry(), context)


def merge_status(
    branch: str = typer.Argument(..., help="Target branch name"),
    group: Optional[str] = typer.Option(
        None, "--group", "-g", help="Branch group to check (defaults to the branch name)"
    ),
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Check a single configured project instead of a group"
    ),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME), "--config", "-c", help="Path to configuration file"
    ),
    log_limit: Optional[int] = typer.Option(
        None, "--log", "-l", min=1, help="Number of trunk log commits to include (default from config, 1000)"
    ),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Filter results by author name"),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Abort on the first project error instead of reporting it"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the report as JSON"),
) -> None:
    """Check merge status of a branch back to trunk for configured projects."""
    if group and project:
        exit_with_error("--group and --project cannot be combined.")
    if not json_output:
        show_banner("merge-status")

    config = load_config_or_exit(config_path)
    log_source = get_log_source_or_exit(config)

    try:
        context = RunContext.create(
            config,
            branch,
            log_source,
            log_limit=log_limit,
            author=author,
            fail_fast=fail_fast or project is not None,
        )
    except ValueError as exc:
        exit_with_error(exc)

    if not json_output:
        scope = f"project {project}" if project else f"branch {group or branch}"
        console.print(f"Checking merge status on {scope} back to TRUNK...")
        if context.author:
            console.print(f"Filtering by author: {context.author}")

    started = time.monotonic()
    try:
        if project:
            rows = asyncio.run(_resolve_single_project(project, context))
        else:
            rows = asyncio.run(_resolve_branch_group(group or branch, context))
    except (MergeStatusError, VCSError) as exc:
        exit_with_error(exc)

    emit_report(
        console,
        rows,
        elapsed=time.monotonic() - started,
        json_output=json_output,
        branch=context.target_branch,
    )
    if any(row.failed for row in rows):
        raise typer.Exit(1)


__all__ = ["merge_status"]
