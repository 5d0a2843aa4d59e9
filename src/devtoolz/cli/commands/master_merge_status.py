"""Merge status across every project in the repository that has the branch."""

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
from devtoolz.cli.ui import StepTracker, emit_report
from devtoolz.config import DEFAULT_CONFIG_FILENAME
from devtoolz.context import RunContext
from devtoolz.core.vcs import VCSError
from devtoolz.merge import (
    MergeStatusError,
    branch_probe,
    discover_branched_projects,
    list_projects,
    reconcile_targets,
)
from devtoolz.merge.models import ReportRow


async def run_master_merge_status(context: RunContext, tracker: StepTracker) -> list[ReportRow]:
    """List projects, keep those with the branch, and reconcile them all."""
    config = context.config

    tracker.start("list")
    projects = await list_projects(context.log_source, config.svn_repos)
    tracker.complete("list", f"{len(projects)} projects")

    tracker.start("discover")
    probe = branch_probe(
        context.log_source,
        config.svn_repos,
        context.target_branch,
        config.merge_config.branches_uri,
    )
    branched = await discover_branched_projects(
        projects, probe, max_concurrency=context.max_concurrency
    )
    tracker.complete("discover", f"{len(branched)} with {context.target_branch}")

    tracker.start("resolve")
    targets = [config.target_for(name) for name in branched]
    rows = await reconcile_targets(targets, context)
    failures = sum(1 for row in rows if row.failed)
    if failures:
        tracker.error("resolve", f"{failures} failed")
    else:
        tracker.complete("resolve")
    return rows


def master_merge_status(
    branch: str = typer.Argument(..., help="Target branch name"),
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
    """Check merge status of a branch for every project that contains it."""
    if not json_output:
        show_banner("master-merge-status")

    config = load_config_or_exit(config_path)
    log_source = get_log_source_or_exit(config)

    try:
        context = RunContext.create(
            config,
            branch,
            log_source,
            log_limit=log_limit,
            author=author,
            fail_fast=fail_fast,
            include_scaffolding=True,
        )
    except ValueError as exc:
        exit_with_error(exc)

    tracker = StepTracker(f"Merge status for {branch}")
    tracker.add("list", "Generate list of all projects")
    tracker.add("discover", f"Filter to projects containing a {branch} branch")
    tracker.add("resolve", f"Check merge status on {branch} back to TRUNK")

    if not json_output and context.author:
        console.print(f"Filtering by author: {context.author}")

    started = time.monotonic()
    try:
        rows = asyncio.run(run_master_merge_status(context, tracker))
    except (MergeStatusError, VCSError) as exc:
        for step in tracker.steps:
            if step["status"] == "running":
                tracker.error(step["key"], type(exc).__name__)
        if not json_output:
            console.print(tracker.render())
        exit_with_error(exc)

    if not json_output:
        console.print(tracker.render())

    emit_report(
        console,
        rows,
        elapsed=time.monotonic() - started,
        json_output=json_output,
        branch=context.target_branch,
    )
    if any(row.failed for row in rows):
        raise typer.Exit(1)


__all__ = ["master_merge_status", "run_master_merge_status"]
