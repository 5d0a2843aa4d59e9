"""List the projects whose branches directory contains a given branch."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

import typer

from devtoolz.cli.helpers import (
    console,
    exit_with_error,
    get_log_source_or_exit,
    load_config_or_exit,
    show_banner,
)
from devtoolz.cli.ui import build_project_table, print_json
from devtoolz.config import DEFAULT_CONFIG_FILENAME, DevtoolzConfig
from devtoolz.core.vcs import VCSError, VersionControlLogSource
from devtoolz.merge import branch_probe, discover_branched_projects, list_projects


async def find_projects_with_branch(
    config: DevtoolzConfig,
    log_source: VersionControlLogSource,
    branch: str,
) -> list[str]:
    projects = await list_projects(log_source, config.svn_repos)
    probe = branch_probe(log_source, config.svn_repos, branch, config.merge_config.branches_uri)
    return await discover_branched_projects(
        projects, probe, max_concurrency=config.max_concurrency
    )


def branch_list(
    branch: str = typer.Argument(..., help="Branch name to look for"),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_FILENAME), "--config", "-c", help="Path to configuration file"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output the project list as JSON"),
) -> None:
    """List every project that contains the given branch."""
    if not branch.strip():
        exit_with_error("Branch name must not be empty.")
    if not json_output:
        show_banner("branch-list")
        console.print(f"Filtering list to projects containing a {branch} branch...")

    config = load_config_or_exit(config_path)
    log_source = get_log_source_or_exit(config)

    started = time.monotonic()
    try:
        projects = asyncio.run(find_projects_with_branch(config, log_source, branch))
    except VCSError as exc:
        exit_with_error(exc)
    elapsed = time.monotonic() - started

    if json_output:
        print_json({"branch": branch, "projects": projects})
        return

    console.print()
    console.print(build_project_table(projects))
    console.print()
    console.print(f"Branch listing complete in {elapsed:.1f} seconds.")


__all__ = ["branch_list", "find_projects_with_branch"]
