"""Shared helpers for devtoolz CLI commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from devtoolz.config import ConfigError, DevtoolzConfig, load_config
from devtoolz.core.vcs import VCSError, VersionControlLogSource, get_log_source

console = Console()
error_console = Console(stderr=True)

TAGLINE = "DevToolz - merge status reporting for Subversion projects"


def show_banner(utility: str | None = None) -> None:
    """Display the DevToolz header, optionally naming the running utility."""
    from devtoolz import __version__

    title = Text(f"DevToolz v{__version__}", style="bold bright_cyan", justify="center")
    console.print(Panel(title, subtitle=TAGLINE, expand=False, border_style="cyan"))
    if utility:
        console.print(f"[dim]utility:[/dim] {utility}")
    console.print()


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr; DEBUG when *verbose*."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def exit_with_error(exc: BaseException | str, code: int = 1) -> NoReturn:
    error_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code)


def load_config_or_exit(config_path: Path) -> DevtoolzConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        exit_with_error(exc)


def get_log_source_or_exit(config: DevtoolzConfig) -> VersionControlLogSource:
    try:
        return get_log_source(timeout=config.svn_timeout)
    except VCSError as exc:
        exit_with_error(exc)
