"""
DevToolz CLI - merge status reporting for Subversion projects.

Usage:
    devtoolz merge-status <branch> [--group NAME | --project NAME]
    devtoolz master-merge-status <branch>
    devtoolz branch-list <branch>
"""

__version__ = "2.0.0"

import sys

import typer
from typer.core import TyperGroup

from devtoolz.cli.commands import register_commands
from devtoolz.cli.helpers import configure_logging, console, show_banner


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="devtoolz",
    help="Check whether branch commits have been merged back to trunk across projects",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"devtoolz {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Show banner when no subcommand is provided."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print("[dim]Run 'devtoolz --help' for usage information[/dim]")
        console.print()


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
