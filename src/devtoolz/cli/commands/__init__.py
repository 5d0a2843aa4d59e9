"""CLI command modules for devtoolz.

Each DevToolz utility is one command; they share the
merge-status core and differ only in how they build the project list.
"""

from __future__ import annotations

import typer

from .branch_list import branch_list
from .master_merge_status import master_merge_status
from .merge_status import merge_status


def register_commands(app: typer.Typer) -> None:
    """Attach every devtoolz command to *app*."""
    app.command("merge-status")(merge_status)
    app.command("master-merge-status")(master_merge_status)
    app.command("branch-list")(branch_list)


__all__ = [
    "branch_list",
    "master_merge_status",
    "merge_status",
    "register_commands",
]
