"""Reusable console rendering for devtoolz reports."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from devtoolz.merge.models import MergeStatus, ReportRow

STATUS_STYLES = {
    MergeStatus.PENDING.value: "yellow",
    MergeStatus.MERGED.value: "green",
    MergeStatus.EMPTY.value: "dim",
    "ERROR": "red",
}


class StepTracker:
    """Track and render the steps of a command with Rich trees."""

    def __init__(self, title: str):
        self.title = title
        self.steps = []  # list of dicts: {key, label, status, detail}

    def add(self, key: str, label: str):
        if key not in [s["key"] for s in self.steps]:
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})

    def start(self, key: str, detail: str = ""):
        self._update(key, status="running", detail=detail)

    def complete(self, key: str, detail: str = ""):
        self._update(key, status="done", detail=detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, status="error", detail=detail)

    def skip(self, key: str, detail: str = ""):
        self._update(key, status="skipped", detail=detail)

    def _update(self, key: str, status: str, detail: str):
        for s in self.steps:
            if s["key"] == key:
                s["status"] = status
                if detail:
                    s["detail"] = detail
                return
        self.steps.append({"key": key, "label": key, "status": status, "detail": detail})

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            label = step["label"]
            detail_text = step["detail"].strip() if step["detail"] else ""

            status = step["status"]
            if status == "done":
                symbol = "[green]●[/green]"
            elif status == "running":
                symbol = "[cyan]○[/cyan]"
            elif status == "error":
                symbol = "[red]●[/red]"
            elif status == "skipped":
                symbol = "[yellow]○[/yellow]"
            else:
                symbol = "[green dim]○[/green dim]"

            if detail_text:
                line = f"{symbol} [white]{label}[/white] [bright_black]({detail_text})[/bright_black]"
            else:
                line = f"{symbol} [white]{label}[/white]"
            tree.add(line)
        return tree


def build_report_table(rows: Sequence[ReportRow]) -> Table:
    """Render report rows as a Status / Commits / Project table."""
    show_errors = any(row.failed for row in rows)

    table = Table(show_edge=False, header_style="bold")
    table.add_column("Status", justify="right", min_width=7)
    table.add_column("Commits", justify="right", min_width=7)
    table.add_column("Project", min_width=31)
    if show_errors:
        table.add_column("Error", style="red")

    for row in rows:
        style = STATUS_STYLES.get(row.status, "white")
        status_cell = f"[{style}]{row.status}[/{style}]" if row.status else ""
        if row.failed:
            table.add_row(status_cell, "-", row.project, escape(row.message))
            continue
        cells = [status_cell, str(row.outstanding_commit_count), row.project]
        if show_errors:
            cells.append("")
        table.add_row(*cells)
    return table


def build_project_table(projects: Sequence[str]) -> Table:
    table = Table(show_edge=False, header_style="bold")
    table.add_column("Project", min_width=31)
    for project in projects:
        table.add_row(project)
    return table


def format_elapsed(seconds: float) -> str:
    """Format a duration as "Merge status check complete in M minutes and S seconds."."""
    minutes, secs = divmod(round(seconds), 60)
    return f"Merge status check complete in {minutes} minutes and {secs} seconds."


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def emit_report(
    console: Console,
    rows: Sequence[ReportRow],
    *,
    elapsed: float,
    json_output: bool,
    branch: str,
) -> None:
    """Print the report as JSON or as a table followed by timing."""
    if json_output:
        print_json(
            {
                "branch": branch,
                "elapsed_seconds": round(elapsed, 3),
                "projects": [row.to_dict() for row in rows],
            }
        )
        return

    console.print()
    console.print(build_report_table(rows))
    console.print()
    console.print(format_elapsed(elapsed))
    console.print()
