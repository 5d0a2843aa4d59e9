"""CLI helpers exposed for other modules."""

from .ui import StepTracker, build_project_table, build_report_table

__all__ = ["StepTracker", "build_project_table", "build_report_table"]
