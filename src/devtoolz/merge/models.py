"""Data model for merge-status reconciliation.

Defines the per-project merge target, the merge marker recovered from trunk
history, the MergeStatus enum and the two kinds of report rows: a resolved
MergeStatusRecord and a ProjectFailure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Union


def join_uri(base: str, *segments: str) -> str:
    """Join repository URI segments with exactly one slash between them.

    Only trailing slashes are stripped from *base*, so scheme separators such
    as ``file:///`` survive.
    """
    uri = base.rstrip("/")
    for segment in segments:
        part = segment.strip("/")
        if part:
            uri = f"{uri}/{part}" if uri else part
    return uri


class MergeStatus(StrEnum):
    """Merge state of one project's branch relative to trunk."""

    EMPTY = ""
    MERGED = "MERGED"
    PENDING = "PENDING"


FAILED_STATUS = "ERROR"


@dataclass(frozen=True)
class ProjectMergeTarget:
    """Resolved repository locations for one project."""

    project: str
    trunk_path: str
    branches_path: str

    def branch_path(self, branch: str) -> str:
        return join_uri(self.branches_path, branch)


@dataclass(frozen=True)
class BranchGroup:
    """A named set of projects reconciled together under one branch."""

    name: str
    projects: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MergeMarker:
    """Branch revision a trunk commit declares as merged."""

    source_revision: int
    trunk_revision: int | None = None
    message: str = ""


@dataclass(frozen=True)
class MergeStatusRecord:
    """Terminal output unit for one successfully resolved project."""

    project: str
    status: MergeStatus
    outstanding_commit_count: int

    def __post_init__(self) -> None:
        if self.outstanding_commit_count < 0:
            raise ValueError("outstanding_commit_count must be >= 0")
        if (self.status == MergeStatus.EMPTY) != (self.outstanding_commit_count == 0):
            raise ValueError(
                f"status {self.status.name} is inconsistent with "
                f"{self.outstanding_commit_count} outstanding commit(s)"
            )

    @property
    def failed(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "status": self.status.value,
            "outstanding_commit_count": self.outstanding_commit_count,
        }


@dataclass(frozen=True)
class ProjectFailure:
    """Report row for a project whose resolution raised a project-level error."""

    project: str
    error_type: str
    message: str

    @property
    def status(self) -> str:
        return FAILED_STATUS

    @property
    def failed(self) -> bool:
        return True

    @classmethod
    def from_exception(cls, project: str, exc: BaseException) -> ProjectFailure:
        return cls(project=project, error_type=type(exc).__name__, message=str(exc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "status": FAILED_STATUS,
            "outstanding_commit_count": 0,
            "error": {"type": self.error_type, "message": self.message},
        }


ReportRow = Union[MergeStatusRecord, ProjectFailure]
