"""
VCS Types
=========

Data types exchanged between a version-control backend and the merge-status
core. Entries are immutable once retrieved; filtering always builds new lists.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class EntryKind(StrEnum):
    """Kind of a node returned by a directory listing."""

    DIR = "dir"
    FILE = "file"


@dataclass(frozen=True)
class CommitLogEntry:
    """A single commit as reported by the backend log."""

    revision: int  # monotonic, unique within a repository
    author: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {
            "revision": self.revision,
            "author": self.author,
            "message": self.message,
        }


@dataclass(frozen=True)
class DirectoryEntry:
    """A child node of a repository path."""

    name: str
    kind: EntryKind = EntryKind.DIR

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIR
