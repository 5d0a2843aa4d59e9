"""Exception hierarchy for version-control backend operations."""

from __future__ import annotations


class VCSError(Exception):
    """Base exception for VCS operations."""

    pass


class VCSNotFoundError(VCSError):
    """The backend command-line tool is not available."""

    pass


class PathNotFoundError(VCSError):
    """A repository path does not exist in the backing system."""

    def __init__(self, path: str, detail: str | None = None):
        self.path = path
        message = f"Path not found: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class LogRetrievalError(VCSError):
    """The backend failed to return a log or listing.

    Covers network and protocol failures, malformed output and timeouts.
    Callers may retry on this kind; ``PathNotFoundError`` is never retried.
    """

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to read {path}: {detail}")
