"""
VCS Protocol
============

Interface contract for backends that supply commit history to the merge-status
core. The core never talks to a live repository directly; it only calls the
two coroutines below, each of which is a potential suspension point.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import CommitLogEntry, DirectoryEntry


@runtime_checkable
class VersionControlLogSource(Protocol):
    """Read-only access to repository history and layout."""

    async def get_log(
        self,
        path: str,
        limit: int | None = None,
        stop_at_branch_creation: bool = False,
    ) -> list[CommitLogEntry]:
        """
        Return the commit log for a repository path, newest first.

        Args:
            path: Full repository URI of the path
            limit: Maximum number of entries (None = unbounded)
            stop_at_branch_creation: Exclude history inherited from before
                the path was copied (branch creation point)

        Returns:
            Ordered entries; an empty list when the path exists without history

        Raises:
            PathNotFoundError: The path does not exist
            LogRetrievalError: Network, protocol or timeout failure
        """
        ...

    async def list_children(self, path: str) -> list[DirectoryEntry]:
        """
        List the immediate children of a repository path.

        Raises:
            PathNotFoundError: The path does not exist
            LogRetrievalError: Network, protocol or timeout failure
        """
        ...
