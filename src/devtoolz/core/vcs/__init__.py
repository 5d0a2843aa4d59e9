"""
VCS Abstraction Package
=======================

Read-only access to version-control history for the merge-status core.

Usage:
    from devtoolz.core.vcs import (
        CommitLogEntry,
        VersionControlLogSource,
        get_log_source,
    )
"""

from __future__ import annotations

# Dataclasses and enums
from .types import (
    CommitLogEntry,
    DirectoryEntry,
    EntryKind,
)

# Protocol
from .protocol import VersionControlLogSource

# Exceptions
from .exceptions import (
    LogRetrievalError,
    PathNotFoundError,
    VCSError,
    VCSNotFoundError,
)

# Backend and factory
from .subversion import SubversionLogSource
from .detection import get_log_source, get_svn_version, is_svn_available

__all__ = [
    # Types
    "CommitLogEntry",
    "DirectoryEntry",
    "EntryKind",
    # Protocol
    "VersionControlLogSource",
    # Exceptions
    "VCSError",
    "VCSNotFoundError",
    "PathNotFoundError",
    "LogRetrievalError",
    # Backend
    "SubversionLogSource",
    "get_log_source",
    "get_svn_version",
    "is_svn_available",
]
