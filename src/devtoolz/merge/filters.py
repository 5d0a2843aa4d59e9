"""Noise filtering for branch commit logs.

Administrative commits (branch creation, externals and version bumps) and
merge announcements never count as outstanding work. Filtering is pure and
order-preserving; the input sequence is never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from devtoolz.core.vcs import CommitLogEntry

MERGE_NOISE_PATTERN = "MERGE"

DEFAULT_NOISE_PATTERNS: tuple[str, ...] = (
    "Created release branch",
    "Created feature branch",
    "Updated svn:externals",
    "Updated project file",
    "Updated version information",
    MERGE_NOISE_PATTERN,
)

# Database project scaffolding committed when a branch is cut.
SCAFFOLDING_NOISE_PATTERNS: tuple[str, ...] = (
    "Created DataConfig",
    "Created Functions",
    "Created StoredProcs",
    "Created Tables",
    "Created Views",
    "Created ClientSettings",
    "Initial setup",
)


def build_noise_patterns(*groups: Iterable[str]) -> tuple[str, ...]:
    """Concatenate pattern groups, dropping blanks and duplicates in order."""
    seen: dict[str, None] = {}
    for group in groups:
        for pattern in group:
            if pattern and pattern not in seen:
                seen[pattern] = None
    return tuple(seen)


def is_noise(message: str, noise_patterns: Iterable[str]) -> bool:
    """Return True if *message* contains any noise substring (case-sensitive)."""
    return any(pattern in message for pattern in noise_patterns)


def filter_log(
    entries: Sequence[CommitLogEntry],
    noise_patterns: Iterable[str] = DEFAULT_NOISE_PATTERNS,
    author: str | None = None,
) -> list[CommitLogEntry]:
    """Drop noise commits and, when *author* is given, other authors' commits.

    Args:
        entries: Commit log, newest first
        noise_patterns: Substrings marking a commit as noise
        author: Exact author name to keep; None or "" disables the filter

    Returns:
        A new list holding the retained entries in their original order.
    """
    patterns = tuple(noise_patterns)
    return [
        entry
        for entry in entries
        if not is_noise(entry.message, patterns) and (not author or entry.author == author)
    ]
