"""Merge marker recognition in trunk history.

A merge marker is a trunk commit whose message starts with ``MERGE`` and
names the target branch, e.g. ``MERGE 120 from release-4.2`` or
``MERGE 115-130 release-4.2``. The recorded revision is the single number,
or the upper bound when a range is given.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from devtoolz.core.vcs import CommitLogEntry

from .exceptions import MergeMarkerParseError
from .models import MergeMarker

logger = logging.getLogger(__name__)

MERGE_REVISION_PATTERN = re.compile(r"^MERGE (\d+)(?:-(\d+))?")


def announcement_pattern(target_branch: str) -> re.Pattern[str]:
    """Pattern for a trunk message announcing a merge from *target_branch*."""
    if not target_branch:
        raise ValueError("target branch must be a non-empty string")
    return re.compile(r"^MERGE.*" + re.escape(target_branch))


def parse_marker_revision(message: str, trunk_revision: int | None = None) -> int:
    """Extract the merged branch revision from a merge announcement.

    Raises:
        MergeMarkerParseError: If the message has no ``MERGE <digits>`` prefix.
    """
    match = MERGE_REVISION_PATTERN.match(message)
    if match is None:
        raise MergeMarkerParseError(message, trunk_revision)
    lower, upper = match.groups()
    return int(upper) if upper is not None else int(lower)


def find_marker(
    trunk_entries: Sequence[CommitLogEntry],
    target_branch: str,
) -> MergeMarker | None:
    """Return the marker of the first matching trunk entry, or None.

    Entries are scanned in the given (newest-first) order, so several
    announcements for the same branch resolve to the most recent one.
    """
    pattern = announcement_pattern(target_branch)
    for entry in trunk_entries:
        if pattern.search(entry.message):
            revision = parse_marker_revision(entry.message, entry.revision)
            logger.debug(
                "Found merge marker r%d -> %s@%d", entry.revision, target_branch, revision
            )
            return MergeMarker(
                source_revision=revision,
                trunk_revision=entry.revision,
                message=entry.message,
            )
    return None
