"""Exception hierarchy for merge-status reconciliation."""

from __future__ import annotations


class MergeStatusError(Exception):
    """Base exception for merge-status errors."""

    pass


class MergeMarkerParseError(MergeStatusError):
    """A trunk message announced a merge but carried no revision number.

    Indicates a malformed commit message upstream. Never treated as "no
    marker", which would misclassify a merged project as pending.
    """

    def __init__(self, message_text: str, trunk_revision: int | None = None):
        self.message_text = message_text
        self.trunk_revision = trunk_revision
        where = f" in r{trunk_revision}" if trunk_revision is not None else ""
        super().__init__(f"Merge marker without a revision number{where}: {message_text!r}")


class BranchNotFoundError(MergeStatusError):
    """The branch path returned no log entries at all."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Branch not found or has no history: {path}")


class UnknownProjectError(MergeStatusError):
    """One or more project names are absent from the project registry."""

    def __init__(self, names: list[str]):
        self.names = list(names)
        joined = ", ".join(self.names)
        super().__init__(f"Merge project(s) not configured: {joined}")


class UnknownBranchGroupError(MergeStatusError):
    """The requested branch group is not configured."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Merge branch group {name} is not configured.")
