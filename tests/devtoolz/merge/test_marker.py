from __future__ import annotations

import pytest

from devtoolz.merge import (
    MergeMarkerParseError,
    announcement_pattern,
    find_marker,
    parse_marker_revision,
)
from vcs_fakes import make_entry


def test_parse_marker_revision_single_value() -> None:
    assert parse_marker_revision("MERGE 120 from release-4.2") == 120


def test_parse_marker_revision_range_takes_upper_bound() -> None:
    assert parse_marker_revision("MERGE 115-130 release-4.2") == 130


def test_parse_marker_revision_without_digits_raises() -> None:
    with pytest.raises(MergeMarkerParseError) as excinfo:
        parse_marker_revision("MERGE release-4.2 to trunk", trunk_revision=77)

    assert excinfo.value.trunk_revision == 77
    assert "release-4.2" in str(excinfo.value)


def test_announcement_pattern_escapes_branch_name() -> None:
    pattern = announcement_pattern("release-4.2")

    assert pattern.search("MERGE 10 release-4.2")
    assert not pattern.search("MERGE 10 release-4x2")
    assert not pattern.search("Merged 10 release-4.2")


def test_announcement_pattern_rejects_empty_branch() -> None:
    with pytest.raises(ValueError):
        announcement_pattern("")


def test_find_marker_returns_newest_matching_entry() -> None:
    trunk = [
        make_entry(300, "Fix trunk-only defect"),
        make_entry(290, "MERGE 250 from release-4.2"),
        make_entry(280, "MERGE 260 from release-5.0"),
        make_entry(270, "MERGE 200 from release-4.2"),
    ]

    marker = find_marker(trunk, "release-4.2")

    assert marker is not None
    assert marker.source_revision == 250
    assert marker.trunk_revision == 290
    assert marker.message == "MERGE 250 from release-4.2"


def test_find_marker_returns_none_when_branch_never_merged() -> None:
    trunk = [make_entry(10, "MERGE 5 from other-branch"), make_entry(9, "Initial import")]

    assert find_marker(trunk, "release-4.2") is None


def test_find_marker_propagates_parse_error_instead_of_reporting_no_marker() -> None:
    trunk = [make_entry(42, "MERGE release-4.2 manually")]

    with pytest.raises(MergeMarkerParseError):
        find_marker(trunk, "release-4.2")
