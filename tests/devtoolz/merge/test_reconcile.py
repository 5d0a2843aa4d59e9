from __future__ import annotations

import asyncio

import pytest

from devtoolz.config import DevtoolzConfig
from devtoolz.context import RunContext
from devtoolz.core.vcs import LogRetrievalError
from devtoolz.merge import (
    BranchGroup,
    MergeStatus,
    MergeStatusRecord,
    ProjectFailure,
    UnknownBranchGroupError,
    UnknownProjectError,
    find_branch_group,
    gather_ordered,
    reconcile_branch_group,
    resolve_group_targets,
)
from vcs_fakes import FakeLogSource, branch_path, make_entry, trunk_path

BRANCH = "feature-x"


def _seed(source: FakeLogSource, projects: tuple[str, ...] = ("P1", "P2", "P3")) -> None:
    for project in projects:
        source.add_log(trunk_path(project), make_entry(200, f"MERGE 150 from {BRANCH}"))
        source.add_log(branch_path(project, BRANCH), make_entry(180, "Fix"), make_entry(140, "Fix"))


def _run_group(config: DevtoolzConfig, source: FakeLogSource, name: str = "feature-x", **kwargs):
    context = RunContext.create(config, BRANCH, source, **kwargs)
    group = find_branch_group(config.branch_groups, name)
    return asyncio.run(reconcile_branch_group(group, config.build_registry(), context))


def test_rows_follow_declared_order_not_completion_order(
    sample_config: DevtoolzConfig, fake_source: FakeLogSource
) -> None:
    _seed(fake_source)
    fake_source.delays[trunk_path("P1")] = 0.03
    fake_source.delays[trunk_path("P2")] = 0.06

    rows = _run_group(sample_config, fake_source)

    finished = [path for path in fake_source.completed if path.endswith("/trunk")]
    assert finished == [trunk_path("P3"), trunk_path("P1"), trunk_path("P2")]
    assert [row.project for row in rows] == ["P1", "P2", "P3"]
    assert all(row.status is MergeStatus.PENDING for row in rows)


def test_collect_partial_keeps_siblings_and_reports_failures(
    sample_config: DevtoolzConfig, fake_source: FakeLogSource
) -> None:
    _seed(fake_source, ("P1", "P3"))
    fake_source.add_log(trunk_path("P2"))
    fake_source.add_log(branch_path("P2", BRANCH))
    fake_source.errors[trunk_path("P3")] = LogRetrievalError(trunk_path("P3"), "connection reset")

    rows = _run_group(sample_config, fake_source)

    assert [row.project for row in rows] == ["P1", "P2", "P3"]
    assert isinstance(rows[0], MergeStatusRecord)
    assert isinstance(rows[1], ProjectFailure)
    assert rows[1].error_type == "BranchNotFoundError"
    assert isinstance(rows[2], ProjectFailure)
    assert rows[2].error_type == "LogRetrievalError"
    assert "connection reset" in rows[2].message


def test_fail_fast_cancels_in_flight_siblings(
    sample_config: DevtoolzConfig, fake_source: FakeLogSource
) -> None:
    _seed(fake_source)
    fake_source.errors[trunk_path("P1")] = LogRetrievalError(trunk_path("P1"), "boom")
    fake_source.delays[trunk_path("P2")] = 5
    fake_source.delays[trunk_path("P3")] = 5

    with pytest.raises(LogRetrievalError):
        _run_group(sample_config, fake_source, fail_fast=True)

    assert sorted(fake_source.cancelled) == [trunk_path("P2"), trunk_path("P3")]
    assert not any(path.endswith(BRANCH) for path in fake_source.completed)


def test_unknown_project_aborts_before_any_resolution(
    sample_config: DevtoolzConfig, fake_source: FakeLogSource
) -> None:
    _seed(fake_source)

    with pytest.raises(UnknownProjectError) as excinfo:
        _run_group(sample_config, fake_source, name="broken")

    assert excinfo.value.names == ["Missing"]
    assert fake_source.calls == []


def test_find_branch_group_is_exact_match(sample_config: DevtoolzConfig) -> None:
    assert find_branch_group(sample_config.branch_groups, "feature-x").projects == ("P1", "P2", "P3")
    with pytest.raises(UnknownBranchGroupError):
        find_branch_group(sample_config.branch_groups, "Feature-X")


def test_resolve_group_targets_lists_every_missing_name(sample_config: DevtoolzConfig) -> None:
    group = BranchGroup("g", ("P1", "Nope", "P2", "Gone"))

    with pytest.raises(UnknownProjectError) as excinfo:
        resolve_group_targets(group, sample_config.build_registry())

    assert excinfo.value.names == ["Nope", "Gone"]


def test_gather_ordered_bounds_concurrency() -> None:
    running = 0
    peak = 0

    async def _work(item: int) -> int:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return item * 2

    results = asyncio.run(gather_ordered(list(range(10)), _work, max_concurrency=3))

    assert results == [item * 2 for item in range(10)]
    assert peak == 3


def test_gather_ordered_propagates_uncaptured_errors() -> None:
    async def _work(item: int) -> int:
        if item == 1:
            raise KeyError(item)
        return item

    with pytest.raises(KeyError):
        asyncio.run(gather_ordered([0, 1, 2], _work))


def test_gather_ordered_empty_input() -> None:
    async def _work(item: int) -> int:
        return item

    assert asyncio.run(gather_ordered([], _work)) == []
