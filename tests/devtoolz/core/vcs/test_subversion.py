"""
Tests for the Subversion log source.

The svn client is never invoked; ``asyncio.create_subprocess_exec`` is
patched with a scripted process.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from devtoolz.core.vcs import (
    CommitLogEntry,
    EntryKind,
    LogRetrievalError,
    PathNotFoundError,
    SubversionLogSource,
    VCSNotFoundError,
    VersionControlLogSource,
)
from devtoolz.core.vcs.subversion import is_not_found_error, parse_list_xml, parse_log_xml

URL = "svn://svn.example.com/repos/P1/trunk"

LOG_XML = """<?xml version="1.0" encoding="UTF-8"?>
<log>
<logentry revision="210">
<author>alice</author>
<date>2024-03-01T10:00:00.000000Z</date>
<msg>MERGE 200 from release-4.2</msg>
</logentry>
<logentry revision="205">
<date>2024-02-28T10:00:00.000000Z</date>
<msg>Anonymous commit</msg>
</logentry>
<logentry revision="201">
<author>bob</author>
<date>2024-02-27T10:00:00.000000Z</date>
</logentry>
</log>
"""

LIST_XML = """<?xml version="1.0" encoding="UTF-8"?>
<lists>
<list path="svn://svn.example.com/repos">
<entry kind="dir"><name>P1</name><commit revision="10"/></entry>
<entry kind="file"><name>README.txt</name><size>12</size></entry>
<entry kind="dir"><name>P2</name></entry>
</list>
</lists>
"""


class _FakeProcess:
    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0, hang: bool = False):
        self._stdout = stdout.encode("utf-8")
        self._stderr = stderr.encode("utf-8")
        self._hang = hang
        self.returncode: int | None = None if hang else returncode
        self.killed = False

    async def communicate(self) -> tuple[bytes, bytes]:
        if self._hang:
            await asyncio.sleep(10)
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode if self.returncode is not None else 0


def _spawn(process: _FakeProcess) -> AsyncMock:
    return AsyncMock(return_value=process)


# =============================================================================
# XML parsing
# =============================================================================


def test_parse_log_xml_preserves_order_and_defaults_missing_fields() -> None:
    entries = parse_log_xml(URL, LOG_XML)

    assert entries == [
        CommitLogEntry(210, "alice", "MERGE 200 from release-4.2"),
        CommitLogEntry(205, "", "Anonymous commit"),
        CommitLogEntry(201, "bob", ""),
    ]


def test_parse_log_xml_blank_output_is_empty() -> None:
    assert parse_log_xml(URL, "  \n") == []


def test_parse_log_xml_malformed_document_raises() -> None:
    with pytest.raises(LogRetrievalError, match="malformed log output"):
        parse_log_xml(URL, "<log><logentry revision='1'>")


def test_parse_log_xml_invalid_revision_raises() -> None:
    with pytest.raises(LogRetrievalError, match="invalid revision"):
        parse_log_xml(URL, "<log><logentry revision='abc'><msg>x</msg></logentry></log>")


def test_parse_list_xml_reports_kinds() -> None:
    children = parse_list_xml(URL, LIST_XML)

    assert [(child.name, child.kind) for child in children] == [
        ("P1", EntryKind.DIR),
        ("README.txt", EntryKind.FILE),
        ("P2", EntryKind.DIR),
    ]


@pytest.mark.parametrize(
    "stderr",
    [
        "svn: E160013: File not found: revision 12, path '/P1/branches'",
        "svn: E170000: URL 'svn://h/r/P9' doesn't exist",
        "svn: warning: W160013: URL 'svn://h/r/P9/branches' non-existent in revision 42",
        "svn: E200009: Could not list all targets because some targets don't exist",
    ],
)
def test_is_not_found_error_recognises_svn_codes(stderr: str) -> None:
    assert is_not_found_error(stderr)


def test_is_not_found_error_ignores_other_failures() -> None:
    assert not is_not_found_error("svn: E170013: Unable to connect to a repository at URL")


# =============================================================================
# Subprocess invocation
# =============================================================================


def test_source_satisfies_protocol() -> None:
    assert isinstance(SubversionLogSource(), VersionControlLogSource)


def test_get_log_builds_command_with_limit_and_stop_on_copy() -> None:
    spawn = _spawn(_FakeProcess(stdout=LOG_XML))
    source = SubversionLogSource(extra_args=["--username", "ci"])

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", spawn):
        entries = asyncio.run(source.get_log(URL, limit=25, stop_at_branch_creation=True))

    assert len(entries) == 3
    args = spawn.call_args.args
    assert args == (
        "svn",
        "log",
        "--limit",
        "25",
        "--stop-on-copy",
        "--xml",
        "--non-interactive",
        "--username",
        "ci",
        URL,
    )


def test_get_log_without_limit_is_unbounded() -> None:
    spawn = _spawn(_FakeProcess(stdout=LOG_XML))

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", spawn):
        asyncio.run(SubversionLogSource().get_log(URL))

    assert "--limit" not in spawn.call_args.args
    assert "--stop-on-copy" not in spawn.call_args.args


def test_list_children_parses_listing() -> None:
    spawn = _spawn(_FakeProcess(stdout=LIST_XML))

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", spawn):
        children = asyncio.run(SubversionLogSource().list_children("svn://svn.example.com/repos"))

    assert [child.name for child in children if child.is_dir] == ["P1", "P2"]
    assert spawn.call_args.args[:2] == ("svn", "list")


def test_missing_path_maps_to_path_not_found() -> None:
    process = _FakeProcess(
        stderr="svn: E160013: File not found: revision 42, path '/P1/branches/x'\n",
        returncode=1,
    )

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", _spawn(process)):
        with pytest.raises(PathNotFoundError) as excinfo:
            asyncio.run(SubversionLogSource().get_log(URL))

    assert excinfo.value.path == URL
    assert "E160013" in str(excinfo.value)


def test_other_failure_maps_to_log_retrieval_error() -> None:
    process = _FakeProcess(stderr="svn: E170013: Unable to connect\n", returncode=1)

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", _spawn(process)):
        with pytest.raises(LogRetrievalError) as excinfo:
            asyncio.run(SubversionLogSource().get_log(URL))

    assert excinfo.value.detail == "svn: E170013: Unable to connect"


def test_failure_without_stderr_reports_exit_status() -> None:
    process = _FakeProcess(returncode=3)

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", _spawn(process)):
        with pytest.raises(LogRetrievalError, match="exited with status 3"):
            asyncio.run(SubversionLogSource().list_children(URL))


def test_timeout_kills_process() -> None:
    process = _FakeProcess(hang=True)

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", _spawn(process)):
        with pytest.raises(LogRetrievalError, match="timed out"):
            asyncio.run(SubversionLogSource(timeout=0.05).get_log(URL))

    assert process.killed


def test_missing_executable_raises_not_found() -> None:
    spawn = AsyncMock(side_effect=FileNotFoundError("svn"))

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", spawn):
        with pytest.raises(VCSNotFoundError):
            asyncio.run(SubversionLogSource(executable="/opt/missing/svn").get_log(URL))


def test_cancelled_call_kills_process() -> None:
    process = _FakeProcess(hang=True)

    async def _cancel_in_flight() -> None:
        task = asyncio.create_task(SubversionLogSource().get_log(URL))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    with patch("devtoolz.core.vcs.subversion.asyncio.create_subprocess_exec", _spawn(process)):
        asyncio.run(_cancel_in_flight())

    assert process.killed
