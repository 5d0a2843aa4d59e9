"""
Subversion Backend
==================

Implements ``VersionControlLogSource`` on top of the ``svn`` command-line
client. Every call runs ``svn`` as an asyncio subprocess with XML output so
many projects can be queried concurrently without blocking the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from .exceptions import LogRetrievalError, PathNotFoundError, VCSNotFoundError
from .types import CommitLogEntry, DirectoryEntry, EntryKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0

# svn reports a missing path under several codes depending on the RA layer
# (E160013 file://, E170000 http(s)/svn://, W160013 on log, E200009 summary).
_NOT_FOUND_CODES = re.compile(r"\b[EW](160013|170000|200009|160005)\b")
_NOT_FOUND_TEXT = ("path not found", "doesn't exist", "non-existent")


@dataclass
class _SvnCommandResult:
    returncode: int
    stdout: str
    stderr: str


def is_not_found_error(stderr: str) -> bool:
    """Return True if svn stderr describes a missing repository path."""
    if _NOT_FOUND_CODES.search(stderr):
        return True
    lowered = stderr.lower()
    return any(text in lowered for text in _NOT_FOUND_TEXT)


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()


def _first_line(text: str) -> str:
    for line in text.splitlines():
        stripped = line.strip()
        if stripped:
            return stripped
    return ""


def parse_log_xml(path: str, xml_text: str) -> list[CommitLogEntry]:
    """Parse ``svn log --xml`` output into entries, preserving order.

    Raises:
        LogRetrievalError: If the document or a revision attribute is malformed.
    """
    if not xml_text.strip():
        return []
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise LogRetrievalError(path, f"malformed log output: {exc}") from exc

    entries: list[CommitLogEntry] = []
    for node in root.iter("logentry"):
        raw_revision = node.get("revision")
        try:
            revision = int(raw_revision)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise LogRetrievalError(path, f"invalid revision {raw_revision!r}") from exc
        entries.append(
            CommitLogEntry(
                revision=revision,
                author=node.findtext("author") or "",
                message=node.findtext("msg") or "",
            )
        )
    return entries


def parse_list_xml(path: str, xml_text: str) -> list[DirectoryEntry]:
    """Parse ``svn list --xml`` output into directory entries."""
    if not xml_text.strip():
        return []
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise LogRetrievalError(path, f"malformed list output: {exc}") from exc

    children: list[DirectoryEntry] = []
    for node in root.iter("entry"):
        name = node.findtext("name")
        if not name:
            continue
        kind = EntryKind.FILE if node.get("kind") == "file" else EntryKind.DIR
        children.append(DirectoryEntry(name=name, kind=kind))
    return children


class SubversionLogSource:
    """Read commit logs and listings from a Subversion repository."""

    def __init__(
        self,
        executable: str = "svn",
        timeout: float = DEFAULT_TIMEOUT,
        extra_args: list[str] | None = None,
    ) -> None:
        self.executable = executable
        self.timeout = timeout
        self.extra_args = list(extra_args or [])

    async def _run_svn(self, args: list[str], path: str) -> _SvnCommandResult:
        cmd = [self.executable, *args, "--xml", "--non-interactive", *self.extra_args, path]
        logger.debug("Running %s", " ".join(cmd))
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise VCSNotFoundError(
                f"{self.executable} is not available. Please install Subversion."
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            await _terminate(process)
            raise LogRetrievalError(path, f"svn {args[0]} timed out after {self.timeout:g}s") from exc
        except BaseException:
            # Cancelled by a failing sibling; never leave svn running.
            await _terminate(process)
            raise

        return _SvnCommandResult(
            returncode=process.returncode if process.returncode is not None else 1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    def _raise_for_result(self, result: _SvnCommandResult, path: str) -> None:
        if result.returncode == 0:
            return
        detail = _first_line(result.stderr) or f"svn exited with status {result.returncode}"
        if is_not_found_error(result.stderr):
            raise PathNotFoundError(path, detail)
        raise LogRetrievalError(path, detail)

    async def get_log(
        self,
        path: str,
        limit: int | None = None,
        stop_at_branch_creation: bool = False,
    ) -> list[CommitLogEntry]:
        args = ["log"]
        if limit is not None:
            args.extend(["--limit", str(limit)])
        if stop_at_branch_creation:
            args.append("--stop-on-copy")

        result = await self._run_svn(args, path)
        self._raise_for_result(result, path)
        entries = parse_log_xml(path, result.stdout)
        logger.debug("Fetched %d log entries from %s", len(entries), path)
        return entries

    async def list_children(self, path: str) -> list[DirectoryEntry]:
        result = await self._run_svn(["list"], path)
        self._raise_for_result(result, path)
        return parse_list_xml(path, result.stdout)
