"""
VCS Detection Module
====================

Tool detection and the get_log_source() factory function. Detects whether
the Subversion client is installed and returns a configured backend.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from functools import lru_cache
from typing import TYPE_CHECKING

from .exceptions import VCSNotFoundError
from .subversion import DEFAULT_TIMEOUT, SubversionLogSource

if TYPE_CHECKING:
    from .protocol import VersionControlLogSource


# =============================================================================
# Tool Detection Functions
# =============================================================================


@lru_cache(maxsize=1)
def is_svn_available() -> bool:
    """
    Check if svn is installed and working.

    Returns:
        True if svn is installed and responds to --version, False otherwise.
    """
    if shutil.which("svn") is None:
        return False
    try:
        result = subprocess.run(
            ["svn", "--version", "--quiet"],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, OSError):
        return False


@lru_cache(maxsize=1)
def get_svn_version() -> str | None:
    """
    Get installed svn version, or None if not installed.

    Returns:
        Version string (e.g., "1.14.2") or None if svn is not available.
    """
    if not is_svn_available():
        return None
    try:
        result = subprocess.run(
            ["svn", "--version", "--quiet"],
            capture_output=True,
            timeout=5,
            text=True,
        )
        if result.returncode != 0:
            return None
        # svn --version --quiet prints just the version, e.g. "1.14.2"
        output = result.stdout.strip()
        match = re.search(r"(\d+\.\d+\.\d+)", output)
        if match:
            return match.group(1)
        return output or "unknown"
    except (subprocess.TimeoutExpired, OSError):
        return None


# =============================================================================
# Factory Function
# =============================================================================


def get_log_source(timeout: float = DEFAULT_TIMEOUT) -> "VersionControlLogSource":
    """
    Factory function returning the log source for the configured repository.

    Args:
        timeout: Seconds allowed for each backend call.

    Raises:
        VCSNotFoundError: The svn client is not available.
    """
    if not is_svn_available():
        raise VCSNotFoundError(
            "svn is not available. Please install a Subversion command-line client:\n"
            "  - https://subversion.apache.org/packages.html"
        )
    return SubversionLogSource(timeout=timeout)


# =============================================================================
# Cache Management (for testing)
# =============================================================================


def _clear_detection_cache() -> None:
    """
    Clear the detection cache. For testing purposes only.
    """
    is_svn_available.cache_clear()
    get_svn_version.cache_clear()
