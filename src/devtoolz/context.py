"""Explicit run context threaded through merge-status resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from devtoolz.config import DevtoolzConfig
from devtoolz.core.vcs import VersionControlLogSource
from devtoolz.merge.filters import (
    DEFAULT_NOISE_PATTERNS,
    SCAFFOLDING_NOISE_PATTERNS,
    build_noise_patterns,
)


@dataclass(frozen=True)
class RunContext:
    """Everything one invocation needs, resolved once up front."""

    config: DevtoolzConfig
    target_branch: str
    log_source: VersionControlLogSource
    log_limit: int
    author: str | None = None
    noise_patterns: tuple[str, ...] = DEFAULT_NOISE_PATTERNS
    fail_fast: bool = False
    max_concurrency: int = 8

    def __post_init__(self) -> None:
        if not self.target_branch or not self.target_branch.strip():
            raise ValueError("target branch must be a non-empty string")
        if self.log_limit < 1:
            raise ValueError("log limit must be a positive integer")
        if self.max_concurrency < 1:
            raise ValueError("max concurrency must be >= 1")

    @classmethod
    def create(
        cls,
        config: DevtoolzConfig,
        target_branch: str,
        log_source: VersionControlLogSource,
        *,
        log_limit: int | None = None,
        author: str | None = None,
        fail_fast: bool = False,
        include_scaffolding: bool = False,
        extra_noise: Iterable[str] = (),
    ) -> RunContext:
        """Build a context, applying config defaults for unset options."""
        groups: list[Iterable[str]] = [DEFAULT_NOISE_PATTERNS]
        if include_scaffolding:
            groups.append(SCAFFOLDING_NOISE_PATTERNS)
        groups.append(config.noise_patterns)
        groups.append(extra_noise)
        return cls(
            config=config,
            target_branch=target_branch,
            log_source=log_source,
            log_limit=log_limit if log_limit is not None else config.merge_config.log_limit,
            author=author or None,
            noise_patterns=build_noise_patterns(*groups),
            fail_fast=fail_fast,
            max_concurrency=config.max_concurrency,
        )
