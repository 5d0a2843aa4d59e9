"""Load and validate the devtoolz configuration file.

The file is JSON (``config.json`` by default) or YAML and uses camelCase
keys::

    {
      "svnRepos": "https://svn.example.com/repos/",
      "mergeConfig": {"trunkUri": "trunk/", "branchesUri": "branches/", "logLimit": 1000},
      "mergeProjects": [{"name": "EntityModels", "projectUri": "EntityModels/", "trunkUri": "Trunk/"}],
      "mergeBranchGroups": [{"name": "release-4.2", "projects": ["EntityModels"]}]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from devtoolz.merge.models import BranchGroup, ProjectMergeTarget, join_uri

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "config.json"
DEFAULT_TRUNK_SEGMENT = "trunk/"
DEFAULT_BRANCHES_SEGMENT = "branches/"
DEFAULT_LOG_LIMIT = 1000
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_SVN_TIMEOUT = 120.0


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or invalid."""


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class MergeConfigSection(_ConfigModel):
    """Path segments and limits shared by every project."""

    trunk_uri: str = Field(DEFAULT_TRUNK_SEGMENT, alias="trunkUri")
    branches_uri: str = Field(DEFAULT_BRANCHES_SEGMENT, alias="branchesUri")
    log_limit: int = Field(DEFAULT_LOG_LIMIT, alias="logLimit", gt=0)


class MergeProjectConfig(_ConfigModel):
    """A project entry with optional per-project path overrides."""

    name: str = Field(min_length=1)
    project_uri: str | None = Field(None, alias="projectUri")
    trunk_uri: str | None = Field(None, alias="trunkUri")

    @property
    def resolved_project_uri(self) -> str:
        return self.project_uri or f"{self.name}/"


class BranchGroupConfig(_ConfigModel):
    """A named set of projects sharing one branch."""

    name: str = Field(min_length=1)
    projects: list[str] = Field(default_factory=list)

    def to_branch_group(self) -> BranchGroup:
        return BranchGroup(name=self.name, projects=tuple(self.projects))


class DevtoolzConfig(_ConfigModel):
    """Top-level configuration."""

    svn_repos: str = Field(alias="svnRepos", min_length=1)
    merge_config: MergeConfigSection = Field(default_factory=MergeConfigSection, alias="mergeConfig")
    merge_projects: list[MergeProjectConfig] = Field(default_factory=list, alias="mergeProjects")
    merge_branch_groups: list[BranchGroupConfig] = Field(
        default_factory=list, alias="mergeBranchGroups"
    )
    noise_patterns: list[str] = Field(default_factory=list, alias="noisePatterns")
    max_concurrency: int = Field(DEFAULT_MAX_CONCURRENCY, alias="maxConcurrency", ge=1)
    svn_timeout: float = Field(DEFAULT_SVN_TIMEOUT, alias="svnTimeout", gt=0)

    @field_validator("merge_projects")
    @classmethod
    def _unique_project_names(cls, value: list[MergeProjectConfig]) -> list[MergeProjectConfig]:
        names = [project.name for project in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate project name(s): {', '.join(duplicates)}")
        return value

    @property
    def branch_groups(self) -> list[BranchGroup]:
        return [group.to_branch_group() for group in self.merge_branch_groups]

    def _project_entry(self, name: str) -> MergeProjectConfig | None:
        for project in self.merge_projects:
            if project.name == name:
                return project
        return None

    def _target(self, name: str, project_uri: str, trunk_uri: str | None) -> ProjectMergeTarget:
        defaults = self.merge_config
        return ProjectMergeTarget(
            project=name,
            trunk_path=join_uri(self.svn_repos, project_uri, trunk_uri or defaults.trunk_uri),
            branches_path=join_uri(self.svn_repos, project_uri, defaults.branches_uri),
        )

    def build_registry(self) -> dict[str, ProjectMergeTarget]:
        """Resolve every configured project to its repository locations."""
        return {
            project.name: self._target(
                project.name, project.resolved_project_uri, project.trunk_uri
            )
            for project in self.merge_projects
        }

    def target_for(self, name: str) -> ProjectMergeTarget:
        """Resolve any project name, honoring a configured override if present."""
        entry = self._project_entry(name)
        if entry is not None:
            return self._target(name, entry.resolved_project_uri, entry.trunk_uri)
        return self._target(name, f"{name}/", None)


def _read_payload(config_path: Path) -> Any:
    text = config_path.read_text(encoding="utf-8")
    if config_path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc

    yaml = YAML(typ="safe")
    try:
        return yaml.load(text)
    except YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc


def load_config(config_path: Path) -> DevtoolzConfig:
    """Load and validate the configuration at *config_path*.

    Raises:
        ConfigError: If the file is missing, unreadable or fails validation.
    """
    if not config_path.is_file():
        raise ConfigError(f"Cannot locate --config value: {config_path}")

    try:
        payload = _read_payload(config_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")

    try:
        config = DevtoolzConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    logger.debug(
        "Loaded %s: %d project(s), %d branch group(s)",
        config_path,
        len(config.merge_projects),
        len(config.merge_branch_groups),
    )
    return config
