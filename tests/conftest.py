from __future__ import annotations

import json
from pathlib import Path

import pytest

from devtoolz.config import DevtoolzConfig
from vcs_fakes import SAMPLE_CONFIG, FakeLogSource, make_entry


@pytest.fixture()
def fake_source() -> FakeLogSource:
    return FakeLogSource()


@pytest.fixture()
def commit():
    return make_entry


@pytest.fixture()
def sample_config() -> DevtoolzConfig:
    return DevtoolzConfig.model_validate(SAMPLE_CONFIG)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(SAMPLE_CONFIG, indent=2), encoding="utf-8")
    return path
